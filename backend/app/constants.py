"""
Noticias API Global Constants

Centralized location for system-wide constants.
"""

# Application Constants
APP_NAME = "Noticias API"
APP_VERSION = "0.1.0"

# Response header carrying the unpaginated result count of a listing
TOTAL_COUNT_HEADER = "X-Total-Count"
