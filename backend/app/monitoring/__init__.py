"""
Noticias API Monitoring Module

Prometheus instruments for the cache and the record store.
"""
