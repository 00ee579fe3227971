"""
Noticias Domain Exceptions

Exceptions raised by the noticias read/write path. The cache never raises;
record-store failures are wrapped here and mapped to HTTP responses by the
handlers registered in main.
"""

from typing import Optional, Any, Dict


class NoticiaException(Exception):
    """Base exception for noticia operations.

    Carries a stable error code and optional details so handlers can render
    a consistent error body.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class NoticiaNotFoundError(NoticiaException):
    """Raised when the requested noticia id does not exist."""

    status_code = 404

    def __init__(self, noticia_id: int):
        super().__init__(
            message=f"Notícia com ID {noticia_id} não encontrada",
            error_code="NOTICIA_NOT_FOUND",
            details={"noticia_id": noticia_id},
        )
        self.noticia_id = noticia_id


class NoticiaPersistenceError(NoticiaException):
    """Raised when the record store fails unexpectedly during a read or write."""

    status_code = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=message, error_code="NOTICIA_PERSISTENCE_ERROR", details=details
        )
        if original_error:
            self.__cause__ = original_error
