"""
Error types raised by the catalogue service.

Each error carries the HTTP status its transports answer with. Only
``RepositoryFailure`` signals an unexpected condition; the others are
ordinary outcomes a client can act on.
"""


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    status_code = 400


class NotFound(CatalogError):
    status_code = 404


class Forbidden(CatalogError):
    status_code = 403


class RepositoryFailure(CatalogError):
    status_code = 500
