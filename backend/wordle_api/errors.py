"""Error types raised by the service layer.

Each carries the HTTP status the API maps it to, so blueprints can let
them propagate and rely on the handlers registered in ``create_app``.
"""


class WordleError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(WordleError):
    """Missing or malformed input. Nothing was written."""

    status_code = 400


class NotFoundError(WordleError):
    """The referenced room does not exist."""

    status_code = 404


class ConflictError(WordleError):
    """The requested transition lost a race with a concurrent one."""

    status_code = 409


class TransientStoreError(WordleError):
    """The database could not be reached; the request may be retried."""

    status_code = 503
