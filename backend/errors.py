# backend/errors.py
"""Error taxonomy shared by the services and the HTTP layer.

Services raise these exceptions; ``main`` renders them as
``{"error": message}`` with the class status code.
"""
import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401


class Expired(Unauthorized):
    status_code = 401


class ServerError(AppError):
    status_code = 500


def require_fields(fields: dict, names) -> None:
    """Raise ValidationError naming every field that is None or an empty string."""
    missing = [name for name in names if fields.get(name) is None or fields.get(name) == ""]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


@contextmanager
def server_errors(message: str):
    """Re-raise anything that is not an AppError as a generic ServerError."""
    try:
        yield
    except AppError:
        raise
    except Exception:
        logger.exception(message)
        raise ServerError(message)
