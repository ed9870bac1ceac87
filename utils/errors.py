# utils/errors.py
import logging
from contextlib import contextmanager

from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base for errors that end a single request with a readable message."""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class BadRequestError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class InvalidTransitionError(AppError):
    status_code = 409


class ProviderError(AppError):
    status_code = 503


@contextmanager
def provider_errors(message):
    """Re-raise database failures as ProviderError(message).

    The original exception is logged and chained; callers only ever see
    the message.
    """
    try:
        yield
    except PyMongoError as exc:
        logger.exception("Database operation failed: %s", message)
        raise ProviderError(message) from exc
