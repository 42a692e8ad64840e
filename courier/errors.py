"""
Error taxonomy.

Services raise these; the error handler registered in create_app turns them
into the response envelope. Callers compare by class, never by message.
"""

from contextlib import contextmanager

from sqlalchemy.exc import DataError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError


class CourierError(Exception):
    status_code = 500
    message = "Internal server error"
    # Whether str(cause) may be echoed back to the client in `errors`
    expose_detail = True

    def __init__(self, message=None, errors=None, detail=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.errors = errors
        self.detail = detail

    def payload_errors(self):
        if self.errors is not None:
            return self.errors
        if self.detail and self.expose_detail:
            return [self.detail]
        return None


class ValidationFailed(CourierError):
    status_code = 422
    message = "Please fix the given errors"

    def __init__(self, errors, message=None):
        super().__init__(message, errors=errors)


class InvalidReference(ValidationFailed):
    """A referenced entity (store, city) does not exist."""


class NotFound(CourierError):
    status_code = 404
    message = "Resource not found"


class AccessDenied(CourierError):
    status_code = 401
    message = "Unauthorized"


class InvalidToken(AccessDenied):
    status_code = 403


class SessionExpired(CourierError):
    status_code = 403
    message = "session expired"


class Conflict(CourierError):
    status_code = 409
    message = "Resource already exists"


class InvalidCredentials(CourierError):
    status_code = 401
    message = "The user credentials were incorrect."
    expose_detail = False


class InvalidAccessToken(CourierError):
    status_code = 401
    message = "invalid access token"


class SessionCreationFailed(CourierError):
    status_code = 500
    message = "failed to create session"
    expose_detail = False


class TokenGenerationFailed(CourierError):
    status_code = 500
    message = "failed to sign token"


class TransientStorageFailure(CourierError):
    """Storage timed out or dropped the connection; safe to retry."""

    status_code = 503
    message = "Storage temporarily unavailable, please retry"


class StartupFailure(CourierError):
    """The service cannot start (database unreachable, migration failed)."""

    message = "Service failed to start"


@contextmanager
def storage_errors(conflict_message=None):
    """
    Translate storage exceptions into the taxonomy; others pass through.
    DataError is rejected input, so it is reported as a validation failure
    without the driver text.
    """
    try:
        yield
    except IntegrityError as e:
        raise Conflict(conflict_message, detail=str(e.orig)) from e
    except DataError as e:
        raise ValidationFailed({"body": ["A value is out of range for its field."]}) from e
    except (OperationalError, PoolTimeoutError) as e:
        raise TransientStorageFailure(detail=str(e)) from e
