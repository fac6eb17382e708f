"""Error kinds surfaced by the API.

Every failure a handler wants the client to see is a ``TaskboardError``
subclass tagged with an ``ErrorKind``. The app factory registers a single
handler that maps the kind to a status code through ``STATUS_BY_KIND``;
anything else is treated as internal and answered with a generic 500.
"""
from enum import Enum


class ErrorKind(Enum):
    VALIDATION = "validation"
    DUPLICATE_USERNAME = "duplicate_username"
    DUPLICATE_EMAIL = "duplicate_email"
    UNAUTHENTICATED = "unauthenticated"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE_USERNAME: 409,
    ErrorKind.DUPLICATE_EMAIL: 409,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class TaskboardError(Exception):
    kind = ErrorKind.INTERNAL
    default_message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def status_code(self):
        return STATUS_BY_KIND[self.kind]


class ValidationError(TaskboardError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request body"


class DuplicateUsernameError(TaskboardError):
    kind = ErrorKind.DUPLICATE_USERNAME
    default_message = "Username is already in use"


class DuplicateEmailError(TaskboardError):
    kind = ErrorKind.DUPLICATE_EMAIL
    default_message = "Email is already in use"


class UnauthenticatedError(TaskboardError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Unauthorized"


class InvalidCredentialsError(TaskboardError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid credentials"


class NotFoundError(TaskboardError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not Found"


class ConfigurationError(RuntimeError):
    """A required setting (database URI, signing secret) is missing."""
