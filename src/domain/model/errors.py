"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class DuplicateEmailError(DuplicateError):
    """Registration conflicts with an existing account's email."""

    def __init__(self, message: str = "Email already exists"):
        super().__init__(message)


class InvalidCredentialsError(DomainError):
    """Unknown email or wrong password. Both causes share one message."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InternalError(DomainError):
    """Unexpected failure. The real cause is logged, never returned."""

    def __init__(self, message: str = "Server error"):
        super().__init__(message)


class RepositoryError(DomainError):
    """Storage layer fault other than a uniqueness conflict."""


class NoFileError(ValidationError):
    """Upload request carried no file."""

    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message)


class FileTooLargeError(ValidationError):
    """Upload exceeds the configured size limit."""


class UnsupportedFileTypeError(ValidationError):
    """Upload content type is not in the configured allow-list."""


class UploadError(DomainError):
    """Blob store rejected or failed the upload."""


class ConfigurationError(DomainError):
    """Required configuration is missing or malformed."""
