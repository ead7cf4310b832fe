"""Exception definitions for formforge"""


class FormforgeException(Exception):
    """Base exception for all formforge errors.

    All custom exceptions in formforge inherit from this class.
    Use this as a catch-all when you don't need to handle specific
    exception types.
    """

    pass


class ConfigException(FormforgeException):
    """Raised when configuration validation or loading fails.

    Use this exception when:
    - The configuration file cannot be found
    - The TOML syntax is invalid
    - Configuration validation fails (missing required fields, invalid values)
    """

    pass


class ValidationException(FormforgeException):
    """Raised when user input is rejected before anything is mutated."""

    pass


class FieldValidationError(ValidationException):
    """Raised when a field description is rejected before synthesis.

    Use this exception when:
    - The trimmed field name is empty
    - A select or radio field has no options
    - A field name collides with a sibling field

    Nothing is mutated when this is raised.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(FormforgeException):
    """Raised when a lookup target does not exist."""

    pass


class BrandNotFoundError(NotFoundError):
    pass


class DefinitionNotFoundError(NotFoundError):
    pass


class FieldNotFoundError(NotFoundError):
    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class VersionNotFoundError(NotFoundError):
    def __init__(self, message: str, version: int | None = None):
        super().__init__(message)
        self.version = version


class ConflictError(FormforgeException):
    """Raised when a name is already taken within a brand."""

    pass


class VersionConflictError(FormforgeException):
    """Raised when a version number could not be allocated.

    Concurrent saves on the same definition are retried; this is only
    raised once every retry lost the race.
    """

    pass
