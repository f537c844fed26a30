"""Exception types shared across services, persistence and coordinators."""


class ConfigurationError(RuntimeError):
    """Raised when the application is missing required user configuration."""


class MissingApiKeyError(ConfigurationError):
    """Raised when a translation is requested without an API key."""

    def __init__(self, message: str = "Translation API key is not configured. Add it in the settings."):
        super().__init__(message)


class StorageQuotaExceededError(RuntimeError):
    """Raised by a storage port when a write would exceed its capacity."""


class StorageFullError(RuntimeError):
    """Raised when a write still fails after cleaning up old data."""


class DuplicateWordError(ValueError):
    """Raised when adding a word that is already in the dictionary."""
