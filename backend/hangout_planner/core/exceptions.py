"""
Application error types shared by the storage layer and the API
"""


class ConfigurationError(RuntimeError):
    """Raised when a required setting or backend is missing at startup or use time."""


class StorageError(RuntimeError):
    """Raised when the persistence backend fails an operation."""
