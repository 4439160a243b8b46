"""Custom exception classes for the BINAH topic API."""

from typing import Optional


class BinahException(Exception):
    status_code = 500

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ConfigurationError(BinahException):
    """No database is configured for an operation that needs one."""

    def __init__(self, message: str = "Database not configured"):
        super().__init__(message, "CONFIGURATION_ERROR")


class NotFound(BinahException):
    status_code = 404

    def __init__(self, message: str = "Topic not found", topic_id: Optional[int] = None):
        self.topic_id = topic_id
        super().__init__(message, "NOT_FOUND")


class StorageError(BinahException):
    """The database rejected or failed to run a statement."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message, "STORAGE_ERROR")


class ServiceUnavailable(BinahException):
    status_code = 503

    def __init__(self, message: str = "Database not available"):
        super().__init__(message, "SERVICE_UNAVAILABLE")
