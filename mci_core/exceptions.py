"""MCI Exception Hierarchy."""
from pathlib import Path


class MCIError(Exception):
    """Base exception for all MCI errors."""
    pass


class InstanceNotFoundError(MCIError):
    """Raised when a server instance is not found."""
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Server instance not found: {identifier}")


class PropertiesError(MCIError):
    """Base exception for server.properties persistence errors."""
    pass


class ReadError(PropertiesError):
    """Raised when an instance file exists but cannot be read or decoded as text."""
    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Failed to read {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class WriteError(PropertiesError):
    """Raised when changes cannot be persisted."""
    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Failed to write {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class DecodeError(MCIError):
    """Raised when ops.json is not valid JSON or does not match the roster shape."""
    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Malformed operator roster: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ConfigError(MCIError):
    """Base exception for configuration errors."""
    pass


class ValidationError(MCIError):
    """Raised when input validation fails."""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation error for '{field}': {message}")


class InstanceRunningError(MCIError):
    """Raised when an operation requires a stopped instance."""
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Server instance is not stopped: {identifier}")
