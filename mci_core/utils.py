"""Input validation helpers for MCI."""
import re

from .exceptions import ValidationError

MAX_SERVER_NAME_LENGTH = 64
MIN_MEMORY_MB = 512
MAX_MEMORY_MB = 64 * 1024

VERSION_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._+-]*$')


def validate_server_name(name: str) -> str:
    """Validate and normalize a server display name.

    Names are labels only (instances live under their id), so anything
    printable on one line is accepted.

    Raises:
        ValidationError: If the name is invalid.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("name", "Server name cannot be empty")

    if len(name) > MAX_SERVER_NAME_LENGTH:
        raise ValidationError("name", f"Server name cannot exceed {MAX_SERVER_NAME_LENGTH} characters")

    if not name.isprintable():
        raise ValidationError("name", "Server name cannot contain control characters")

    return name


def validate_version(version: str) -> str:
    """Validate a version string like "1.20.4" or "1.20.1-47.2.0".

    Raises:
        ValidationError: If the version is empty or has unexpected characters.
    """
    version = (version or "").strip()
    if not VERSION_PATTERN.match(version):
        raise ValidationError("version", "Version must start with a letter or digit and contain no spaces")
    return version


def validate_port(port: int) -> int:
    """Validate a port number.

    Raises:
        ValidationError: If the port is invalid.
    """
    if not isinstance(port, int) or isinstance(port, bool):
        raise ValidationError("port", "Port must be an integer")

    if port < 1 or port > 65535:
        raise ValidationError("port", "Port must be between 1 and 65535")

    if port < 1024:
        raise ValidationError("port", "Port must be 1024 or higher (ports below 1024 require root)")

    return port


def validate_memory_mb(memory_mb: int) -> int:
    """Validate a memory allocation in megabytes.

    Raises:
        ValidationError: If the allocation is out of range.
    """
    if not isinstance(memory_mb, int) or isinstance(memory_mb, bool):
        raise ValidationError("memory", "Memory must be an integer number of megabytes")

    if memory_mb < MIN_MEMORY_MB:
        raise ValidationError("memory", f"Memory allocation must be at least {MIN_MEMORY_MB}M")

    if memory_mb > MAX_MEMORY_MB:
        raise ValidationError("memory", "Memory allocation cannot exceed 64G")

    return memory_mb


def parse_memory(memory: str) -> int:
    """Convert a memory string like "2G" or "512M" (or a bare number of MB) to megabytes.

    Raises:
        ValidationError: If the string cannot be parsed.
    """
    match = re.match(r'^(\d+)([MG]?)$', (memory or "").strip().upper())
    if not match:
        raise ValidationError("memory", "Memory must be specified as a number optionally followed by M or G (e.g., '2G', '512M')")

    value = int(match.group(1))
    return value * 1024 if match.group(2) == "G" else value


def format_memory(memory_mb: int) -> str:
    """Format megabytes for display, e.g. 2048 -> "2G", 1536 -> "1536M"."""
    if memory_mb and memory_mb % 1024 == 0:
        return f"{memory_mb // 1024}G"
    return f"{memory_mb}M"
