"""
MCI Core Module - Minecraft server instance records and their on-disk files.
"""
__version__ = "0.1.0"

from .exceptions import (
    MCIError,
    InstanceNotFoundError,
    InstanceRunningError,
    PropertiesError,
    ReadError,
    WriteError,
    DecodeError,
    ConfigError,
    ValidationError,
)
from .config import get_config, get_config_manager, get_servers_dir
from .models import ServerType, ServerStatus, ServerConfig
from .properties import ServerProperties
from .ops import OpEntry, load_ops
from .status import get_status_tracker
from . import api

__all__ = [
    "__version__",
    # Exceptions
    "MCIError",
    "InstanceNotFoundError",
    "InstanceRunningError",
    "PropertiesError",
    "ReadError",
    "WriteError",
    "DecodeError",
    "ConfigError",
    "ValidationError",
    # Config
    "get_config",
    "get_config_manager",
    "get_servers_dir",
    # Model
    "ServerType",
    "ServerStatus",
    "ServerConfig",
    "ServerProperties",
    "OpEntry",
    "load_ops",
    "get_status_tracker",
    # Submodules
    "api",
]
