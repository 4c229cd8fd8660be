"""Configuration management for MCI."""
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class MCIConfig(BaseModel):
    """Global MCI Configuration."""

    data_dir: Optional[str] = Field(
        default=None, description="Root directory for MCI data; defaults to the OS user data dir"
    )
    servers_dir: Optional[str] = Field(
        default=None, description="Servers root; defaults to <data_dir>/servers"
    )
    default_memory_mb: int = Field(default=2048, ge=0, description="Default memory for new instances")
    default_port: int = Field(default=25565, ge=0, le=65535, description="Default server port")
    default_version: str = Field(default="1.20.4", description="Default Minecraft version")
    log_level: str = Field(default="INFO", description="Logging level")


class ConfigManager:
    """Manages loading and saving of configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize the config manager.

        Args:
            config_path: Path to the config file. If None, uses default location.
        """
        if config_path:
            self.config_path = config_path
        else:
            self.config_path = Path.home() / ".mci" / "config.json"

        self._config: Optional[MCIConfig] = None

    @property
    def config(self) -> MCIConfig:
        """Get the current configuration (lazy loading)."""
        if self._config is None:
            self._load()
        return self._config  # type: ignore

    def _load(self) -> None:
        """Load config from file."""
        if not self.config_path.exists():
            logger.debug("No config file found, using defaults")
            self._config = MCIConfig()
            return

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._config = MCIConfig(**data)
            logger.debug(f"Configuration loaded from {self.config_path}")
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid config file, using defaults: {e}")
            self._config = MCIConfig()
        except Exception as e:
            logger.error(f"Error loading config: {e}")
            self._config = MCIConfig()

    def save(self) -> None:
        """Save config to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(self.config.model_dump_json(indent=2))
        logger.debug(f"Configuration saved to {self.config_path}")

    def get(self) -> MCIConfig:
        """Get the current configuration."""
        return self.config

    def update(self, **kwargs) -> None:
        """Update configuration values.

        Args:
            **kwargs: Configuration values to update.
        """
        current = self.config.model_dump()
        current.update(kwargs)
        self._config = MCIConfig(**current)

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._config = MCIConfig()


# Lazy singleton pattern
_config_instance: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the global config manager instance (lazy initialization)."""
    global _config_instance
    if _config_instance is None:
        _config_instance = ConfigManager()
    return _config_instance


def get_config() -> MCIConfig:
    """Get the current configuration."""
    return get_config_manager().config


def reset_config() -> None:
    """Reset the global config instance. Useful for testing."""
    global _config_instance
    _config_instance = None


def get_data_dir() -> Path:
    """Return the MCI data directory, falling back to the OS user data dir."""
    config = get_config()
    if config.data_dir:
        return Path(config.data_dir).expanduser()
    # Lazy import to avoid circular dependency
    from platform_adapters import get_adapter
    return get_adapter().user_data_dir("mci")


def get_servers_dir() -> Path:
    """Return the process-wide servers root.

    Every instance lives at ``<servers_root>/<id>``. The directory is not
    created here.
    """
    config = get_config()
    if config.servers_dir:
        return Path(config.servers_dir).expanduser()
    return get_data_dir() / "servers"
