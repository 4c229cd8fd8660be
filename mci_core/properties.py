"""server.properties persistence for a server instance."""
import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .exceptions import ReadError, ValidationError, WriteError

logger = logging.getLogger(__name__)

PROPERTIES_FILENAME = "server.properties"

# Seed values for a brand-new instance, in the order they are presented.
COMMON_DEFAULTS: Tuple[Tuple[str, str], ...] = (
    ("server-port", "25565"),
    ("max-players", "20"),
    ("motd", "A Minecraft Server"),
    ("gamemode", "survival"),
    ("difficulty", "easy"),
    ("pvp", "true"),
    ("spawn-protection", "16"),
    ("online-mode", "true"),
    ("white-list", "false"),
    ("enable-command-block", "false"),
    ("spawn-monsters", "true"),
    ("spawn-animals", "true"),
    ("spawn-npcs", "true"),
    ("allow-flight", "false"),
    ("view-distance", "10"),
    ("simulation-distance", "10"),
    ("level-name", "world"),
    ("level-seed", ""),
    ("level-type", "minecraft:normal"),
)

# Known keys with their value types, used by ServerProperties.validate
PROPERTY_SCHEMA: Dict[str, dict] = {
    "allow-flight": {"type": "bool", "description": "Allow players to fly"},
    "allow-nether": {"type": "bool", "description": "Allow the Nether dimension"},
    "difficulty": {"type": "enum", "values": ["peaceful", "easy", "normal", "hard"]},
    "enable-command-block": {"type": "bool", "description": "Enable command blocks"},
    "enable-query": {"type": "bool", "description": "Enable GameSpy4 query"},
    "enable-rcon": {"type": "bool", "description": "Enable remote console"},
    "enforce-whitelist": {"type": "bool", "description": "Enforce whitelist"},
    "gamemode": {"type": "enum", "values": ["survival", "creative", "adventure", "spectator"]},
    "hardcore": {"type": "bool", "description": "Hardcore mode"},
    "level-name": {"type": "string", "description": "World folder name"},
    "level-seed": {"type": "string", "description": "World seed"},
    "level-type": {"type": "string", "description": "World type"},
    "max-players": {"type": "int", "min": 0, "max": 2147483647, "description": "Maximum players"},
    "motd": {"type": "string", "description": "Server message of the day"},
    "online-mode": {"type": "bool", "description": "Verify player accounts with Mojang"},
    "op-permission-level": {"type": "int", "min": 0, "max": 4},
    "pvp": {"type": "bool", "description": "Enable player vs player"},
    "query.port": {"type": "int", "min": 1, "max": 65535},
    "rcon.port": {"type": "int", "min": 1, "max": 65535},
    "server-port": {"type": "int", "min": 1, "max": 65535, "description": "Server port"},
    "simulation-distance": {"type": "int", "min": 3, "max": 32},
    "spawn-animals": {"type": "bool", "description": "Spawn animals"},
    "spawn-monsters": {"type": "bool", "description": "Spawn monsters"},
    "spawn-npcs": {"type": "bool", "description": "Spawn NPCs (villagers)"},
    "spawn-protection": {"type": "int", "min": 0, "description": "Spawn protection radius"},
    "view-distance": {"type": "int", "min": 3, "max": 32, "description": "View distance (chunks)"},
    "white-list": {"type": "bool", "description": "Enable whitelist"},
}


def parse_properties(content: str) -> Dict[str, str]:
    """Parse properties text into a mapping.

    Blank lines and ``#`` comments are skipped, each remaining line is split
    on its first ``=`` and both sides are trimmed. A later duplicate key
    overrides an earlier one.
    """
    properties: Dict[str, str] = {}
    # Only \n ends a line; a trailing \r is removed by strip()
    for line in content.split("\n"):
        line = line.strip()

        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            logger.debug(f"Ignoring properties line without '=': {line!r}")
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue
        properties[key] = value.strip()

    return properties


def render_properties(properties: Mapping[str, str]) -> str:
    """Render a mapping as properties text, one ``key=value`` line per key in sorted order."""
    return "".join(f"{key}={properties[key]}\n" for key in sorted(properties))


def _to_property_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


class ServerProperties:
    """In-memory view of an instance's server.properties.

    Changes stay in memory until :meth:`save` is called.
    """

    def __init__(self, properties: Optional[Mapping[str, Any]] = None):
        self._properties: Dict[str, str] = {}
        if properties:
            self.update(properties)

    @classmethod
    def load(cls, instance_path: Union[str, Path]) -> "ServerProperties":
        """Load server.properties from an instance directory.

        Args:
            instance_path: Path to the instance directory.

        Returns:
            The loaded properties; empty if the file does not exist yet.

        Raises:
            ReadError: If the file exists but cannot be read or decoded.
        """
        path = Path(instance_path) / PROPERTIES_FILENAME

        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"No server.properties at {path}, starting empty")
            return cls()
        except UnicodeDecodeError as e:
            raise ReadError(path, f"not valid UTF-8 text: {e.reason}") from e
        except OSError as e:
            raise ReadError(path, e.strerror or str(e)) from e

        properties = cls()
        properties._properties = parse_properties(content)
        logger.debug(f"Loaded {len(properties)} entries from {path}")
        return properties

    @classmethod
    def from_defaults(cls) -> "ServerProperties":
        """Fresh properties seeded from :meth:`common_defaults`."""
        return cls(dict(COMMON_DEFAULTS))

    def save(self, instance_path: Union[str, Path]) -> None:
        """Write server.properties into an instance directory.

        The content goes to a temporary file next to the target which is then
        renamed over it, so a reader sees either the old or the new file.

        Raises:
            WriteError: If the file cannot be written.
        """
        directory = Path(instance_path)
        path = directory / PROPERTIES_FILENAME
        content = render_properties(self._properties)

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="\n",
                dir=directory,
                prefix=f".{PROPERTIES_FILENAME}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise WriteError(path, e.strerror or str(e)) from e

        logger.info(f"Saved {len(self)} server properties to {path}")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._properties.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a property value in memory.

        Booleans are stored as ``true``/``false``, None as an empty string and
        anything else through ``str``.

        Raises:
            ValidationError: If the key or value cannot be represented in the file.
        """
        text = _to_property_value(value)
        if not key or key != key.strip() or key.startswith("#"):
            raise ValidationError(key or "key", "Property key must be non-empty and not a comment")
        if "=" in key or "\n" in key or "\r" in key:
            raise ValidationError(key, "Property key cannot contain '=' or line breaks")
        if "\n" in text or "\r" in text:
            raise ValidationError(key, "Property value cannot contain line breaks")
        if text != text.strip():
            raise ValidationError(key, "Property value cannot start or end with whitespace")
        self._properties[key] = text

    def update(self, updates: Mapping[str, Any]) -> None:
        for key, value in updates.items():
            self.set(key, value)

    def delete(self, key: str) -> bool:
        """Delete a property.

        Returns:
            True if key was deleted, False if not found.
        """
        if key in self._properties:
            del self._properties[key]
            return True
        return False

    def keys(self) -> List[str]:
        return sorted(self._properties)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._properties)

    def __contains__(self, key: object) -> bool:
        return key in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._properties)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServerProperties):
            return NotImplemented
        return self._properties == other._properties

    def __repr__(self) -> str:
        return f"<ServerProperties({len(self)} entries)>"

    @staticmethod
    def common_defaults() -> List[Tuple[str, str]]:
        """The reference table of common keys and their default values."""
        return list(COMMON_DEFAULTS)

    @staticmethod
    def validate(key: str, value: Any) -> bool:
        """Validate a property value against the schema.

        Args:
            key: Property key.
            value: Value to validate.

        Returns:
            True if valid, False otherwise. Unknown keys are always valid.
        """
        schema = PROPERTY_SCHEMA.get(key)
        if schema is None:
            return True

        prop_type = schema.get("type", "string")

        try:
            if prop_type == "bool":
                if isinstance(value, bool):
                    return True
                if isinstance(value, str):
                    return value.lower() in ("true", "false")
                return False

            elif prop_type == "int":
                if isinstance(value, bool):
                    return False
                int_val = int(value)
                min_val = schema.get("min", float("-inf"))
                max_val = schema.get("max", float("inf"))
                return min_val <= int_val <= max_val

            elif prop_type == "enum":
                return str(value).lower() in schema.get("values", [])

            return True

        except (ValueError, TypeError):
            return False

    @staticmethod
    def get_schema() -> Dict[str, dict]:
        return PROPERTY_SCHEMA
