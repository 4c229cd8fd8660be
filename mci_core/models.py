"""Instance record and the enumerations attached to it."""
import uuid
from enum import Enum
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .config import get_servers_dir
from .exceptions import ValidationError

DEFAULT_JAR_FILE = "server.jar"


class ServerType(str, Enum):
    """Supported server distributions.

    The value is the display name, which is also what gets persisted, so the
    strings below must not change.
    """

    VANILLA = "Vanilla"
    PAPERMC = "PaperMC"
    FORGE = "Forge"
    NEOFORGE = "NeoForge"
    FABRIC = "FabricMC"
    SPIGOT = "SpigotMC"

    def display_name(self) -> str:
        return self.value

    @classmethod
    def all_variants(cls) -> List["ServerType"]:
        """All variants in declaration order, for populating selection lists."""
        return list(cls)

    @classmethod
    def parse(cls, text: str) -> "ServerType":
        """Resolve a variant from its name or display name, case-insensitively.

        "paper", "PaperMC" and "papermc" all resolve to PAPERMC.

        Raises:
            ValidationError: If nothing matches.
        """
        wanted = text.strip().lower()
        for variant in cls:
            aliases = {
                variant.name.lower(),
                variant.value.lower(),
                variant.value.lower().removesuffix("mc"),
            }
            if wanted in aliases:
                return variant
        choices = ", ".join(v.display_name() for v in cls)
        raise ValidationError("type", f"Server type must be one of: {choices}")


class ServerStatus(str, Enum):
    """Lifecycle label of a running instance. Runtime-only, never persisted."""

    STOPPED = "stopped"
    STOPPING = "stopping"
    STARTING = "starting"
    RUNNING = "running"

    def describe(self) -> str:
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    ServerStatus.STOPPED: "Stopped.",
    ServerStatus.STOPPING: "Stopping!!",
    ServerStatus.STARTING: "Starting! Please Wait.",
    ServerStatus.RUNNING: "Running, Go ahead and join.",
}


class ServerConfig(BaseModel):
    """One managed server instance.

    ``id`` and ``path`` are fixed at creation; everything else may be
    reassigned by the owning manager. Callers address an instance by ``id``.
    """
    model_config = ConfigDict(validate_assignment=True, from_attributes=True)

    id: str = Field(frozen=True)
    name: str
    server_type: ServerType
    version: str
    port: int = Field(ge=0, le=65535)
    memory_mb: int = Field(ge=0)
    path: Path = Field(frozen=True, repr=False)
    jar_file: str = DEFAULT_JAR_FILE

    @classmethod
    def create(
        cls,
        name: str,
        server_type: ServerType,
        version: str,
        port: int,
        memory_mb: int,
    ) -> "ServerConfig":
        """Build a new record with a fresh id and its derived path.

        Nothing is written to disk; provisioning the directory is up to the
        caller.
        """
        instance_id = str(uuid.uuid4())
        return cls(
            id=instance_id,
            name=name,
            server_type=server_type,
            version=version,
            port=port,
            memory_mb=memory_mb,
            path=get_servers_dir() / instance_id,
        )

    @property
    def jar_path(self) -> Path:
        return self.path / self.jar_file
