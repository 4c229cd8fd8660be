"""Unit tests for instance records, server types and status labels."""
import pytest
from pathlib import Path
from unittest.mock import patch

from pydantic import ValidationError as PydanticValidationError

from mci_core.exceptions import ValidationError
from mci_core.models import DEFAULT_JAR_FILE, ServerConfig, ServerStatus, ServerType


class TestServerType:
    """Tests for ServerType."""

    @pytest.mark.parametrize("server_type,expected", [
        (ServerType.VANILLA, "Vanilla"),
        (ServerType.PAPERMC, "PaperMC"),
        (ServerType.FORGE, "Forge"),
        (ServerType.NEOFORGE, "NeoForge"),
        (ServerType.FABRIC, "FabricMC"),
        (ServerType.SPIGOT, "SpigotMC"),
    ])
    def test_display_names(self, server_type, expected):
        assert server_type.display_name() == expected

    def test_all_variants_in_declaration_order(self):
        assert ServerType.all_variants() == [
            ServerType.VANILLA,
            ServerType.PAPERMC,
            ServerType.FORGE,
            ServerType.NEOFORGE,
            ServerType.FABRIC,
            ServerType.SPIGOT,
        ]

    @pytest.mark.parametrize("text,expected", [
        ("paper", ServerType.PAPERMC),
        ("PaperMC", ServerType.PAPERMC),
        ("fabric", ServerType.FABRIC),
        ("FabricMC", ServerType.FABRIC),
        ("  NEOFORGE ", ServerType.NEOFORGE),
        ("spigot", ServerType.SPIGOT),
        ("vanilla", ServerType.VANILLA),
    ])
    def test_parse(self, text, expected):
        assert ServerType.parse(text) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValidationError) as exc_info:
            ServerType.parse("purpur")
        assert "FabricMC" in str(exc_info.value)


class TestServerStatus:
    """Tests for ServerStatus labels."""

    def test_descriptions(self):
        assert ServerStatus.STOPPED.describe() == "Stopped."
        assert ServerStatus.STOPPING.describe() == "Stopping!!"
        assert ServerStatus.STARTING.describe() == "Starting! Please Wait."
        assert ServerStatus.RUNNING.describe() == "Running, Go ahead and join."

    def test_every_status_has_a_description(self):
        for status in ServerStatus:
            assert status.describe()


@pytest.fixture
def servers_root(tmp_path):
    root = tmp_path / "servers"
    with patch("mci_core.models.get_servers_dir", return_value=root):
        yield root


class TestServerConfig:
    """Tests for the ServerConfig record."""

    def test_create_populates_record(self, servers_root):
        server = ServerConfig.create("Survival", ServerType.PAPERMC, "1.20.4", 25565, 4096)

        assert server.name == "Survival"
        assert server.server_type is ServerType.PAPERMC
        assert server.version == "1.20.4"
        assert server.port == 25565
        assert server.memory_mb == 4096
        assert server.jar_file == DEFAULT_JAR_FILE == "server.jar"
        assert server.path == servers_root / server.id
        assert server.jar_path == servers_root / server.id / "server.jar"

    def test_identical_arguments_give_distinct_ids_and_paths(self, servers_root):
        a = ServerConfig.create("same", ServerType.VANILLA, "1.20.4", 25565, 2048)
        b = ServerConfig.create("same", ServerType.VANILLA, "1.20.4", 25565, 2048)
        assert a.id != b.id
        assert a.path != b.path

    def test_create_does_not_touch_disk(self, servers_root):
        server = ServerConfig.create("x", ServerType.FORGE, "1.20.1", 25565, 2048)
        assert not servers_root.exists()
        assert not server.path.exists()

    def test_id_and_path_are_immutable(self, servers_root):
        server = ServerConfig.create("x", ServerType.FORGE, "1.20.1", 25565, 2048)
        with pytest.raises(PydanticValidationError):
            server.id = "other"
        with pytest.raises(PydanticValidationError):
            server.path = Path("/elsewhere")

    def test_path_does_not_follow_rename(self, servers_root):
        server = ServerConfig.create("old", ServerType.FABRIC, "1.20.4", 25565, 2048)
        path = server.path
        server.name = "new"
        assert server.name == "new"
        assert server.path == path

    def test_mutable_fields(self, servers_root):
        server = ServerConfig.create("x", ServerType.SPIGOT, "1.20.4", 25565, 2048)
        server.port = 25566
        server.memory_mb = 8192
        server.version = "1.21"
        server.jar_file = "spigot.jar"
        assert (server.port, server.memory_mb, server.version) == (25566, 8192, "1.21")
        assert server.jar_path.name == "spigot.jar"

    @pytest.mark.parametrize("field,value", [
        ("port", 70000),
        ("port", -1),
        ("memory_mb", -5),
    ])
    def test_type_bounds_on_assignment(self, servers_root, field, value):
        server = ServerConfig.create("x", ServerType.VANILLA, "1.20.4", 25565, 2048)
        with pytest.raises(PydanticValidationError):
            setattr(server, field, value)

    def test_round_trip_through_json(self, servers_root):
        server = ServerConfig.create("x", ServerType.NEOFORGE, "1.20.4", 25565, 2048)
        restored = ServerConfig.model_validate_json(server.model_dump_json())
        assert restored.model_dump() == server.model_dump()
        assert '"NeoForge"' in server.model_dump_json()
