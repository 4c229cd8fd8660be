"""Unit tests for configuration management."""
import json
from pathlib import Path
from unittest.mock import patch, MagicMock

from mci_core import config
from mci_core.config import ConfigManager, MCIConfig


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_missing_file_uses_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path / "config.json")
        assert manager.config == MCIConfig()
        assert manager.config.default_port == 25565
        assert manager.config.default_memory_mb == 2048

    def test_loads_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"default_port": 25570, "servers_dir": "/srv/mc"}))
        manager = ConfigManager(path)
        assert manager.config.default_port == 25570
        assert manager.config.servers_dir == "/srv/mc"

    def test_invalid_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert ConfigManager(path).config == MCIConfig()

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        manager = ConfigManager(path)
        manager.update(default_version="1.21")
        manager.save()

        assert ConfigManager(path).config.default_version == "1.21"

    def test_reset(self, tmp_path):
        manager = ConfigManager(tmp_path / "config.json")
        manager.update(log_level="DEBUG")
        manager.reset()
        assert manager.config.log_level == "INFO"


class TestServersDir:
    """Tests for resolving the servers root."""

    def teardown_method(self):
        config.reset_config()

    def test_explicit_servers_dir(self, tmp_path):
        manager = ConfigManager(tmp_path / "config.json")
        manager.update(servers_dir=str(tmp_path / "srv"))
        config._config_instance = manager
        assert config.get_servers_dir() == tmp_path / "srv"

    def test_defaults_under_data_dir(self, tmp_path):
        manager = ConfigManager(tmp_path / "config.json")
        manager.update(data_dir=str(tmp_path / "data"))
        config._config_instance = manager
        assert config.get_servers_dir() == tmp_path / "data" / "servers"

    @patch("platform_adapters.get_adapter")
    def test_falls_back_to_platform_data_dir(self, mock_get_adapter, tmp_path):
        mock_adapter = MagicMock()
        mock_adapter.user_data_dir.return_value = Path("/home/test/.local/share/mci")
        mock_get_adapter.return_value = mock_adapter
        config._config_instance = ConfigManager(tmp_path / "config.json")

        assert config.get_servers_dir() == Path("/home/test/.local/share/mci/servers")
        mock_adapter.user_data_dir.assert_called_once_with("mci")
