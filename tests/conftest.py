"""Shared fixtures: point config, database and status tracker at a temp dir."""
import pytest

from mci_core import config, db, status


@pytest.fixture
def mci_env(tmp_path):
    """Isolated MCI environment; yields the servers root."""
    servers_dir = tmp_path / "servers"

    config.reset_config()
    manager = config.ConfigManager(tmp_path / "config.json")
    manager.update(data_dir=str(tmp_path / "data"), servers_dir=str(servers_dir))
    config._config_instance = manager

    db.reset_db()
    db._db_instance = db.DBManager(tmp_path / "test.db")
    status.reset_status_tracker()

    yield servers_dir

    db.reset_db()
    config.reset_config()
    status.reset_status_tracker()
