"""Unit tests for the ops.json roster loader."""
import json
import pytest
from unittest.mock import patch

from mci_core.exceptions import DecodeError, MCIError, ReadError
from mci_core.ops import OPS_FILENAME, OpEntry, load_ops


def write_ops(path, data):
    (path / OPS_FILENAME).write_text(json.dumps(data), encoding="utf-8")


class TestLoadOps:
    """Tests for load_ops."""

    def test_missing_file_is_empty(self, tmp_path):
        assert load_ops(tmp_path) == []

    def test_empty_array(self, tmp_path):
        write_ops(tmp_path, [])
        assert load_ops(tmp_path) == []

    def test_entries_in_file_order(self, tmp_path):
        write_ops(tmp_path, [
            {"uuid": "069a79f4-44e9-4726-a5be-fca90e38aaf5", "name": "Notch", "level": 4, "bypassesPlayerLimit": False},
            {"uuid": "853c80ef-3c37-49fd-aa49-938b674adae6", "name": "jeb_", "level": 2, "bypassesPlayerLimit": True},
        ])
        ops = load_ops(tmp_path)

        assert [op.name for op in ops] == ["Notch", "jeb_"]
        assert ops[0].level == 4
        assert ops[0].bypasses_player_limit is False
        assert ops[1].bypasses_player_limit is True
        assert ops[1].uuid == "853c80ef-3c37-49fd-aa49-938b674adae6"

    def test_unknown_fields_are_ignored(self, tmp_path):
        write_ops(tmp_path, [
            {"uuid": "u", "name": "n", "level": 1, "bypassesPlayerLimit": False, "extra": 1},
        ])
        assert load_ops(tmp_path) == [OpEntry(uuid="u", name="n", level=1, bypasses_player_limit=False)]

    @pytest.mark.parametrize("body", [
        "not json at all",
        "",
        "[{\"uuid\": \"u\",",
    ])
    def test_malformed_json_raises_decode_error(self, tmp_path, body):
        (tmp_path / OPS_FILENAME).write_text(body, encoding="utf-8")
        with pytest.raises(DecodeError):
            load_ops(tmp_path)

    @pytest.mark.parametrize("data", [
        {"uuid": "u", "name": "n", "level": 4, "bypassesPlayerLimit": False},
        [{"name": "n", "level": 4, "bypassesPlayerLimit": False}],
        [{"uuid": "u", "name": "n", "level": "4", "bypassesPlayerLimit": False}],
        [{"uuid": "u", "name": "n", "level": 4, "bypassesPlayerLimit": "no"}],
        [{"uuid": "u", "name": "n", "level": 5, "bypassesPlayerLimit": False}],
        [{"uuid": "u", "name": "n", "level": -1, "bypassesPlayerLimit": False}],
        ["Notch"],
    ])
    def test_wrong_shape_raises_decode_error(self, tmp_path, data):
        write_ops(tmp_path, data)
        with pytest.raises(DecodeError) as exc_info:
            load_ops(tmp_path)
        assert exc_info.value.path == tmp_path / OPS_FILENAME

    def test_unreadable_file_raises_read_error(self, tmp_path):
        (tmp_path / OPS_FILENAME).mkdir()
        with pytest.raises(ReadError):
            load_ops(tmp_path)

    def test_permission_denied_raises_read_error(self, tmp_path):
        write_ops(tmp_path, [])
        with patch("pathlib.Path.read_bytes", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(ReadError) as exc_info:
                load_ops(tmp_path)
        assert exc_info.value.path == tmp_path / OPS_FILENAME
        assert exc_info.value.reason == "Permission denied"

    def test_missing_instance_directory_is_empty(self, tmp_path):
        assert load_ops(tmp_path / "not-provisioned") == []

    def test_errors_are_mci_errors(self):
        assert issubclass(DecodeError, MCIError)
        assert issubclass(ReadError, MCIError)


class TestOpEntry:
    """Tests for the OpEntry model."""

    def test_alias_and_field_name(self):
        by_alias = OpEntry.model_validate(
            {"uuid": "u", "name": "n", "level": 3, "bypassesPlayerLimit": True}
        )
        by_name = OpEntry(uuid="u", name="n", level=3, bypasses_player_limit=True)
        assert by_alias == by_name

    def test_dump_uses_file_field_names(self):
        entry = OpEntry(uuid="u", name="n", level=0, bypasses_player_limit=False)
        assert entry.model_dump(by_alias=True) == {
            "uuid": "u", "name": "n", "level": 0, "bypassesPlayerLimit": False,
        }
