"""Read access to an instance's ops.json operator roster."""
import logging
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import DecodeError, ReadError

logger = logging.getLogger(__name__)

OPS_FILENAME = "ops.json"


class OpEntry(BaseModel):
    """One operator roster entry as written by the game server."""
    model_config = ConfigDict(strict=True, populate_by_name=True, frozen=True)

    uuid: str
    name: str
    level: int = Field(ge=0, le=4)
    bypasses_player_limit: bool = Field(alias="bypassesPlayerLimit")


_roster_adapter = TypeAdapter(List[OpEntry])


def load_ops(instance_path: Union[str, Path]) -> List[OpEntry]:
    """Load the operator roster of an instance.

    Args:
        instance_path: Path to the instance directory.

    Returns:
        Roster entries in file order; empty if ops.json does not exist.

    Raises:
        ReadError: If the file exists but cannot be read.
        DecodeError: If the content is not a JSON array of operator records.
    """
    path = Path(instance_path) / OPS_FILENAME

    try:
        content = path.read_bytes()
    except FileNotFoundError:
        logger.debug(f"No ops.json at {path}, roster is empty")
        return []
    except OSError as e:
        raise ReadError(path, e.strerror or str(e)) from e

    try:
        ops = _roster_adapter.validate_json(content)
    except PydanticValidationError as e:
        raise DecodeError(path, f"{e.error_count()} error(s): {e.errors()[0]['msg']}") from e

    logger.debug(f"Loaded {len(ops)} operators from {path}")
    return ops
