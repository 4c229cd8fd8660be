"""Core API for MCI instance management."""
import logging
import shutil
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Mapping, Optional, Union

from .config import get_config, get_servers_dir
from .db import get_session, Instance
from .exceptions import (
    InstanceNotFoundError,
    InstanceRunningError,
    ValidationError,
    WriteError,
)
from .models import ServerConfig, ServerStatus, ServerType
from .ops import OpEntry, load_ops
from .properties import ServerProperties
from .status import get_status_tracker
from .utils import (
    validate_memory_mb,
    validate_port,
    validate_server_name,
    validate_version,
)

logger = logging.getLogger(__name__)

# One exclusive lock per instance id guards load/mutate/save sequences
_instance_locks: Dict[str, threading.Lock] = {}
_instance_locks_guard = threading.Lock()


@contextmanager
def instance_lock(instance_id: str) -> Generator[None, None, None]:
    """Hold the exclusive lock of one instance."""
    with _instance_locks_guard:
        lock = _instance_locks.setdefault(instance_id, threading.Lock())
    with lock:
        yield


def _to_config(instance: Instance) -> ServerConfig:
    return ServerConfig.model_validate(instance)


def _get_row(session, instance_id: str) -> Instance:
    instance = session.get(Instance, instance_id)
    if instance is None:
        raise InstanceNotFoundError(instance_id)
    return instance


def _validate_path_is_safe_for_deletion(instance_path: Path, instance_id: str) -> bool:
    """Validate that an instance directory is safe to delete.

    The path must sit directly under the servers root and be named after the
    instance id.

    Raises:
        ValidationError: If the path is not safe.
    """
    servers_dir = get_servers_dir()

    # Resolve paths to handle symlinks and ..
    try:
        resolved_path = instance_path.resolve()
        resolved_servers_dir = servers_dir.resolve()
    except (OSError, ValueError) as e:
        raise ValidationError("path", f"Cannot resolve instance path: {e}")

    if resolved_path.parent != resolved_servers_dir:
        logger.error(
            f"SECURITY: Attempted to delete path outside servers directory: {resolved_path}"
        )
        raise ValidationError(
            "path",
            f"Instance path '{resolved_path}' is not within the servers directory. "
            "Deletion blocked for security."
        )

    if resolved_path.name != instance_id:
        raise ValidationError(
            "path",
            f"Instance directory '{resolved_path.name}' does not match id '{instance_id}'"
        )

    return True


def _provision(config: ServerConfig) -> None:
    """Create the instance directory and its initial server.properties."""
    try:
        config.path.mkdir(parents=True, exist_ok=False)
    except OSError as e:
        raise WriteError(config.path, e.strerror or str(e)) from e

    properties = ServerProperties.from_defaults()
    properties.set("server-port", config.port)
    properties.save(config.path)


def create_instance(
    name: str,
    server_type: Union[ServerType, str],
    version: Optional[str] = None,
    port: Optional[int] = None,
    memory_mb: Optional[int] = None,
    provision: bool = True,
) -> ServerConfig:
    """Create and register a new server instance.

    Args:
        name: Display name, not required to be unique.
        server_type: A ServerType or any text ServerType.parse accepts.
        version: Minecraft version (e.g., "1.20.4"). Defaults to config value.
        port: Server port. Defaults to config value.
        memory_mb: Memory allocation in MB. Defaults to config value.
        provision: Also create the directory and a defaults-seeded
            server.properties.

    Returns:
        The created instance record.

    Raises:
        ValidationError: If any input is invalid.
        WriteError: If the instance directory cannot be provisioned.
    """
    config = get_config()
    name = validate_server_name(name)
    version = validate_version(version or config.default_version)
    port = validate_port(port if port is not None else config.default_port)
    memory_mb = validate_memory_mb(memory_mb if memory_mb is not None else config.default_memory_mb)
    if not isinstance(server_type, ServerType):
        server_type = ServerType.parse(server_type)

    server = ServerConfig.create(name, server_type, version, port, memory_mb)
    logger.info(
        f"Creating instance '{name}' ({server_type.display_name()} {version}) at {server.path}"
    )

    try:
        if provision:
            _provision(server)

        with get_session() as session:
            session.add(Instance(
                id=server.id,
                name=server.name,
                server_type=server.server_type.value,
                version=server.version,
                port=server.port,
                memory_mb=server.memory_mb,
                path=str(server.path),
                jar_file=server.jar_file,
            ))
    except Exception:
        if provision:
            shutil.rmtree(server.path, ignore_errors=True)
        raise

    logger.info(f"Instance '{name}' created with ID {server.id}")
    return server


def list_instances() -> List[ServerConfig]:
    """List all registered instances, oldest first."""
    with get_session() as session:
        rows = session.query(Instance).order_by(Instance.created_at, Instance.id).all()
        return [_to_config(row) for row in rows]


def get_instance(instance_id: str) -> ServerConfig:
    """Get an instance by id.

    Raises:
        InstanceNotFoundError: If no instance has this id.
    """
    with get_session() as session:
        return _to_config(_get_row(session, instance_id))


def resolve_instance(identifier: str) -> ServerConfig:
    """Find an instance by full id, unique id prefix, or unique name.

    Raises:
        InstanceNotFoundError: If nothing matches.
        ValidationError: If the identifier matches several instances.
    """
    with get_session() as session:
        row = session.get(Instance, identifier)
        if row is not None:
            return _to_config(row)

        matches = session.query(Instance).filter(Instance.id.startswith(identifier, autoescape=True)).all()
        if not matches:
            matches = session.query(Instance).filter(Instance.name == identifier).all()

        if not matches:
            raise InstanceNotFoundError(identifier)
        if len(matches) > 1:
            ids = ", ".join(m.id[:8] for m in matches)
            raise ValidationError("instance", f"'{identifier}' is ambiguous ({ids}); use the full id")
        return _to_config(matches[0])


def update_instance(
    instance_id: str,
    name: Optional[str] = None,
    version: Optional[str] = None,
    port: Optional[int] = None,
    memory_mb: Optional[int] = None,
    jar_file: Optional[str] = None,
) -> ServerConfig:
    """Update the mutable fields of an instance.

    A port change is mirrored into server-port of an existing
    server.properties.

    Raises:
        InstanceNotFoundError: If the instance doesn't exist.
        ValidationError: If a new value is invalid.
    """
    with instance_lock(instance_id):
        with get_session() as session:
            row = _get_row(session, instance_id)
            server = _to_config(row)

            if name is not None:
                server.name = validate_server_name(name)
            if version is not None:
                server.version = validate_version(version)
            if port is not None:
                server.port = validate_port(port)
            if memory_mb is not None:
                server.memory_mb = validate_memory_mb(memory_mb)
            if jar_file is not None:
                if not jar_file or Path(jar_file).name != jar_file:
                    raise ValidationError("jar_file", "Jar file must be a plain file name")
                server.jar_file = jar_file

            row.name = server.name
            row.version = server.version
            row.port = server.port
            row.memory_mb = server.memory_mb
            row.jar_file = server.jar_file

        if port is not None and server.path.is_dir():
            properties = ServerProperties.load(server.path)
            if properties.get("server-port") != str(server.port):
                properties.set("server-port", server.port)
                properties.save(server.path)

    logger.info(f"Updated instance '{server.name}' ({instance_id})")
    return server


def delete_instance(instance_id: str, keep_files: bool = False) -> bool:
    """Delete an instance and, unless keep_files, its directory.

    Raises:
        InstanceNotFoundError: If the instance doesn't exist.
        InstanceRunningError: If the instance is not stopped.
        ValidationError: If the instance path is unsafe to delete.
        WriteError: If the directory cannot be removed.
    """
    tracker = get_status_tracker()

    with instance_lock(instance_id):
        if tracker.get(instance_id) != ServerStatus.STOPPED:
            raise InstanceRunningError(instance_id)

        with get_session() as session:
            row = _get_row(session, instance_id)
            instance_path = Path(row.path)

            if not keep_files and instance_path.exists():
                _validate_path_is_safe_for_deletion(instance_path, instance_id)
                logger.info(f"Deleting instance files at {instance_path}")
                try:
                    shutil.rmtree(instance_path)
                except OSError as e:
                    raise WriteError(instance_path, e.strerror or str(e)) from e

            session.delete(row)
            logger.info(f"Instance '{row.name}' ({instance_id}) deleted")

    tracker.forget(instance_id)
    with _instance_locks_guard:
        _instance_locks.pop(instance_id, None)
    return True


def get_properties(instance_id: str) -> ServerProperties:
    """Load the server.properties of an instance.

    Raises:
        InstanceNotFoundError: If the instance doesn't exist.
        ReadError: If the file exists but cannot be read.
    """
    server = get_instance(instance_id)
    with instance_lock(instance_id):
        return ServerProperties.load(server.path)


def update_properties(
    instance_id: str,
    updates: Mapping[str, Any],
    validate: bool = True,
) -> Dict[str, str]:
    """Apply updates to an instance's server.properties and save it.

    Args:
        instance_id: The instance id.
        updates: Key-value pairs to set.
        validate: Check known keys against the property schema first.

    Returns:
        The full property mapping after saving.

    Raises:
        InstanceNotFoundError: If the instance doesn't exist.
        ValidationError: If a value fails validation.
        ReadError: If the current file cannot be read.
        WriteError: If the file cannot be written.
    """
    if validate:
        for key, value in updates.items():
            if not ServerProperties.validate(key, value):
                raise ValidationError(key, f"Invalid value for {key}: {value!r}")

    server = get_instance(instance_id)
    with instance_lock(instance_id):
        properties = ServerProperties.load(server.path)
        properties.update(updates)
        properties.save(server.path)
        return properties.to_dict()


def get_ops(instance_id: str) -> List[OpEntry]:
    """Load the operator roster of an instance.

    Raises:
        InstanceNotFoundError: If the instance doesn't exist.
        DecodeError: If ops.json is malformed.
    """
    server = get_instance(instance_id)
    return load_ops(server.path)


def get_status(instance_id: str) -> ServerStatus:
    """Current status label of an instance; stopped unless a supervisor said otherwise."""
    return get_status_tracker().get(instance_id)


def set_status(instance_id: str, status: ServerStatus) -> None:
    """Record a status transition reported by a process supervisor.

    Takes the instance lock, so it cannot interleave with a deletion.

    Raises:
        InstanceNotFoundError: If the instance doesn't exist.
    """
    get_instance(instance_id)
    with instance_lock(instance_id):
        get_status_tracker().set(instance_id, status)


__all__ = [
    "create_instance",
    "list_instances",
    "get_instance",
    "resolve_instance",
    "update_instance",
    "delete_instance",
    "get_properties",
    "update_properties",
    "get_ops",
    "get_status",
    "set_status",
    "instance_lock",
]
