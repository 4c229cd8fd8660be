"""Instance registry storage for MCI."""
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, String, Integer, DateTime, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker, Session

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Instance(Base):
    """Persisted ServerConfig record.

    Status is deliberately absent: it belongs to a live process and is kept
    in memory only.
    """
    __tablename__ = "instances"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    server_type: Mapped[str] = mapped_column(String(50))  # ServerType display name
    version: Mapped[str] = mapped_column(String(50))
    port: Mapped[int] = mapped_column(Integer, default=25565)
    memory_mb: Mapped[int] = mapped_column(Integer, default=2048)
    path: Mapped[str] = mapped_column(Text)
    jar_file: Mapped[str] = mapped_column(String(255), default="server.jar")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Instance(id='{self.id}', name='{self.name}', type='{self.server_type}', version='{self.version}')>"


class DBManager:
    """Manages database connections and sessions."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize the database manager.

        Args:
            db_path: Path to the SQLite database file. If None, uses default location.
        """
        if db_path is None:
            # Lazy import to avoid circular dependency
            from .config import get_data_dir
            data_dir = get_data_dir()
            data_dir.mkdir(parents=True, exist_ok=True)
            db_path = data_dir / "mci.db"

        self.db_path = db_path
        self.engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            pool_pre_ping=True
        )
        Base.metadata.create_all(self.engine)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.debug(f"Database initialized at {db_path}")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations.

        Usage:
            with db.session() as session:
                instance = session.get(Instance, instance_id)
                instance.port = 25566
                # Automatically commits on success, rolls back on exception
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Lazy singleton pattern
_db_instance: Optional[DBManager] = None


def get_db() -> DBManager:
    """Get the global database manager instance (lazy initialization)."""
    global _db_instance
    if _db_instance is None:
        _db_instance = DBManager()
    return _db_instance


def reset_db() -> None:
    """Reset the global database instance. Useful for testing."""
    global _db_instance
    if _db_instance is not None:
        _db_instance.engine.dispose()
    _db_instance = None


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get a database session with automatic commit/rollback.

    Usage:
        from mci_core.db import get_session, Instance

        with get_session() as session:
            instances = session.query(Instance).all()
    """
    with get_db().session() as session:
        yield session
