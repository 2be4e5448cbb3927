"""Database connection and session management."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sydai.logging_config import get_logger
from sydai.storage.models import Base

logger = get_logger(__name__)


class Database:
    """Database connection manager.

    Constructed explicitly by the application factory (or a test fixture)
    and handed to every service that needs storage. Call ``dispose()`` on
    shutdown to release pooled connections.
    """

    def __init__(self, database_url: str, echo: bool = False):
        """Initialize database connection.

        Args:
            database_url: SQLAlchemy database URL
            echo: Log emitted SQL
        """
        self.database_url = database_url
        url = make_url(database_url)

        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if url.get_backend_name() == "sqlite":
            # Sessions are used from FastAPI's threadpool and from test threads
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url.database in (None, "", ":memory:"):
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(database_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )
        logger.info("database_initialized", url=url.render_as_string(hide_password=True))

    def create_tables(self) -> None:
        """Create all tables in the database."""
        # Model modules register their tables on Base.metadata when imported
        import sydai.auth.models  # noqa: F401
        import sydai.messages.models  # noqa: F401
        import sydai.notifications.models  # noqa: F401
        import sydai.preferences.models  # noqa: F401
        import sydai.referral.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("tables_created")

    def drop_tables(self) -> None:
        """Drop all tables from the database."""
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("tables_dropped")

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()
        logger.info("database_disposed")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Provide a transactional scope for database operations.

        Yields:
            Database session
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
