"""
Database Client

Async SQLAlchemy engine, connection pool and session management.
"""

import asyncio
import logging
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from crime_records.config.settings import settings
from crime_records.infrastructure.database.models import Base

logger = logging.getLogger(__name__)


def masked_database_url() -> str:
    """Database URL safe for logs: the password is replaced with ***"""
    return make_url(settings.database_url).render_as_string(hide_password=True)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseClient:
    """Process-wide owner of the async engine and its connection pool"""

    def __init__(self):
        self.engine = None
        self.session_maker = None

    async def verify_connection(self):
        """Verify database connection, retrying with exponential backoff.

        Called before table creation so a database that is still starting
        (docker-compose, K8s) does not fail the service on the first attempt.
        """
        if not self.engine:
            raise RuntimeError("Engine not initialized. Call initialize() first.")

        attempts = settings.db_connect_retries
        for attempt in range(attempts):
            try:
                async with self.engine.begin() as conn:
                    await conn.execute(text("SELECT 1"))
                logger.info("Database connection verified")
                return
            except Exception as e:
                if attempt < attempts - 1:
                    wait_time = settings.db_connect_backoff_seconds * (2 ** attempt)
                    logger.warning(
                        f"Database not reachable (attempt {attempt + 1}/{attempts}). "
                        f"Retrying in {wait_time}s. Error: {e}"
                    )
                    await asyncio.sleep(wait_time)
                else:
                    logger.error(f"Database not reachable after {attempts} attempts: {e}")
                    raise

    async def initialize(self):
        """Create the engine and pool, verify connectivity and create tables"""
        logger.info(f"Initializing database: {masked_database_url()}")

        if settings.is_sqlite:
            engine_options = {"poolclass": NullPool}
        else:
            engine_options = {
                "pool_size": settings.db_pool_size,
                "max_overflow": settings.db_max_overflow,
                "pool_pre_ping": settings.db_pool_pre_ping,
            }

        self.engine = create_async_engine(settings.database_url, echo=False, **engine_options)

        if settings.is_sqlite:
            # ON DELETE CASCADE on evidence needs foreign keys switched on per connection
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        await self.verify_connection()

        # Alembic owns the schema in deployed environments; create_all keeps
        # local and test databases usable without running migrations.
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database initialized successfully")

    async def close(self):
        """Dispose of the pool; called once in-flight requests have drained"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_maker = None
            logger.info("Database connections closed")

    def get_session(self) -> AsyncSession:
        """Get database session"""
        if not self.session_maker:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self.session_maker()

    async def health_check(self) -> bool:
        """Check database health"""
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False


# Global database client instance
db_client = DatabaseClient()


async def begin_snapshot(session: AsyncSession) -> None:
    """Pin the session's transaction to a single snapshot.

    Must run before the first statement of the session. PostgreSQL gets
    REPEATABLE READ; SQLite transactions are already serialised.
    """
    if session.bind is not None and session.bind.dialect.name == "postgresql":
        await session.connection(execution_options={"isolation_level": "REPEATABLE READ"})


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database session"""
    async with db_client.get_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
