"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel


logger = structlog.get_logger(__name__)

# Seconds a writer waits for SQLite's write lock before failing
SQLITE_BUSY_TIMEOUT = 30


def get_db_url(path: Path) -> str:
    """Get SQLite database URL, creating the parent directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{path}"


class Database:
    """Async engine and session factory for one SQLite database.

    Built explicitly and passed to repositories; there is no module-level
    engine.
    """

    def __init__(self, path: Path, *, echo: bool = False) -> None:
        self.path = path
        self.engine: AsyncEngine = create_async_engine(
            get_db_url(path),
            echo=echo,
            connect_args={"timeout": SQLITE_BUSY_TIMEOUT},
        )
        self._session_maker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init(self) -> None:
        """Create tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.debug("database_initialized", path=str(self.path))

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get an async database session."""
        async with self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


async def open_database(path: Path, *, echo: bool = False) -> Database:
    """Build a `Database` and make sure its tables exist."""
    database = Database(path, echo=echo)
    await database.init()
    return database
