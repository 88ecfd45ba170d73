import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import event, text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.logger import logger
from core.settings import settings

from . import models  # noqa: F401  registers tables on Base.metadata
from .base import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class DataBaseConnection:
    """
    Async database connection management.

    - Parameters come from Settings unless a URL is passed explicitly
    - One engine and one sessionmaker per application
    - Sessions are handed out through an async context manager
    """

    def __init__(self, url: URL | None = None):
        self.url = url if url is not None else settings.url()

        if self.url.get_backend_name() == 'sqlite':
            # In-memory SQLite must share one connection across sessions
            self.engine = create_async_engine(
                self.url,
                echo=settings.ECHO,
                poolclass=StaticPool,
                connect_args={'check_same_thread': False},
            )
            event.listen(self.engine.sync_engine, 'connect', _enable_sqlite_foreign_keys)
        else:
            self.engine = create_async_engine(
                self.url,
                echo=settings.ECHO,
                pool_pre_ping=settings.POOL_PRE_PING,
                pool_size=settings.POOL_SIZE,
                max_overflow=settings.MAX_OVERFLOW,
                connect_args={
                    'timeout': 10,
                    'command_timeout': 60,
                    'server_settings': {
                        'application_name': 'employee_hierarchy',
                    },
                },
            )

        self.AsyncSessionLocal = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session and close it afterwards.

        Commit and rollback are the caller's job: the request dependency
        commits on success and rolls back on error.
        """
        session = self.AsyncSessionLocal()
        try:
            yield session
        finally:
            await session.close()

    async def connect(self) -> None:
        """Check connectivity on startup, retrying while the database comes up."""
        max_retries = 10
        retry_delay = 3

        logger.info(f'[DATABASE] Connecting to {self.url.render_as_string(hide_password=True)}')

        for attempt in range(1, max_retries + 1):
            try:
                logger.info(f'[DATABASE] Connection attempt {attempt}/{max_retries}...')
                async with self.engine.begin() as conn:
                    await conn.execute(text('SELECT 1'))
                logger.info('[DATABASE] Connected')
                return
            except (TimeoutError, ConnectionError, OSError) as e:
                if attempt < max_retries:
                    logger.warning(
                        f'[DATABASE] Attempt {attempt}/{max_retries} failed: {type(e).__name__}: {e}. '
                        f'Retrying in {retry_delay} s...'
                    )
                    await asyncio.sleep(retry_delay)
                    retry_delay = min(retry_delay * 1.5, 10)
                else:
                    logger.error(f'[DATABASE] Could not connect after {max_retries} attempts: {e}')
                    raise

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info('[DATABASE] Tables ready')

    async def is_connected(self) -> bool:
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text('SELECT 1'))
            return True
        except Exception as e:
            logger.warning(f'[DATABASE] Connection check failed: {e}')
            return False

    async def dispose(self) -> None:
        """Close pooled connections on shutdown."""
        try:
            await self.engine.dispose()
            logger.info('[DATABASE] Connection pool closed')
        except Exception as e:
            logger.error(f'[DATABASE] Error while closing: {e}')
            raise


database = DataBaseConnection()
