"""
SQLAlchemy ORM Database класс
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shoe_repair.core.config import Config
from shoe_repair.database.orm_models import Base


logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class ORMDatabase:
    """Подключение к базе данных через SQLAlchemy ORM (async)"""

    def __init__(self, database_url: str | None = None):
        """
        Инициализация ORM Database

        Args:
            database_url: URL базы данных (None - из конфигурации)
        """
        self.database_url = database_url or Config.get_database_url()
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None
        self._is_sqlite = self.database_url.startswith("sqlite")

    async def connect(self):
        """Подключение к базе данных"""
        logger.info("Инициализация подключения к БД...")

        if self._is_sqlite:
            self._ensure_sqlite_dir()

        self.engine = create_async_engine(
            self.database_url,
            echo=False,  # True для отладки SQL
            pool_pre_ping=True,
            connect_args={"check_same_thread": False} if self._is_sqlite else {},
        )

        if self._is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Объекты доступны после commit
        )

        logger.info("Подключено к базе данных (sqlite=%s)", self._is_sqlite)
        logger.debug("Используйте 'alembic upgrade head' для применения миграций БД")

    async def disconnect(self):
        """Отключение от базы данных"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Отключено от базы данных")

    async def init_db(self):
        """
        Создание таблиц по ORM моделям (для тестов и первого запуска)

        В production схема управляется миграциями Alembic.
        """
        if not self.engine:
            await self.connect()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Схема БД создана")

    @asynccontextmanager
    async def get_session(self):
        """
        Context manager для получения сессии

        Usage:
            async with db.get_session() as session:
                order = await session.get(Order, order_id)
                # Автоматический commit/rollback
        """
        if not self.session_factory:
            raise RuntimeError("База данных не подключена")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error(f"Транзакция отменена (rollback): {e}")
                raise

    def _ensure_sqlite_dir(self):
        # sqlite+aiosqlite:///data/repair_orders.db -> data/
        path = self.database_url.split("///", 1)[-1]
        if path and path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
