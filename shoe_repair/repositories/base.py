"""
Базовый репозиторий для работы с базой данных
"""

import logging
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

from sqlalchemy.exc import IntegrityError as SAIntegrityError
from sqlalchemy.exc import SQLAlchemyError

from shoe_repair.database.orm_database import ORMDatabase
from shoe_repair.repositories.exceptions import IntegrityError, RepositoryError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Базовый класс для всех репозиториев
    Предоставляет общую функциональность для работы с БД
    """

    def __init__(self, db: ORMDatabase):
        """
        Инициализация репозитория

        Args:
            db: Подключение к базе данных
        """
        self.db = db

    @asynccontextmanager
    async def transaction(self):
        """
        Контекстный менеджер для транзакций

        Всё, что выполнено внутри блока, фиксируется одним commit
        или откатывается целиком. Ошибки SQLAlchemy превращаются в RepositoryError.

        Yields:
            AsyncSession: Сессия с открытой транзакцией
        """
        try:
            async with self.db.get_session() as session:
                yield session
            logger.debug("Транзакция успешно завершена (commit)")
        except SAIntegrityError as e:
            logger.error(f"Нарушение целостности данных: {e}")
            raise IntegrityError(str(e.orig)) from e
        except SQLAlchemyError as e:
            logger.error(f"Ошибка базы данных: {e}")
            raise RepositoryError(str(e)) from e

    @asynccontextmanager
    async def read_session(self):
        """Сессия только для чтения (ошибки тоже превращаются в RepositoryError)"""
        try:
            async with self.db.get_session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Ошибка чтения из базы данных: {e}")
            raise RepositoryError(str(e)) from e
