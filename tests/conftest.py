"""
Pytest fixtures и конфигурация для тестов
"""
from collections.abc import AsyncGenerator
from copy import deepcopy
from unittest.mock import AsyncMock, MagicMock

import pytest

from shoe_repair.database import ORMDatabase
from shoe_repair.repositories import OrderRepository
from shoe_repair.services import OrderService, StaticIdentityProvider
from tests.factories import CUSTOMER, PAIR_ITEM, SINGLE_SHOE_ITEM, STAFF_ACTOR


@pytest.fixture()
def customer_data() -> dict:
    return deepcopy(CUSTOMER)


@pytest.fixture()
def order_payload() -> dict:
    """Форма заказа: пара + одна туфля (KVA 106,50 €)"""
    return {
        "customer": deepcopy(CUSTOMER),
        "items": [deepcopy(PAIR_ITEM), deepcopy(SINGLE_SHOE_ITEM)],
    }


@pytest.fixture()
async def orm_db(tmp_path) -> AsyncGenerator[ORMDatabase, None]:
    """
    Фикстура для тестовой базы данных (временный SQLite файл)
    """
    database = ORMDatabase(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.init_db()
    yield database
    await database.disconnect()


@pytest.fixture()
def order_repo(orm_db: ORMDatabase) -> OrderRepository:
    return OrderRepository(orm_db)


@pytest.fixture()
def notifications() -> MagicMock:
    """Сервис уведомлений без сети: фиксируем вызовы"""
    service = MagicMock()
    service.notify_order_created = MagicMock(return_value=None)
    service.notify_status_change = MagicMock(return_value=None)
    service.wait_pending = AsyncMock()
    return service


@pytest.fixture()
def order_service(order_repo: OrderRepository, notifications: MagicMock) -> OrderService:
    """Сервис с авторизованным сотрудником"""
    return OrderService(
        order_repo,
        notifications=notifications,
        identity=StaticIdentityProvider(STAFF_ACTOR),
    )


@pytest.fixture()
def anonymous_service(order_repo: OrderRepository, notifications: MagicMock) -> OrderService:
    """Сервис без авторизованного сотрудника (форма заказа)"""
    return OrderService(
        order_repo,
        notifications=notifications,
        identity=StaticIdentityProvider(None),
    )


@pytest.fixture()
async def submitted_order(order_service: OrderService, order_payload: dict):
    """Заказ в статусе SUBMITTED"""
    return await order_service.create_order(order_payload)
