"""
Репозиторий для работы с заказами
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import selectinload

from shoe_repair.database.orm_models import Order, OrderHistory, OrderItem, OrderStatusChange
from shoe_repair.repositories.base import BaseRepository
from shoe_repair.repositories.exceptions import ConcurrentModificationError, EntityNotFoundError
from shoe_repair.utils.helpers import get_now


logger = logging.getLogger(__name__)

STATUS_HISTORY_LIMIT = 20
FIELD_HISTORY_LIMIT = 50

# Поля заказа, которые можно менять через update_order
EDITABLE_ORDER_FIELDS = frozenset(
    {
        "salutation",
        "first_name",
        "last_name",
        "street",
        "house_number",
        "zip",
        "city",
        "country",
        "phone",
        "email",
        "delivery_same",
        "delivery_salutation",
        "delivery_first_name",
        "delivery_last_name",
        "delivery_street",
        "delivery_house_number",
        "delivery_zip",
        "delivery_city",
        "delivery_country",
        "station_notes",
    }
)

EDITABLE_ITEM_FIELDS = frozenset(
    {
        "quantity",
        "manufacturer",
        "model",
        "color",
        "size",
        "sole",
        "edge_rubber",
        "closure",
        "disinfection",
        "trust_professionals",
        "additional_work",
        "internal_notes",
        "calculated_price",
    }
)


@dataclass(frozen=True)
class FieldChange:
    """Изменение одного поля (снимки значений в виде текста)"""

    field: str
    old_value: str | None
    new_value: str | None


class OrderRepository(BaseRepository[Order]):
    """Репозиторий для работы с заказами"""

    async def create(
        self,
        *,
        status: str,
        customer: Mapping[str, Any],
        items: Iterable[Mapping[str, Any]],
        total_price: Decimal,
        pricing_ruleset: str,
        changed_by: str,
        comment: str | None = None,
    ) -> Order:
        """
        Создание заказа с позициями и начальным событием статуса

        Всё записывается в одной транзакции, так что у заказа сразу есть
        событие с to_status == status.

        Args:
            status: Начальный статус (DRAFT или SUBMITTED)
            customer: Данные клиента (колонки Order)
            items: Позиции (колонки OrderItem, включая calculated_price)
            total_price: Сумма цен позиций
            pricing_ruleset: Имя набора правил, по которому считались цены
            changed_by: Автор начального события
            comment: Комментарий к начальному событию

        Returns:
            Объект Order с загруженными позициями
        """
        now = get_now()
        async with self.transaction() as session:
            order = Order(
                **customer,
                status=status,
                total_price=total_price,
                pricing_ruleset=pricing_ruleset,
                created_at=now,
                updated_at=now,
            )
            order.items = [
                OrderItem(position=position, **item) for position, item in enumerate(items)
            ]
            session.add(order)
            await session.flush()

            session.add(
                OrderStatusChange(
                    order_id=order.id,
                    from_status=None,
                    to_status=status,
                    comment=comment,
                    changed_by=changed_by,
                    changed_at=now,
                )
            )

        logger.info(f"Создан заказ #{order.id} ({status}, позиций: {len(order.items)})")
        return order

    async def get_by_id(self, order_id: int) -> Order | None:
        """
        Получение заказа по ID вместе с позициями

        Args:
            order_id: ID заказа

        Returns:
            Объект Order или None
        """
        async with self.read_session() as session:
            stmt = select(Order).options(selectinload(Order.items)).where(Order.id == order_id)
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_all(
        self,
        status: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[Order]:
        """
        Получение заказов с фильтрацией (новые сверху)

        Args:
            status: Фильтр по статусу
            search: Поиск по имени, e-mail или номеру заказа
            limit: Лимит количества

        Returns:
            Список заказов
        """
        async with self.read_session() as session:
            stmt = select(Order).options(selectinload(Order.items))

            if status:
                stmt = stmt.where(Order.status == status)

            if search and search.strip():
                term = search.strip()
                pattern = f"%{term}%"
                conditions = [
                    Order.first_name.ilike(pattern),
                    Order.last_name.ilike(pattern),
                    Order.email.ilike(pattern),
                    (Order.first_name + " " + Order.last_name).ilike(pattern),
                ]
                number = term.lstrip("#")
                if number.isdigit():
                    conditions.append(Order.id == int(number))
                stmt = stmt.where(or_(*conditions))

            stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())

            if limit:
                stmt = stmt.limit(limit)

            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count_by_status(self) -> dict[str, int]:
        """Количество заказов по статусам"""
        async with self.read_session() as session:
            stmt = select(Order.status, func.count(Order.id)).group_by(Order.status)
            result = await session.execute(stmt)
            return {status: count for status, count in result.all()}

    async def get_status_history(
        self, order_id: int, limit: int = STATUS_HISTORY_LIMIT
    ) -> list[OrderStatusChange]:
        """История статусов заказа (новые сверху)"""
        async with self.read_session() as session:
            stmt = (
                select(OrderStatusChange)
                .where(OrderStatusChange.order_id == order_id)
                .order_by(OrderStatusChange.changed_at.desc(), OrderStatusChange.id.desc())
                .limit(limit)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_field_history(
        self, order_id: int, limit: int = FIELD_HISTORY_LIMIT
    ) -> list[OrderHistory]:
        """История изменения полей заказа (новые сверху)"""
        async with self.read_session() as session:
            stmt = (
                select(OrderHistory)
                .where(OrderHistory.order_id == order_id)
                .order_by(OrderHistory.changed_at.desc(), OrderHistory.id.desc())
                .limit(limit)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def update_status(
        self,
        order_id: int,
        expected_status: str,
        new_status: str,
        changed_by: str,
        comment: str | None = None,
        tracking_carrier: str | None = None,
        tracking_number: str | None = None,
    ) -> OrderStatusChange:
        """
        Атомарная смена статуса и запись события в историю

        UPDATE выполняется только если статус в БД всё ещё равен expected_status.
        Если другой запрос успел сменить статус, ни одна строка не обновится,
        и транзакция откатывается.

        Args:
            order_id: ID заказа
            expected_status: Статус, прочитанный перед валидацией перехода
            new_status: Новый статус
            changed_by: Кто меняет статус
            comment: Комментарий
            tracking_carrier: Служба доставки
            tracking_number: Трек-номер

        Returns:
            Созданное событие OrderStatusChange

        Raises:
            EntityNotFoundError: Заказ не существует
            ConcurrentModificationError: Статус был изменён параллельно
        """
        now = get_now()
        async with self.transaction() as session:
            result = await session.execute(
                update(Order)
                .where(Order.id == order_id, Order.status == expected_status)
                .values(status=new_status, updated_at=now, version=Order.version + 1)
                .execution_options(synchronize_session=False)
            )

            if result.rowcount == 0:
                exists = await session.scalar(select(Order.id).where(Order.id == order_id))
                if exists is None:
                    raise EntityNotFoundError("Order", order_id)
                logger.warning(
                    f"Конфликт смены статуса заказа #{order_id}: ожидался {expected_status}"
                )
                raise ConcurrentModificationError("Order", order_id, expected_status)

            status_change = OrderStatusChange(
                order_id=order_id,
                from_status=expected_status,
                to_status=new_status,
                comment=comment,
                tracking_carrier=tracking_carrier,
                tracking_number=tracking_number,
                changed_by=changed_by,
                changed_at=now,
            )
            session.add(status_change)

        logger.info(f"Статус заказа #{order_id} изменен с {expected_status} на {new_status}")
        return status_change

    async def update_order(
        self,
        order_id: int,
        expected_version: int,
        order_values: Mapping[str, Any],
        item_values: Mapping[int, Mapping[str, Any]],
        changes: Iterable[FieldChange],
        changed_by: str,
    ) -> int:
        """
        Обновление данных заказа и позиций с записью истории полей

        Всё выполняется в одной транзакции. Обновление заказа условное
        (WHERE version = expected_version).

        Args:
            order_id: ID заказа
            expected_version: Версия заказа, прочитанная перед редактированием
            order_values: Новые значения колонок заказа (включая total_price)
            item_values: {item_id: новые значения колонок позиции}
            changes: Записи для истории полей
            changed_by: Кто редактирует

        Returns:
            Новая версия заказа

        Raises:
            EntityNotFoundError: Заказ или позиция не найдены
            ConcurrentModificationError: Заказ был изменён параллельно
        """
        unknown = set(order_values) - EDITABLE_ORDER_FIELDS - {"total_price"}
        if unknown:
            raise ValueError(f"Поля {sorted(unknown)} не могут быть обновлены")
        for values in item_values.values():
            unknown_item = set(values) - EDITABLE_ITEM_FIELDS
            if unknown_item:
                raise ValueError(f"Поля позиции {sorted(unknown_item)} не могут быть обновлены")

        now = get_now()
        new_version = expected_version + 1
        async with self.transaction() as session:
            result = await session.execute(
                update(Order)
                .where(Order.id == order_id, Order.version == expected_version)
                .values(**order_values, updated_at=now, version=new_version)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                exists = await session.scalar(select(Order.id).where(Order.id == order_id))
                if exists is None:
                    raise EntityNotFoundError("Order", order_id)
                raise ConcurrentModificationError("Order", order_id, expected_version)

            for item_id, values in item_values.items():
                if not values:
                    continue
                item_result = await session.execute(
                    update(OrderItem)
                    .where(OrderItem.id == item_id, OrderItem.order_id == order_id)
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                if item_result.rowcount == 0:
                    raise EntityNotFoundError("OrderItem", item_id)

            session.add_all(
                OrderHistory(
                    order_id=order_id,
                    field=change.field,
                    old_value=change.old_value,
                    new_value=change.new_value,
                    changed_by=changed_by,
                    changed_at=now,
                )
                for change in changes
            )

        logger.info(f"Заказ #{order_id} обновлён (версия {new_version})")
        return new_version
