"""
Сервис для работы с заказами (бизнес-логика)
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from shoe_repair.core.config import Config, Messages
from shoe_repair.core.constants import INTAKE_ACTOR, OrderStatus
from shoe_repair.database.orm_models import Order, OrderHistory, OrderStatusChange
from shoe_repair.domain.order_state_machine import InvalidStateTransitionError, OrderStateMachine
from shoe_repair.domain.pricing import (
    LineItemOptions,
    PricingRuleset,
    calculate_item_price,
    get_ruleset,
    sum_prices,
    to_decimal,
)
from shoe_repair.repositories.exceptions import EntityNotFoundError
from shoe_repair.repositories.order_repository import (
    EDITABLE_ITEM_FIELDS,
    EDITABLE_ORDER_FIELDS,
    FieldChange,
    OrderRepository,
)
from shoe_repair.schemas.order import (
    DraftSchema,
    OrderCreateSchema,
    OrderItemSchema,
    OrderUpdateSchema,
    StatusChangeSchema,
)
from shoe_repair.services.exceptions import (
    OrderNotEditableError,
    OrderValidationError,
    UnauthorizedError,
)
from shoe_repair.services.identity import IdentityProvider
from shoe_repair.services.notification_service import NotificationService
from shoe_repair.utils.pii_masking import mask_name, safe_str_order


logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


@dataclass
class Quote:
    """Предварительный расчёт (KVA) для формы"""

    item_prices: list[Decimal]
    total: Decimal
    ruleset: str


@dataclass
class OrderWithHistory:
    """Заказ с последними событиями статуса и изменениями полей"""

    order: Order
    status_history: list[OrderStatusChange] = field(default_factory=list)
    field_history: list[OrderHistory] = field(default_factory=list)
    available_transitions: list[str] = field(default_factory=list)


def _snapshot(value: Any) -> str | None:
    """Текстовый снимок значения для истории полей"""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _differs(old: Any, new: Any) -> bool:
    """Сравнение значений без учёта представления (Decimal('1.0') == Decimal('1'))"""
    if old in (None, "") and new in (None, ""):
        return False
    if isinstance(old, bool) or isinstance(new, bool):
        return bool(old) != bool(new)
    if isinstance(old, Decimal) or isinstance(new, Decimal):
        if old is None or new is None:
            return True
        return to_decimal(old) != to_decimal(new)
    return old != new


class OrderService:
    """
    Сервис для управления заказами
    Инкапсулирует бизнес-логику приёма и администрирования заказов
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        notifications: NotificationService | None = None,
        identity: IdentityProvider | None = None,
        ruleset: PricingRuleset | None = None,
        state_machine: OrderStateMachine | None = None,
    ):
        """
        Инициализация сервиса

        Args:
            order_repo: Репозиторий заказов
            notifications: Сервис уведомлений (None - без уведомлений)
            identity: Источник текущего сотрудника
            ruleset: Набор правил ценообразования для новых заказов
            state_machine: State machine для валидации переходов
        """
        self.order_repo = order_repo
        self.notifications = notifications
        self.identity = identity
        self.ruleset = ruleset or get_ruleset(Config.PRICING_RULESET)
        self.state_machine = state_machine or OrderStateMachine()

    def _require_actor(self, action: str) -> str:
        """Текущий сотрудник или UnauthorizedError"""
        actor = self.identity.get_current_actor() if self.identity else None
        if not actor:
            logger.warning(f"Попытка '{action}' без авторизации")
            raise UnauthorizedError(action)
        return actor

    # ==================== ПРИЁМ ЗАКАЗОВ ====================

    def estimate(self, items: Iterable[OrderItemSchema | Mapping[str, Any]]) -> Quote:
        """
        Предварительный расчёт KVA без сохранения

        Args:
            items: Позиции из формы

        Returns:
            Quote с ценами позиций и итогом
        """
        validated = [
            item if isinstance(item, OrderItemSchema) else OrderItemSchema.model_validate(item)
            for item in items
        ]
        prices = [calculate_item_price(LineItemOptions.from_item(item), self.ruleset) for item in validated]
        return Quote(item_prices=prices, total=sum_prices(prices), ruleset=self.ruleset.name)

    async def create_order(self, payload: OrderCreateSchema | Mapping[str, Any]) -> Order:
        """
        Создание заказа из формы (статус SUBMITTED)

        Цена каждой позиции считается один раз и сохраняется.

        Args:
            payload: Данные формы

        Returns:
            Созданный заказ

        Raises:
            pydantic.ValidationError: Некорректные данные формы
            RepositoryError: Ошибка сохранения
        """
        data = (
            payload
            if isinstance(payload, OrderCreateSchema)
            else OrderCreateSchema.model_validate(payload)
        )

        items = []
        for item in data.items:
            values = item.model_dump()
            values["calculated_price"] = calculate_item_price(
                LineItemOptions.from_item(item), self.ruleset
            )
            items.append(values)

        order = await self.order_repo.create(
            status=OrderStatus.SUBMITTED,
            customer=data.customer.model_dump(),
            items=items,
            total_price=sum_prices(values["calculated_price"] for values in items),
            pricing_ruleset=self.ruleset.name,
            changed_by=INTAKE_ACTOR,
            comment=OrderStateMachine.get_transition_description(None, OrderStatus.SUBMITTED),
        )

        logger.info(
            f"{safe_str_order(order)} принят от {mask_name(order.customer_name)}, KVA {order.total_price}"
        )

        if self.notifications is not None:
            self.notifications.notify_order_created(order)

        return order

    async def save_draft(self, payload: DraftSchema | Mapping[str, Any]) -> Order:
        """
        Сохранение черновика (статус DRAFT, без позиций)

        Raises:
            OrderValidationError: Не указан e-mail
            pydantic.ValidationError: Некорректный e-mail
        """
        if isinstance(payload, Mapping) and not (payload.get("email") or "").strip():
            raise OrderValidationError(Messages.DRAFT_EMAIL_REQUIRED)

        data = payload if isinstance(payload, DraftSchema) else DraftSchema.model_validate(payload)

        order = await self.order_repo.create(
            status=OrderStatus.DRAFT,
            customer=data.model_dump(),
            items=[],
            total_price=sum_prices([]),
            pricing_ruleset=self.ruleset.name,
            changed_by=INTAKE_ACTOR,
            comment=OrderStateMachine.get_transition_description(None, OrderStatus.DRAFT),
        )

        logger.info(f"Черновик сохранён: {safe_str_order(order)}")
        return order

    async def get_order(self, order_id: int) -> Order | None:
        """
        Получение заказа с позициями (страница подтверждения и печати)

        Args:
            order_id: ID заказа

        Returns:
            Заказ или None
        """
        return await self.order_repo.get_by_id(order_id)

    # ==================== СТАТУСЫ ====================

    async def change_status(self, payload: StatusChangeSchema | Mapping[str, Any]) -> OrderStatusChange:
        """
        Смена статуса заказа сотрудником

        Порядок проверок: авторизация, данные, наличие заказа, допустимость перехода.
        Запись статуса и события истории атомарна. Письмо клиенту отправляется
        в фоне и не влияет на результат.

        Args:
            payload: order_id, new_status, comment, tracking_number, tracking_carrier

        Returns:
            Созданное событие истории

        Raises:
            UnauthorizedError: Нет авторизованного сотрудника
            pydantic.ValidationError: Некорректные данные
            EntityNotFoundError: Заказ не найден
            InvalidStateTransitionError: Переход недопустим
            ConcurrentModificationError: Статус изменён параллельно
        """
        actor = self._require_actor("change_status")
        data = (
            payload
            if isinstance(payload, StatusChangeSchema)
            else StatusChangeSchema.model_validate(payload)
        )

        order = await self.order_repo.get_by_id(data.order_id)
        if order is None:
            raise EntityNotFoundError("Order", data.order_id)

        from_status = order.status
        try:
            self.state_machine.validate_transition(from_status, data.new_status)
        except InvalidStateTransitionError as e:
            logger.warning(f"Недопустимый переход статуса для заказа #{order.id}: {e}")
            raise

        # Трек-номер сохраняется только при отправке
        keeps_tracking = self.state_machine.keeps_tracking(data.new_status)
        tracking_number = data.tracking_number if keeps_tracking else None
        tracking_carrier = data.tracking_carrier if keeps_tracking else None

        status_change = await self.order_repo.update_status(
            order_id=order.id,
            expected_status=from_status,
            new_status=data.new_status,
            changed_by=actor,
            comment=data.comment,
            tracking_carrier=tracking_carrier,
            tracking_number=tracking_number,
        )

        if self.notifications is not None:
            self.notifications.notify_status_change(
                order,
                data.new_status,
                comment=data.comment,
                tracking_number=tracking_number,
                tracking_carrier=tracking_carrier,
            )

        return status_change

    async def get_available_transitions(self, order_id: int) -> list[tuple[str, str]]:
        """
        Статусы, в которые можно перевести заказ, с названиями

        Returns:
            [(статус, название), ...] в порядке жизненного цикла

        Raises:
            UnauthorizedError: Нет авторизованного сотрудника
            EntityNotFoundError: Заказ не найден
        """
        self._require_actor("get_available_transitions")
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError("Order", order_id)
        return [
            (status, OrderStatus.get_status_name(status))
            for status in self.state_machine.get_available_transitions(order.status)
        ]

    # ==================== РЕДАКТИРОВАНИЕ ====================

    async def update_order(self, payload: OrderUpdateSchema | Mapping[str, Any]) -> Order:
        """
        Редактирование данных клиента и позиций сотрудником

        Цена позиции: указанная сотрудником, иначе пересчитанная по набору правил
        заказа; у делегированных позиций без указанной цены остаётся прежней.
        Итог пересчитывается как сумма. На каждое изменённое поле пишется
        запись истории.

        Args:
            payload: order_id, customer, items

        Returns:
            Обновлённый заказ

        Raises:
            UnauthorizedError: Нет авторизованного сотрудника
            pydantic.ValidationError: Некорректные данные
            EntityNotFoundError: Заказ не найден
            OrderNotEditableError: Заказ завершён или отменён
            OrderValidationError: Позиция не принадлежит заказу
            ConcurrentModificationError: Заказ изменён параллельно
        """
        actor = self._require_actor("update_order")
        data = (
            payload
            if isinstance(payload, OrderUpdateSchema)
            else OrderUpdateSchema.model_validate(payload)
        )

        order = await self.order_repo.get_by_id(data.order_id)
        if order is None:
            raise EntityNotFoundError("Order", data.order_id)
        if not self.state_machine.is_editable(order.status):
            raise OrderNotEditableError(order.id, order.status)

        existing_items = {item.id: item for item in order.items}
        unknown_ids = [item.id for item in data.items if item.id not in existing_items]
        if unknown_ids:
            raise OrderValidationError(
                f"Positionen {unknown_ids} gehören nicht zu Auftrag #{order.id}"
            )

        changes: list[FieldChange] = []
        order_values: dict[str, Any] = {}

        customer = data.customer.model_dump()
        for name in sorted(EDITABLE_ORDER_FIELDS):
            old, new = getattr(order, name), customer.get(name)
            if _differs(old, new):
                order_values[name] = new
                changes.append(FieldChange(name, _snapshot(old), _snapshot(new)))

        ruleset = self._order_ruleset(order)
        item_values: dict[int, dict[str, Any]] = {}
        prices = {item_id: item.calculated_price for item_id, item in existing_items.items()}

        for update in data.items:
            current = existing_items[update.id]
            new_values = update.model_dump(exclude={"id", "calculated_price"})

            if update.calculated_price is not None:
                price = to_decimal(update.calculated_price)
            elif not update.trust_professionals:
                price = calculate_item_price(LineItemOptions.from_item(update), ruleset)
            else:
                price = current.calculated_price
            new_values["calculated_price"] = price
            prices[update.id] = price

            diff = {}
            for name in sorted(EDITABLE_ITEM_FIELDS):
                old, new = getattr(current, name), new_values.get(name)
                if _differs(old, new):
                    diff[name] = new
                    changes.append(
                        FieldChange(f"items.{update.id}.{name}", _snapshot(old), _snapshot(new))
                    )
            if diff:
                item_values[update.id] = diff

        total = sum_prices(prices.values())
        if _differs(order.total_price, total):
            order_values["total_price"] = total
            changes.append(FieldChange("total_price", _snapshot(order.total_price), _snapshot(total)))

        if not changes:
            logger.info(f"Заказ #{order.id}: изменений нет")
            return order

        await self.order_repo.update_order(
            order_id=order.id,
            expected_version=order.version,
            order_values=order_values,
            item_values=item_values,
            changes=changes,
            changed_by=actor,
        )
        logger.info(f"Заказ #{order.id} отредактирован: изменено полей {len(changes)}")

        updated = await self.order_repo.get_by_id(order.id)
        return updated if updated is not None else order

    def _order_ruleset(self, order: Order) -> PricingRuleset:
        try:
            return get_ruleset(order.pricing_ruleset)
        except KeyError:
            logger.warning(
                f"Заказ #{order.id}: неизвестный набор правил {order.pricing_ruleset}, "
                f"используем {self.ruleset.name}"
            )
            return self.ruleset

    # ==================== ПРОСМОТР ====================

    async def get_order_with_history(self, order_id: int) -> OrderWithHistory:
        """
        Заказ с позициями, последними 20 событиями статуса и 50 изменениями полей

        Raises:
            UnauthorizedError: Нет авторизованного сотрудника
            EntityNotFoundError: Заказ не найден
        """
        self._require_actor("get_order_with_history")
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError("Order", order_id)

        return OrderWithHistory(
            order=order,
            status_history=await self.order_repo.get_status_history(order_id),
            field_history=await self.order_repo.get_field_history(order_id),
            available_transitions=self.state_machine.get_available_transitions(order.status),
        )

    async def list_orders(
        self,
        status: str | None = None,
        search: str | None = None,
        limit: int | None = DEFAULT_LIST_LIMIT,
    ) -> list[Order]:
        """
        Список заказов для админки (новые сверху)

        Raises:
            UnauthorizedError: Нет авторизованного сотрудника
            OrderValidationError: Неизвестный статус в фильтре
        """
        self._require_actor("list_orders")
        if status and status not in OrderStatus.all_statuses():
            raise OrderValidationError(f"Unbekannter Status '{status}'")
        return await self.order_repo.get_all(status=status, search=search, limit=limit)

    async def get_status_counts(self) -> dict[str, int]:
        """Количество заказов по каждому статусу (включая нулевые)"""
        self._require_actor("get_status_counts")
        counts = await self.order_repo.count_by_status()
        return {status: counts.get(status, 0) for status in OrderStatus.all_statuses()}
