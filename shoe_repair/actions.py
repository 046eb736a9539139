"""
Действия формы заказа и админки

Каждое действие возвращает ActionResult и никогда не пробрасывает исключения:
ошибки переводятся в тексты Messages, неожиданные логируются с traceback.
"""

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from shoe_repair.core.config import Messages
from shoe_repair.core.constants import (
    MANUFACTURERS,
    QUANTITY_OPTIONS,
    SHOE_SIZES,
    SUPPORTED_COUNTRIES,
    EdgeRubber,
    Salutation,
)
from shoe_repair.domain.order_state_machine import InvalidStateTransitionError
from shoe_repair.domain.pricing import SHIPPING_COSTS, SOLE_PRICES, shipping_zone
from shoe_repair.repositories.exceptions import (
    ConcurrentModificationError,
    EntityNotFoundError,
)
from shoe_repair.services.catalog_search import CatalogSearchClient
from shoe_repair.services.exceptions import (
    OrderNotEditableError,
    OrderValidationError,
    UnauthorizedError,
)
from shoe_repair.services.order_service import OrderService
from shoe_repair.utils.pii_masking import sanitize_log_message


logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Результат действия для UI"""

    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, data: Any = None) -> "ActionResult":
        return cls(success=False, data=data, error=error)


def _validation_details(error: ValidationError) -> list[dict[str, str]]:
    """Ошибки pydantic в виде [{field, message}] для подсветки полей формы"""
    return [
        {
            "field": ".".join(str(part) for part in item["loc"]),
            "message": item["msg"],
        }
        for item in error.errors()
    ]


def handle_action_errors(failure_message: str):
    """
    Декоратор для обработки ошибок в действиях

    Args:
        failure_message: Текст для неожиданных ошибок

    Returns:
        Декоратор, оборачивающий результат в ActionResult
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[ActionResult]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> ActionResult:
            try:
                return ActionResult.ok(await func(*args, **kwargs))
            except UnauthorizedError as e:
                logger.warning(f"{func.__name__}: {e}")
                return ActionResult.fail(Messages.UNAUTHORIZED)
            except ValidationError as e:
                logger.info(f"{func.__name__}: некорректные данные ({e.error_count()} ошибок)")
                return ActionResult.fail(Messages.INVALID_INPUT, data=_validation_details(e))
            except OrderValidationError as e:
                logger.info(f"{func.__name__}: {e}")
                return ActionResult.fail(str(e) or Messages.INVALID_INPUT)
            except EntityNotFoundError as e:
                logger.info(f"{func.__name__}: {e}")
                return ActionResult.fail(Messages.ORDER_NOT_FOUND)
            except InvalidStateTransitionError as e:
                return ActionResult.fail(e.reason or Messages.INVALID_TRANSITION)
            except OrderNotEditableError as e:
                logger.info(f"{func.__name__}: {e}")
                return ActionResult.fail(Messages.ORDER_NOT_EDITABLE)
            except ConcurrentModificationError as e:
                logger.warning(f"{func.__name__}: {e}")
                return ActionResult.fail(Messages.CONCURRENT_MODIFICATION)
            except Exception as e:
                logger.exception("Error in %s: %s", func.__name__, sanitize_log_message(str(e)))
                return ActionResult.fail(failure_message)

        return wrapper

    return decorator


# ==================== ФОРМА ЗАКАЗА ====================


@handle_action_errors(Messages.ORDER_CREATE_FAILED)
async def create_order(service: OrderService, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Отправка формы заказа"""
    order = await service.create_order(payload)
    return {
        "order_id": order.id,
        "order_number": order.order_number,
        "total_price": order.total_price,
    }


@handle_action_errors(Messages.DRAFT_SAVE_FAILED)
async def save_draft(service: OrderService, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Сохранение черновика формы"""
    order = await service.save_draft(payload)
    return {"order_id": order.id, "order_number": order.order_number}


@handle_action_errors(Messages.ORDER_CREATE_FAILED)
async def estimate_price(service: OrderService, items: list[Mapping[str, Any]]) -> dict[str, Any]:
    """Предварительный KVA для формы"""
    quote = service.estimate(items)
    return {"item_prices": quote.item_prices, "total": quote.total, "ruleset": quote.ruleset}


def form_options(country: str | None = None) -> ActionResult:
    """
    Справочники для формы заказа

    Args:
        country: Страна клиента (для информации о стоимости доставки)

    Returns:
        ActionResult с производителями, размерами, количествами, подошвами,
        вариантами рандгумми, странами и стоимостью доставки
    """
    zone = shipping_zone(country)
    return ActionResult.ok(
        {
            "salutations": Salutation.all_salutations(),
            "manufacturers": list(MANUFACTURERS),
            "sizes": list(SHOE_SIZES),
            "quantities": [{"value": value, "label": label} for value, label in QUANTITY_OPTIONS],
            "soles": [
                {"value": sole, "label": info.label, "thickness": info.thickness, "price": info.price}
                for sole, info in SOLE_PRICES.items()
            ],
            "edge_rubber": [
                {"value": option, "label": EdgeRubber.get_label(option)}
                for option in EdgeRubber.all_options()
            ],
            "countries": dict(SUPPORTED_COUNTRIES),
            "shipping": {"zone": zone, **SHIPPING_COSTS[zone]},
        }
    )


async def search_catalog(
    client: CatalogSearchClient, manufacturer: str | None, query: str | None
) -> ActionResult:
    """Подсказки моделей (ошибки каталога дают пустой список)"""
    return ActionResult.ok(await client.search_products(manufacturer, query))


# ==================== АДМИНКА ====================


@handle_action_errors(Messages.STATUS_UPDATE_FAILED)
async def update_order_status(service: OrderService, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Смена статуса заказа"""
    change = await service.change_status(payload)
    return {
        "order_id": change.order_id,
        "from_status": change.from_status,
        "status": change.to_status,
        "event_id": change.id,
    }


@handle_action_errors(Messages.ORDER_UPDATE_FAILED)
async def update_order(service: OrderService, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Сохранение изменений заказа"""
    order = await service.update_order(payload)
    return {"order_id": order.id, "total_price": order.total_price, "version": order.version}


@handle_action_errors(Messages.ORDER_NOT_FOUND)
async def get_order_with_history(service: OrderService, order_id: int):
    return await service.get_order_with_history(order_id)


@handle_action_errors(Messages.INVALID_INPUT)
async def list_orders(
    service: OrderService,
    status: str | None = None,
    search: str | None = None,
    limit: int | None = None,
):
    if limit is None:
        return await service.list_orders(status=status, search=search)
    return await service.list_orders(status=status, search=search, limit=limit)
