"""
Domain layer для бизнес-логики: ценообразование и жизненный цикл заказа
"""

from shoe_repair.domain.order_state_machine import (
    InvalidStateTransitionError,
    OrderStateMachine,
    OrderStateTransitionResult,
)
from shoe_repair.domain.pricing import (
    ACTIVE_RULESET,
    RULESETS,
    LineItemOptions,
    PricingRuleset,
    calculate_item_price,
    calculate_total_price,
    format_price,
    get_ruleset,
)


__all__ = [
    "ACTIVE_RULESET",
    "RULESETS",
    "InvalidStateTransitionError",
    "LineItemOptions",
    "OrderStateMachine",
    "OrderStateTransitionResult",
    "PricingRuleset",
    "calculate_item_price",
    "calculate_total_price",
    "format_price",
    "get_ruleset",
]
