"""
Тесты для OrderStateMachine
"""
import pytest

from shoe_repair.core.constants import OrderStatus
from shoe_repair.domain.order_state_machine import (
    InvalidStateTransitionError,
    OrderStateMachine,
)


ALLOWED = [
    (OrderStatus.DRAFT, OrderStatus.SUBMITTED),
    (OrderStatus.DRAFT, OrderStatus.CANCELLED),
    (OrderStatus.SUBMITTED, OrderStatus.RECEIVED),
    (OrderStatus.SUBMITTED, OrderStatus.ON_HOLD),
    (OrderStatus.RECEIVED, OrderStatus.INSPECTED),
    (OrderStatus.INSPECTED, OrderStatus.REPAIRING),
    (OrderStatus.REPAIRING, OrderStatus.READY),
    (OrderStatus.READY, OrderStatus.SHIPPED),
    (OrderStatus.READY, OrderStatus.ON_HOLD),
    (OrderStatus.SHIPPED, OrderStatus.COMPLETED),
    (OrderStatus.ON_HOLD, OrderStatus.RECEIVED),
    (OrderStatus.ON_HOLD, OrderStatus.REPAIRING),
    (OrderStatus.ON_HOLD, OrderStatus.CANCELLED),
]

FORBIDDEN = [
    (OrderStatus.SUBMITTED, OrderStatus.SHIPPED),
    (OrderStatus.DRAFT, OrderStatus.RECEIVED),
    (OrderStatus.READY, OrderStatus.CANCELLED),
    (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    (OrderStatus.SHIPPED, OrderStatus.READY),
    (OrderStatus.ON_HOLD, OrderStatus.SHIPPED),
    (OrderStatus.COMPLETED, OrderStatus.SUBMITTED),
    (OrderStatus.CANCELLED, OrderStatus.SUBMITTED),
]


class TestTransitions:
    """Таблица переходов"""

    @pytest.mark.parametrize(("from_state", "to_state"), ALLOWED)
    def test_allowed(self, from_state, to_state):
        assert OrderStateMachine.can_transition(from_state, to_state)
        result = OrderStateMachine.validate_transition(from_state, to_state)
        assert result.is_valid

    @pytest.mark.parametrize(("from_state", "to_state"), FORBIDDEN)
    def test_forbidden(self, from_state, to_state):
        assert not OrderStateMachine.can_transition(from_state, to_state)
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            OrderStateMachine.validate_transition(from_state, to_state)
        assert exc_info.value.from_state == from_state
        assert exc_info.value.to_state == to_state

    @pytest.mark.parametrize("status", OrderStatus.all_statuses())
    def test_same_status_is_rejected(self, status):
        assert not OrderStateMachine.can_transition(status, status)

    def test_unknown_status(self):
        assert not OrderStateMachine.can_transition("UNKNOWN", OrderStatus.SUBMITTED)
        assert OrderStateMachine.get_available_transitions("UNKNOWN") == []

    def test_validate_without_exception(self):
        result = OrderStateMachine.validate_transition(
            OrderStatus.COMPLETED, OrderStatus.SUBMITTED, raise_exception=False
        )
        assert not result.is_valid
        assert "Endstatus" in result.error_message

    def test_error_lists_possible_targets(self):
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            OrderStateMachine.validate_transition(OrderStatus.SHIPPED, OrderStatus.READY)
        assert "Abgeschlossen" in exc_info.value.reason

    def test_every_status_has_row(self):
        assert set(OrderStateMachine.TRANSITIONS) == set(OrderStatus.all_statuses())


class TestStatusProperties:
    """Терминальные статусы, уведомления, трек-номер"""

    @pytest.mark.parametrize("status", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
    def test_terminal(self, status):
        assert OrderStateMachine.is_terminal_state(status)
        assert not OrderStateMachine.is_editable(status)
        assert OrderStateMachine.get_available_transitions(status) == []

    def test_non_terminal_is_editable(self):
        assert not OrderStateMachine.is_terminal_state(OrderStatus.SHIPPED)
        assert OrderStateMachine.is_editable(OrderStatus.SHIPPED)

    @pytest.mark.parametrize(
        "status",
        [
            OrderStatus.RECEIVED,
            OrderStatus.INSPECTED,
            OrderStatus.REPAIRING,
            OrderStatus.READY,
            OrderStatus.SHIPPED,
            OrderStatus.ON_HOLD,
        ],
    )
    def test_notify_customer(self, status):
        assert OrderStateMachine.should_notify_customer(status)

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.DRAFT, OrderStatus.SUBMITTED, OrderStatus.COMPLETED, OrderStatus.CANCELLED],
    )
    def test_no_notification(self, status):
        assert not OrderStateMachine.should_notify_customer(status)

    def test_only_shipped_keeps_tracking(self):
        keeping = [s for s in OrderStatus.all_statuses() if OrderStateMachine.keeps_tracking(s)]
        assert keeping == [OrderStatus.SHIPPED]

    def test_available_transitions_in_lifecycle_order(self):
        assert OrderStateMachine.get_available_transitions(OrderStatus.SUBMITTED) == [
            OrderStatus.RECEIVED,
            OrderStatus.CANCELLED,
            OrderStatus.ON_HOLD,
        ]

    def test_creation_description(self):
        description = OrderStateMachine.get_transition_description(None, OrderStatus.SUBMITTED)
        assert description
