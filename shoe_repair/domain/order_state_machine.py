"""
State Machine для валидации переходов статусов заказов
"""

from dataclasses import dataclass
from types import MappingProxyType

from shoe_repair.core.constants import OrderStatus


class InvalidStateTransitionError(Exception):
    """Исключение при попытке недопустимого перехода статуса"""

    def __init__(self, from_state: str, to_state: str, reason: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason
        message = f"Недопустимый переход из '{from_state}' в '{to_state}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


@dataclass
class OrderStateTransitionResult:
    """Результат валидации перехода статуса"""

    is_valid: bool
    error_message: str | None = None
    notify_customer: bool = False


class OrderStateMachine:
    """
    State Machine для управления жизненным циклом заказа

    Граф переходов:

    DRAFT → SUBMITTED → RECEIVED → INSPECTED → REPAIRING → READY → SHIPPED → COMPLETED
               ↓           ↕           ↕            ↕          ↓
            ON_HOLD ───────┴───────────┴────────────┘       ON_HOLD

    CANCELLED достижим из DRAFT, SUBMITTED, RECEIVED, INSPECTED, REPAIRING, ON_HOLD.
    COMPLETED и CANCELLED - терминальные.
    """

    # Допустимые переходы: единственный источник правды и для валидации, и для UI
    TRANSITIONS = MappingProxyType(
        {
            OrderStatus.DRAFT: frozenset({OrderStatus.SUBMITTED, OrderStatus.CANCELLED}),
            OrderStatus.SUBMITTED: frozenset(
                {OrderStatus.RECEIVED, OrderStatus.CANCELLED, OrderStatus.ON_HOLD}
            ),
            OrderStatus.RECEIVED: frozenset(
                {OrderStatus.INSPECTED, OrderStatus.CANCELLED, OrderStatus.ON_HOLD}
            ),
            OrderStatus.INSPECTED: frozenset(
                {OrderStatus.REPAIRING, OrderStatus.CANCELLED, OrderStatus.ON_HOLD}
            ),
            OrderStatus.REPAIRING: frozenset(
                {OrderStatus.READY, OrderStatus.CANCELLED, OrderStatus.ON_HOLD}
            ),
            OrderStatus.READY: frozenset({OrderStatus.SHIPPED, OrderStatus.ON_HOLD}),
            OrderStatus.SHIPPED: frozenset({OrderStatus.COMPLETED}),
            OrderStatus.ON_HOLD: frozenset(
                {
                    OrderStatus.RECEIVED,
                    OrderStatus.INSPECTED,
                    OrderStatus.REPAIRING,
                    OrderStatus.CANCELLED,
                }
            ),
            OrderStatus.COMPLETED: frozenset(),  # Терминальное состояние
            OrderStatus.CANCELLED: frozenset(),  # Терминальное состояние
        }
    )

    # Статусы, о переходе в которые клиент получает письмо
    NOTIFY_STATUSES = frozenset(
        {
            OrderStatus.RECEIVED,
            OrderStatus.INSPECTED,
            OrderStatus.REPAIRING,
            OrderStatus.READY,
            OrderStatus.SHIPPED,
            OrderStatus.ON_HOLD,
        }
    )

    # Статус, для которого сохраняются данные отслеживания посылки
    TRACKING_STATUS = OrderStatus.SHIPPED

    # Порядок вывода вариантов в UI
    _DISPLAY_ORDER = {status: index for index, status in enumerate(OrderStatus.all_statuses())}

    @classmethod
    def can_transition(cls, from_state: str, to_state: str) -> bool:
        """
        Проверка возможности перехода между статусами

        Args:
            from_state: Текущий статус
            to_state: Целевой статус

        Returns:
            True если переход допустим
        """
        return to_state in cls.TRANSITIONS.get(from_state, frozenset())

    @classmethod
    def validate_transition(
        cls,
        from_state: str,
        to_state: str,
        raise_exception: bool = True,
    ) -> OrderStateTransitionResult:
        """
        Валидация перехода статуса

        Args:
            from_state: Текущий статус заказа
            to_state: Целевой статус
            raise_exception: Выбрасывать ли исключение при ошибке

        Returns:
            OrderStateTransitionResult с результатом валидации

        Raises:
            InvalidStateTransitionError: Если переход недопустим и raise_exception=True
        """
        if not cls.can_transition(from_state, to_state):
            error_msg = (
                f"Wechsel von '{OrderStatus.get_status_name(from_state)}' "
                f"zu '{OrderStatus.get_status_name(to_state)}' ist nicht erlaubt"
            )

            # Подсказываем допустимые переходы
            allowed = cls.get_available_transitions(from_state)
            if allowed:
                allowed_names = [OrderStatus.get_status_name(s) for s in allowed]
                error_msg += f". Möglich: {', '.join(allowed_names)}"
            else:
                error_msg += (
                    f". Status '{OrderStatus.get_status_name(from_state)}' ist ein Endstatus"
                )

            if raise_exception:
                raise InvalidStateTransitionError(from_state, to_state, error_msg)

            return OrderStateTransitionResult(is_valid=False, error_message=error_msg)

        return OrderStateTransitionResult(
            is_valid=True,
            notify_customer=cls.should_notify_customer(to_state),
        )

    @classmethod
    def get_available_transitions(cls, from_state: str) -> list[str]:
        """
        Получение списка доступных переходов из текущего статуса

        Args:
            from_state: Текущий статус

        Returns:
            Список статусов в порядке жизненного цикла
        """
        allowed_states = cls.TRANSITIONS.get(from_state, frozenset())
        return sorted(allowed_states, key=lambda s: cls._DISPLAY_ORDER.get(s, len(cls._DISPLAY_ORDER)))

    @classmethod
    def is_terminal_state(cls, state: str) -> bool:
        """
        Проверка, является ли статус терминальным

        Args:
            state: Статус для проверки

        Returns:
            True если из этого статуса нельзя никуда перейти
        """
        return len(cls.TRANSITIONS.get(state, frozenset())) == 0

    @classmethod
    def is_editable(cls, state: str) -> bool:
        """Можно ли редактировать данные клиента и позиции заказа"""
        return state not in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

    @classmethod
    def should_notify_customer(cls, to_state: str) -> bool:
        """Нужно ли отправлять клиенту письмо о переходе в статус"""
        return to_state in cls.NOTIFY_STATUSES

    @classmethod
    def keeps_tracking(cls, to_state: str) -> bool:
        """Сохраняются ли данные отслеживания для целевого статуса"""
        return to_state == cls.TRACKING_STATUS

    @classmethod
    def get_transition_description(cls, from_state: str | None, to_state: str) -> str:
        """
        Описание перехода (для истории и логов)

        Args:
            from_state: Начальный статус (None - создание заказа)
            to_state: Конечный статус

        Returns:
            Описание перехода
        """
        descriptions = {
            (None, OrderStatus.DRAFT): "Entwurf gespeichert",
            (None, OrderStatus.SUBMITTED): "Auftrag über das Formular eingereicht",
            (OrderStatus.DRAFT, OrderStatus.SUBMITTED): "Entwurf eingereicht",
            (OrderStatus.SUBMITTED, OrderStatus.RECEIVED): "Schuhe eingetroffen",
            (OrderStatus.RECEIVED, OrderStatus.INSPECTED): "Schuhe begutachtet",
            (OrderStatus.INSPECTED, OrderStatus.REPAIRING): "Reparatur gestartet",
            (OrderStatus.REPAIRING, OrderStatus.READY): "Reparatur abgeschlossen",
            (OrderStatus.READY, OrderStatus.SHIPPED): "Schuhe versendet",
            (OrderStatus.SHIPPED, OrderStatus.COMPLETED): "Auftrag abgeschlossen",
        }

        key = (from_state, to_state)
        if key in descriptions:
            return descriptions[key]
        if from_state is None:
            return f"Angelegt als {OrderStatus.get_status_name(to_state)}"
        return (
            f"{OrderStatus.get_status_name(from_state)} → "
            f"{OrderStatus.get_status_name(to_state)}"
        )
