"""
Исключения сервисного слоя
"""


class UnauthorizedError(Exception):
    """Действие сотрудника без авторизованного пользователя"""

    def __init__(self, action: str = ""):
        self.action = action
        super().__init__(f"Действие '{action}' требует авторизации" if action else "Нет авторизации")


class OrderValidationError(ValueError):
    """Данные заказа не прошли проверку (помимо pydantic-схем)"""


class OrderNotEditableError(Exception):
    """Заказ в терминальном статусе нельзя редактировать"""

    def __init__(self, order_id: int, status: str):
        self.order_id = order_id
        self.status = status
        super().__init__(f"Заказ #{order_id} в статусе {status} нельзя редактировать")


class NotificationError(Exception):
    """Сбой отправки уведомления (только логируется, переход не отменяется)"""

    def __init__(self, channel: str, reason: str):
        self.channel = channel
        self.reason = reason
        super().__init__(f"{channel}: {reason}")
