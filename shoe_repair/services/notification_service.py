"""
Уведомления клиента и сотрудников

Отправка выполняется в фоновых задачах: сбой уведомления логируется
и никогда не влияет на результат смены статуса или создания заказа.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from shoe_repair.core.config import Config
from shoe_repair.domain.order_state_machine import OrderStateMachine
from shoe_repair.presenters.email_presenter import EmailPresenter
from shoe_repair.services.email_sender import EmailSender, SendResult
from shoe_repair.services.exceptions import NotificationError
from shoe_repair.services.staff_notifier import StaffNotifier
from shoe_repair.utils.pii_masking import mask_email


logger = logging.getLogger(__name__)


class NotificationService:
    """Сервис уведомлений (e-mail клиенту, e-mail и чат сотрудникам)"""

    def __init__(
        self,
        email_sender: EmailSender | None = None,
        staff_notifier: StaffNotifier | None = None,
        admin_email: str | None = None,
    ):
        self.email_sender = email_sender or EmailSender()
        self.staff_notifier = staff_notifier
        self.admin_email = admin_email if admin_email is not None else Config.ADMIN_EMAIL
        self._pending: set[asyncio.Task] = set()

    # ==================== FIRE-AND-FORGET ====================

    def dispatch(self, coro: Coroutine[Any, Any, Any], description: str) -> asyncio.Task:
        """
        Запуск уведомления в фоне

        Ссылка на задачу хранится до её завершения.

        Args:
            coro: Корутина отправки
            description: Описание для логов

        Returns:
            asyncio.Task
        """
        task = asyncio.create_task(self._run_safely(coro, description))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run_safely(self, coro: Coroutine[Any, Any, Any], description: str) -> None:
        try:
            await coro
        except Exception:
            logger.exception(f"Ошибка уведомления: {description}")

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def wait_pending(self, timeout: float | None = None) -> None:
        """Дождаться отправки всех фоновых уведомлений (при остановке приложения)"""
        if not self._pending:
            return
        done, not_done = await asyncio.wait(set(self._pending), timeout=timeout)
        if not_done:
            logger.warning(f"Не дождались {len(not_done)} уведомлений, отменяем")
            for task in not_done:
                task.cancel()

    # ==================== ОТПРАВКА ====================

    async def send_status_update(
        self,
        order,
        new_status: str,
        comment: str | None = None,
        tracking_number: str | None = None,
        tracking_carrier: str | None = None,
    ) -> SendResult:
        """
        Письмо клиенту о смене статуса

        Raises:
            NotificationError: Если письмо не отправлено
        """
        if not OrderStateMachine.should_notify_customer(new_status):
            return SendResult(success=True)

        message = EmailPresenter.status_update(
            order,
            new_status,
            comment=comment,
            tracking_number=tracking_number,
            tracking_carrier=tracking_carrier,
        )
        result = await self.email_sender.send(message)
        if not result.success:
            raise NotificationError("email", result.error or "unknown error")

        logger.info(
            f"Письмо о статусе {new_status} по заказу #{order.id} отправлено на {mask_email(order.email)}"
        )
        return result

    async def send_order_confirmation(self, order) -> SendResult:
        """
        Подтверждение клиенту и уведомления сотрудникам о новом заказе

        Сотрудники уведомляются, даже если письмо клиенту не ушло.

        Raises:
            NotificationError: Если письмо клиенту не отправлено
        """
        result = await self.email_sender.send(EmailPresenter.order_confirmation(order))

        if self.admin_email:
            admin_result = await self.email_sender.send(
                EmailPresenter.admin_new_order(order, self.admin_email)
            )
            if not admin_result.success:
                logger.warning(f"Письмо администратору о заказе #{order.id} не отправлено")

        if self.staff_notifier is not None:
            await self.staff_notifier.notify_new_order(order)

        if not result.success:
            raise NotificationError("email", result.error or "unknown error")
        return result

    def notify_status_change(self, order, new_status: str, **kwargs) -> asyncio.Task | None:
        """Фоновое письмо о смене статуса (только для статусов с уведомлением)"""
        if not OrderStateMachine.should_notify_customer(new_status):
            return None
        return self.dispatch(
            self.send_status_update(order, new_status, **kwargs),
            f"статус {new_status} заказа #{order.id}",
        )

    def notify_order_created(self, order) -> asyncio.Task:
        """Фоновое подтверждение нового заказа"""
        return self.dispatch(
            self.send_order_confirmation(order),
            f"подтверждение заказа #{order.id}",
        )
