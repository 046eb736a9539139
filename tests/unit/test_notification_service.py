"""
Тесты уведомлений (e-mail клиенту, сотрудникам)
"""
import asyncio
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shoe_repair.core.config import Config
from shoe_repair.core.constants import OrderStatus
from shoe_repair.services.email_sender import SendResult
from shoe_repair.services.exceptions import NotificationError
from shoe_repair.services.notification_service import NotificationService
from shoe_repair.services.staff_notifier import StaffNotifier


def make_order():
    item = SimpleNamespace(
        quantity=Decimal("1"),
        manufacturer="La Sportiva",
        model="Solution",
        calculated_price=Decimal("71.00"),
    )
    return SimpleNamespace(
        id=42,
        status=OrderStatus.SUBMITTED,
        first_name="Lena",
        last_name="Berger",
        customer_name="Lena Berger",
        zip="80331",
        city="München",
        email="lena.berger@example.com",
        total_price=Decimal("71.00"),
        items=[item],
    )


@pytest.fixture()
def email_sender():
    sender = MagicMock()
    sender.send = AsyncMock(return_value=SendResult(success=True, message_id="msg_1"))
    return sender


@pytest.fixture()
def staff_notifier():
    notifier = MagicMock()
    notifier.notify_new_order = AsyncMock(return_value=True)
    return notifier


@pytest.fixture()
def service(email_sender, staff_notifier) -> NotificationService:
    return NotificationService(
        email_sender=email_sender,
        staff_notifier=staff_notifier,
        admin_email="admin@kletterschuhe.de",
    )


class TestStatusUpdate:
    async def test_sends_email(self, service, email_sender):
        await service.send_status_update(make_order(), OrderStatus.SHIPPED, tracking_number="0034")

        message = email_sender.send.await_args.args[0]
        assert message.to == "lena.berger@example.com"
        assert "0034" in message.html

    async def test_silent_status(self, service, email_sender):
        result = await service.send_status_update(make_order(), OrderStatus.COMPLETED)

        assert result.success
        email_sender.send.assert_not_called()

    async def test_failure_raises(self, service, email_sender):
        email_sender.send.return_value = SendResult(success=False, error="HTTP 503")

        with pytest.raises(NotificationError):
            await service.send_status_update(make_order(), OrderStatus.RECEIVED)


class TestOrderConfirmation:
    async def test_customer_admin_and_staff(self, service, email_sender, staff_notifier):
        await service.send_order_confirmation(make_order())

        recipients = [call.args[0].to for call in email_sender.send.await_args_list]
        assert recipients == ["lena.berger@example.com", "admin@kletterschuhe.de"]
        staff_notifier.notify_new_order.assert_awaited_once()

    async def test_staff_notified_even_if_customer_email_fails(
        self, service, email_sender, staff_notifier
    ):
        email_sender.send.return_value = SendResult(success=False, error="Invalid `to` field")

        with pytest.raises(NotificationError):
            await service.send_order_confirmation(make_order())

        staff_notifier.notify_new_order.assert_awaited_once()

    async def test_without_admin_email(self, email_sender):
        service = NotificationService(email_sender=email_sender, admin_email="")

        await service.send_order_confirmation(make_order())

        assert email_sender.send.await_count == 1


class TestFireAndForget:
    async def test_notify_status_change_runs_in_background(self, service, email_sender):
        task = service.notify_status_change(make_order(), OrderStatus.READY)

        assert task is not None
        await service.wait_pending(timeout=1)
        email_sender.send.assert_awaited_once()
        assert service.pending_count == 0

    async def test_no_task_for_silent_status(self, service):
        assert service.notify_status_change(make_order(), OrderStatus.CANCELLED) is None

    async def test_failure_is_logged_not_raised(self, service, email_sender, caplog):
        email_sender.send.side_effect = RuntimeError("boom")

        task = service.notify_order_created(make_order())
        await asyncio.wait_for(task, timeout=1)

        assert task.exception() is None
        assert "подтверждение заказа #42" in caplog.text

    async def test_wait_pending_cancels_slow_tasks(self, service):
        async def slow():
            await asyncio.sleep(10)

        task = service.dispatch(slow(), "медленная отправка")
        await service.wait_pending(timeout=0.01)
        await asyncio.gather(task, return_exceptions=True)

        assert task.cancelled()


class TestStaffNotifier:
    async def test_disabled_without_bot(self):
        with patch.object(Config, "TELEGRAM_BOT_TOKEN", ""), patch.object(Config, "STAFF_CHAT_ID", None):
            notifier = StaffNotifier()

        assert not notifier.enabled
        assert await notifier.notify_new_order(make_order()) is False

    async def test_sends_html_notice(self):
        bot = MagicMock()
        bot.send_message = AsyncMock(return_value=MagicMock())
        notifier = StaffNotifier(bot=bot, chat_id=-100123)

        assert await notifier.notify_new_order(make_order()) is True

        chat_id, text = bot.send_message.await_args.args
        assert chat_id == -100123
        assert "Neuer Auftrag #000042" in text
        assert bot.send_message.await_args.kwargs["parse_mode"] == "HTML"

    async def test_send_failure(self):
        bot = MagicMock()
        bot.send_message = AsyncMock(return_value=None)
        notifier = StaffNotifier(bot=bot, chat_id=-100123)

        assert await notifier.notify_new_order(make_order()) is False
