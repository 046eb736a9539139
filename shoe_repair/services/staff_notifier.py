"""
Уведомления сотрудников о новых заказах в Telegram-чат
"""

import logging

from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from shoe_repair.core.config import Config
from shoe_repair.presenters.order_presenter import OrderPresenter
from shoe_repair.utils.retry import safe_send_message


logger = logging.getLogger(__name__)


class StaffNotifier:
    """
    Отправка короткого сообщения о новом заказе в чат мастерской

    Отключён, если не заданы TELEGRAM_BOT_TOKEN и STAFF_CHAT_ID.
    """

    def __init__(self, bot: Bot | None = None, chat_id: int | None = None):
        self.chat_id = chat_id if chat_id is not None else Config.STAFF_CHAT_ID
        self._bot = bot
        self._owns_bot = False

        if self._bot is None and Config.TELEGRAM_BOT_TOKEN and self.chat_id is not None:
            self._bot = Bot(
                token=Config.TELEGRAM_BOT_TOKEN,
                default=DefaultBotProperties(parse_mode=ParseMode.HTML),
            )
            self._owns_bot = True

    @property
    def enabled(self) -> bool:
        return self._bot is not None and self.chat_id is not None

    async def notify_new_order(self, order) -> bool:
        """
        Сообщение о новом заказе

        Args:
            order: Заказ с позициями

        Returns:
            True если сообщение доставлено
        """
        if not self.enabled:
            logger.debug("Уведомления в чат сотрудников отключены")
            return False

        text = OrderPresenter.format_staff_notice(order)
        message = await safe_send_message(self._bot, self.chat_id, text, parse_mode=ParseMode.HTML)
        if message is None:
            logger.warning(f"Не удалось отправить уведомление о заказе #{order.id} в чат сотрудников")
            return False

        logger.info(f"Уведомление о заказе #{order.id} отправлено в чат сотрудников")
        return True

    async def close(self):
        """Закрытие HTTP-сессии бота (если бот создан здесь)"""
        if self._bot is not None and self._owns_bot:
            await self._bot.session.close()
