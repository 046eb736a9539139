"""
Отправка писем через Resend HTTP API
"""

import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

from shoe_repair.core.config import Config
from shoe_repair.presenters.email_presenter import EmailMessage
from shoe_repair.utils.helpers import strip_html
from shoe_repair.utils.pii_masking import mask_email
from shoe_repair.utils.retry import RetryableHTTPError, retry_on_http_error


logger = logging.getLogger(__name__)

DEV_MODE_MESSAGE_ID = "dev-mode"
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=15)


@dataclass(frozen=True)
class SendResult:
    """Результат отправки письма"""

    success: bool
    message_id: str | None = None
    error: str | None = None


class EmailSender:
    """
    Клиент Resend

    Без API-ключа работает в dev-режиме: письмо не отправляется,
    получатель и тема пишутся в лог, результат - успех с id "dev-mode".
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        from_email: str | None = None,
        from_name: str | None = None,
    ):
        self.api_key = api_key if api_key is not None else Config.RESEND_API_KEY
        self.api_url = (api_url or Config.RESEND_API_URL).rstrip("/")
        self.from_email = from_email or Config.FROM_EMAIL
        self.from_name = from_name or Config.FROM_NAME

    @property
    def dev_mode(self) -> bool:
        return not self.api_key

    @property
    def sender(self) -> str:
        return f"{self.from_name} <{self.from_email}>"

    async def send(self, message: EmailMessage) -> SendResult:
        """
        Отправка письма

        Ошибки не пробрасываются: результат всегда SendResult.

        Args:
            message: Письмо

        Returns:
            SendResult
        """
        if self.dev_mode:
            logger.info(
                "[Email] dev mode, письмо не отправлено: to=%s, subject=%s",
                mask_email(message.to),
                message.subject,
            )
            return SendResult(success=True, message_id=DEV_MODE_MESSAGE_ID)

        payload = {
            "from": self.sender,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
            "text": message.text or strip_html(message.html),
        }

        try:
            data = await self._post("/emails", payload)
        except RetryableHTTPError as e:
            logger.error("[Email] Resend недоступен (%s): %s", e.status, mask_email(message.to))
            return SendResult(success=False, error=f"HTTP {e.status}")
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.error("[Email] Ошибка сети при отправке на %s: %s", mask_email(message.to), e)
            return SendResult(success=False, error="Failed to send email")
        except ValueError as e:
            logger.error("[Email] Некорректный ответ Resend для %s: %s", mask_email(message.to), e)
            return SendResult(success=False, error="Invalid response")

        if not isinstance(data, dict):
            logger.error("[Email] Некорректный ответ Resend для %s", mask_email(message.to))
            return SendResult(success=False, error="Invalid response")

        if "error" in data:
            error = data["error"]
            logger.error("[Email] Resend отклонил письмо на %s: %s", mask_email(message.to), error)
            return SendResult(success=False, error=str(error))

        message_id = data.get("id")
        logger.info("[Email] Отправлено на %s, id=%s", mask_email(message.to), message_id)
        return SendResult(success=True, message_id=message_id)

    @retry_on_http_error(max_attempts=3)
    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with aiohttp.ClientSession(timeout=REQUEST_TIMEOUT) as session:
            async with session.post(f"{self.api_url}{path}", json=payload, headers=headers) as response:
                if response.status == 429 or response.status >= 500:
                    raise RetryableHTTPError(response.status, await response.text())
                if response.status >= 400:
                    # Ошибка валидации Resend: {"statusCode": 422, "message": "..."}
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        # HTML страница прокси вместо JSON
                        data = None
                    if isinstance(data, dict) and data.get("message"):
                        return {"error": data["message"]}
                    return {"error": f"HTTP {response.status}"}
                return await response.json(content_type=None)
