"""
Тесты retry-декораторов
"""
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest
from aiogram.exceptions import TelegramBadRequest, TelegramNetworkError

from shoe_repair.utils.retry import (
    RetryableHTTPError,
    retry_on_http_error,
    retry_on_telegram_error,
    safe_send_message,
)


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("shoe_repair.utils.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


class TestRetryOnHttpError:
    async def test_success_after_retry(self, no_sleep):
        calls = AsyncMock(side_effect=[aiohttp.ClientConnectionError("reset"), {"id": "1"}])

        @retry_on_http_error(max_attempts=3, base_delay=1.0)
        async def request():
            return await calls()

        assert await request() == {"id": "1"}
        assert calls.await_count == 2
        no_sleep.assert_awaited_once_with(1.0)

    async def test_last_error_is_raised(self):
        calls = AsyncMock(side_effect=RetryableHTTPError(502, "bad gateway"))

        @retry_on_http_error(max_attempts=3)
        async def request():
            return await calls()

        with pytest.raises(RetryableHTTPError):
            await request()
        assert calls.await_count == 3

    async def test_other_errors_not_retried(self):
        calls = AsyncMock(side_effect=ValueError("bad json"))

        @retry_on_http_error(max_attempts=3)
        async def request():
            return await calls()

        with pytest.raises(ValueError):
            await request()
        assert calls.await_count == 1

    async def test_backoff_grows(self, no_sleep):
        calls = AsyncMock(side_effect=[TimeoutError(), TimeoutError(), "ok"])

        @retry_on_http_error(max_attempts=3, base_delay=1.0, exponential_base=2.0)
        async def request():
            return await calls()

        assert await request() == "ok"
        assert [call.args[0] for call in no_sleep.await_args_list] == [1.0, 2.0]


class TestRetryOnTelegramError:
    async def test_network_error_retried_then_none(self):
        calls = AsyncMock(side_effect=TelegramNetworkError(method=MagicMock(), message="timeout"))

        @retry_on_telegram_error(max_attempts=2)
        async def send():
            return await calls()

        assert await send() is None
        assert calls.await_count == 2

    async def test_bad_request_not_retried(self):
        calls = AsyncMock(side_effect=TelegramBadRequest(method=MagicMock(), message="chat not found"))

        @retry_on_telegram_error(max_attempts=3)
        async def send():
            return await calls()

        assert await send() is None
        assert calls.await_count == 1


class TestSafeSendMessage:
    async def test_sends(self):
        bot = MagicMock()
        bot.send_message = AsyncMock(return_value="message")

        result = await safe_send_message(bot, 100, "Hallo", parse_mode="HTML")

        assert result == "message"
        bot.send_message.assert_awaited_once_with(100, "Hallo", parse_mode="HTML")
