"""
Retry механизм для исходящих запросов (Bot API, HTTP) с экспоненциальным backoff
"""
import asyncio
import logging
from functools import wraps
from typing import Any, Callable, TypeVar

import aiohttp
from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramForbiddenError,
    TelegramNetworkError,
    TelegramNotFound,
    TelegramRetryAfter,
    TelegramServerError,
    TelegramUnauthorizedError,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Ошибки Bot API, которые не исправятся повтором
NON_RETRYABLE_TELEGRAM_EXCEPTIONS = (
    TelegramBadRequest,  # Некорректный запрос
    TelegramNotFound,  # Чат не найден
    TelegramUnauthorizedError,  # Неверный токен бота
    TelegramForbiddenError,  # Бот удалён из чата
)

RETRYABLE_TELEGRAM_EXCEPTIONS = (
    TelegramNetworkError,
    TelegramServerError,
)

# Сетевые ошибки HTTP-клиента и таймауты
RETRYABLE_HTTP_EXCEPTIONS = (
    aiohttp.ClientConnectionError,
    asyncio.TimeoutError,
)


class RetryableHTTPError(Exception):
    """Ответ сервера 429/5xx - запрос можно повторить"""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body[:200]}")


def _backoff_delay(attempt: int, base_delay: float, max_delay: float, exponential_base: float) -> float:
    return min(base_delay * (exponential_base ** (attempt - 1)), max_delay)


def retry_on_telegram_error(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
) -> Callable:
    """
    Декоратор для повтора Bot API запросов с экспоненциальным backoff

    Ошибки не пробрасываются: после исчерпания попыток возвращается None.

    Args:
        max_attempts: Максимальное количество попыток
        base_delay: Базовая задержка между попытками (секунды)
        max_delay: Максимальная задержка между попытками (секунды)
        exponential_base: База для экспоненциального роста задержки

    Returns:
        Декоратор функции

    Example:
        @retry_on_telegram_error(max_attempts=5)
        async def send_notice(bot, chat_id, text):
            return await bot.send_message(chat_id, text)
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T | None:
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)

                except TelegramRetryAfter as e:
                    # 429: Telegram сам сообщает время ожидания
                    wait_time = min(e.retry_after, max_delay)
                    logger.warning(
                        "%s: Flood control (429), retry after %s s. Attempt %d/%d",
                        func.__name__,
                        e.retry_after,
                        attempt,
                        max_attempts,
                    )
                    if attempt < max_attempts:
                        await asyncio.sleep(wait_time)

                except RETRYABLE_TELEGRAM_EXCEPTIONS as e:
                    logger.warning(
                        "%s: %s occurred. Attempt %d/%d. Error: %s",
                        func.__name__,
                        type(e).__name__,
                        attempt,
                        max_attempts,
                        e,
                    )
                    if attempt < max_attempts:
                        await asyncio.sleep(
                            _backoff_delay(attempt, base_delay, max_delay, exponential_base)
                        )

                except NON_RETRYABLE_TELEGRAM_EXCEPTIONS as e:
                    logger.error(
                        "%s: Non-retryable error %s: %s. Not retrying.",
                        func.__name__,
                        type(e).__name__,
                        e,
                    )
                    return None

                except TelegramAPIError as e:
                    logger.error(
                        "%s: Unexpected Telegram API error %s: %s. Not retrying.",
                        func.__name__,
                        type(e).__name__,
                        e,
                    )
                    return None

            logger.error("%s: All %d attempts failed. Giving up.", func.__name__, max_attempts)
            return None

        return wrapper

    return decorator


def retry_on_http_error(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
) -> Callable:
    """
    Декоратор для повтора HTTP запросов (aiohttp) с экспоненциальным backoff

    Повторяются сетевые ошибки, таймауты и RetryableHTTPError.
    В отличие от retry_on_telegram_error, последняя ошибка пробрасывается вызывающему.

    Args:
        max_attempts: Максимальное количество попыток
        base_delay: Базовая задержка между попытками (секунды)
        max_delay: Максимальная задержка между попытками (секунды)
        exponential_base: База для экспоненциального роста задержки
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except (*RETRYABLE_HTTP_EXCEPTIONS, RetryableHTTPError) as e:
                    if attempt >= max_attempts:
                        logger.error(
                            "%s: Max attempts reached. Last error: %s: %s",
                            func.__name__,
                            type(e).__name__,
                            e,
                        )
                        raise
                    delay = _backoff_delay(attempt, base_delay, max_delay, exponential_base)
                    logger.warning(
                        "%s: %s occurred. Attempt %d/%d, retrying in %.2f s",
                        func.__name__,
                        type(e).__name__,
                        attempt,
                        max_attempts,
                        delay,
                    )
                    await asyncio.sleep(delay)
            raise RuntimeError("unreachable")

        return wrapper

    return decorator


async def safe_send_message(
    bot,
    chat_id: int,
    text: str,
    max_attempts: int = 3,
    **kwargs: Any,
) -> Any | None:
    """
    Безопасная отправка сообщения с автоматическим retry

    Args:
        bot: Экземпляр бота
        chat_id: ID чата
        text: Текст сообщения
        max_attempts: Максимальное количество попыток
        **kwargs: Дополнительные параметры для send_message

    Returns:
        Message объект или None при ошибке
    """

    @retry_on_telegram_error(max_attempts=max_attempts)
    async def _send():
        return await bot.send_message(chat_id, text, **kwargs)

    return await _send()
