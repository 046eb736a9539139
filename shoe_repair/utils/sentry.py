"""
Sentry для мастерской (включается переменной SENTRY_DSN)
"""

import logging
from typing import Any

from shoe_repair import __version__
from shoe_repair.core.config import Config
from shoe_repair.utils.pii_masking import mask_dict, sanitize_log_message


logger = logging.getLogger(__name__)


def scrub_event(event: dict[str, Any], hint: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Удаление e-mail и телефонов клиентов из события перед отправкой

    Args:
        event: Событие Sentry
        hint: Подсказка Sentry (не используется)

    Returns:
        То же событие с замаскированными текстами
    """
    log_entry = event.get("logentry") or {}
    for key in ("message", "formatted"):
        if isinstance(log_entry.get(key), str):
            log_entry[key] = sanitize_log_message(log_entry[key])

    for exception in (event.get("exception") or {}).get("values", []):
        if isinstance(exception.get("value"), str):
            exception["value"] = sanitize_log_message(exception["value"])

    for crumb in (event.get("breadcrumbs") or {}).get("values", []):
        if isinstance(crumb.get("message"), str):
            crumb["message"] = sanitize_log_message(crumb["message"])

    # Поля заказа, переданные через extra / set_context
    if isinstance(event.get("extra"), dict):
        event["extra"] = mask_dict(event["extra"])
    for name, context in (event.get("contexts") or {}).items():
        if isinstance(context, dict):
            event["contexts"][name] = mask_dict(context)

    return event


def init_sentry() -> str | None:
    """
    Подключение Sentry, если задан SENTRY_DSN

    Returns:
        DSN при успешной инициализации, иначе None
    """
    dsn = Config.SENTRY_DSN
    if not dsn:
        logger.info("SENTRY_DSN не задан, ошибки отслеживаются только в логах")
        return None

    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration
    except ImportError:
        logger.warning("sentry-sdk не установлен: pip install -e .[monitoring]")
        return None

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=Config.ENVIRONMENT,
            release=f"shoe-repair@{__version__}",
            traces_sample_rate=0.0,
            integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
            send_default_pii=False,
            before_send=scrub_event,
        )
    except Exception as e:
        logger.error(f"Sentry не инициализирован: {e}")
        return None

    logger.info(f"Sentry включён ({Config.ENVIRONMENT})")
    return dsn