"""
Конфигурация приложения из переменных окружения (.env)
"""

import logging
import os

from dotenv import load_dotenv


load_dotenv()

logger = logging.getLogger(__name__)


MAX_COMMENT_LENGTH = 2000
MAX_NOTES_LENGTH = 1000


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str) -> int | None:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Переменная %s не является числом: %r", name, value)
        return None


class Config:
    """Конфигурация сервиса"""

    # База данных
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/repair_orders.db")

    # Логирование
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOGS_DIR: str = os.getenv("LOGS_DIR", "logs")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEV_MODE: bool = _get_bool("DEV_MODE", default=False)

    # Ценообразование
    PRICING_RULESET: str = os.getenv("PRICING_RULESET", "v2_disinfection")

    # Публичный адрес (ссылки в письмах)
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/")

    # E-mail (Resend)
    RESEND_API_KEY: str | None = os.getenv("RESEND_API_KEY")
    RESEND_API_URL: str = os.getenv("RESEND_API_URL", "https://api.resend.com")
    FROM_EMAIL: str = os.getenv("FROM_EMAIL", "noreply@kletterschuhe.de")
    FROM_NAME: str = os.getenv("FROM_NAME", "kletterschuhe.de Reparatur-Service")
    ADMIN_EMAIL: str | None = os.getenv("ADMIN_EMAIL")

    # Уведомления сотрудников в Telegram
    TELEGRAM_BOT_TOKEN: str | None = os.getenv("TELEGRAM_BOT_TOKEN")
    STAFF_CHAT_ID: int | None = _get_int("STAFF_CHAT_ID")

    # Каталог магазина (Shopware, только чтение)
    SHOPWARE_API_URL: str = os.getenv("SHOPWARE_API_URL", "https://www.kletterschuhe.de/api")
    SHOPWARE_ACCESS_KEY_ID: str | None = os.getenv("SHOPWARE_ACCESS_KEY_ID")
    SHOPWARE_SECRET_ACCESS_KEY: str | None = os.getenv("SHOPWARE_SECRET_ACCESS_KEY")
    SHOP_BASE_URL: str = os.getenv("SHOP_BASE_URL", "https://www.kletterschuhe.de").rstrip("/")

    # Мониторинг
    SENTRY_DSN: str | None = os.getenv("SENTRY_DSN")

    @classmethod
    def get_database_url(cls) -> str:
        """URL базы данных: DATABASE_URL или SQLite-файл по DATABASE_PATH"""
        if cls.DATABASE_URL:
            return cls.DATABASE_URL
        return f"sqlite+aiosqlite:///{cls.DATABASE_PATH}"

    @classmethod
    def validate(cls) -> None:
        """
        Проверка конфигурации

        Raises:
            ValueError: Если конфигурация некорректна
        """
        # Импорт здесь, чтобы избежать циклического импорта domain -> core
        from shoe_repair.domain.pricing import RULESETS

        if cls.PRICING_RULESET not in RULESETS:
            raise ValueError(
                f"Неизвестный PRICING_RULESET '{cls.PRICING_RULESET}'. "
                f"Допустимые: {', '.join(RULESETS)}"
            )

        if not cls.DATABASE_URL and not cls.DATABASE_PATH:
            raise ValueError("Не задан DATABASE_URL или DATABASE_PATH")

        if cls.TELEGRAM_BOT_TOKEN and cls.STAFF_CHAT_ID is None:
            logger.warning("TELEGRAM_BOT_TOKEN задан, но STAFF_CHAT_ID нет - уведомления в чат отключены")

        if not cls.RESEND_API_KEY:
            logger.info("RESEND_API_KEY не задан - письма только логируются (dev mode)")


class Messages:
    """Сообщения для пользователей (админка и форма заказа на немецком)"""

    UNAUTHORIZED = "Nicht autorisiert"
    INVALID_INPUT = "Ungültige Eingabe"
    ORDER_NOT_FOUND = "Auftrag nicht gefunden"
    INVALID_TRANSITION = "Dieser Statuswechsel ist nicht erlaubt"
    ORDER_NOT_EDITABLE = "Abgeschlossene oder stornierte Aufträge können nicht bearbeitet werden"
    CONCURRENT_MODIFICATION = (
        "Der Auftrag wurde zwischenzeitlich geändert. Bitte laden Sie die Seite neu."
    )
    STATUS_UPDATE_FAILED = "Fehler beim Aktualisieren des Status"
    ORDER_UPDATE_FAILED = "Fehler beim Speichern der Änderungen"
    ORDER_CREATE_FAILED = "Ein unerwarteter Fehler ist aufgetreten"
    DRAFT_EMAIL_REQUIRED = "E-Mail-Adresse wird benötigt"
    DRAFT_SAVE_FAILED = "Draft konnte nicht gespeichert werden"
