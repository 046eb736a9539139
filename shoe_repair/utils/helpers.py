"""
Вспомогательные функции
"""

import logging
import re
from datetime import datetime
from decimal import Decimal
from html import escape
from zoneinfo import ZoneInfo


logger = logging.getLogger(__name__)


# Мастерская в Германии
BERLIN_TZ = ZoneInfo("Europe/Berlin")


def get_now() -> datetime:
    """
    Получить текущее время в часовом поясе мастерской

    Returns:
        datetime объект с timezone Europe/Berlin
    """
    return datetime.now(BERLIN_TZ)


def format_datetime(dt: datetime | None) -> str:
    """
    Форматирование даты и времени (немецкий формат)

    Args:
        dt: Объект datetime

    Returns:
        Строка вида 24.12.2025 14:30
    """
    if dt is None:
        return "-"
    return dt.strftime("%d.%m.%Y %H:%M")


def format_order_number(order_id: int) -> str:
    """Номер заказа для клиента: #000042"""
    return f"#{order_id:06d}"


def escape_html(text: str | None) -> str:
    """
    Экранирование специальных символов для HTML

    Защита от HTML injection в письмах и сообщениях с parse_mode="HTML"

    Args:
        text: Исходный текст

    Returns:
        Экранированный текст безопасный для HTML
    """
    if text is None:
        return ""
    return escape(str(text))


def strip_html(html: str) -> str:
    """
    Текстовая версия HTML письма

    Удаляет теги, схлопывает пробелы. Блочные элементы превращаются в переводы строк.
    """
    text = re.sub(r"<(style|script)[^>]*>.*?</\1>", "", html, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"</(p|div|h[1-6]|li|tr)>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    text = (
        text.replace("&nbsp;", " ")
        .replace("&amp;", "&")
        .replace("&lt;", "<")
        .replace("&gt;", ">")
        .replace("&quot;", '"')
        .replace("&#x27;", "'")
    )
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in text.splitlines()]
    text = "\n".join(lines)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def get_customer_display_name(
    first_name: str | None = None,
    last_name: str | None = None,
    salutation: str | None = None,
    default: str = "Unbekannt",
) -> str:
    """
    Отображаемое имя клиента

    Args:
        first_name: Имя
        last_name: Фамилия
        salutation: Обращение (Herr/Frau/Divers)
        default: Что показать, если имени нет (у черновика - e-mail)

    Returns:
        "Max Mustermann" или "Herr Mustermann" если имени нет
    """
    if first_name and last_name:
        return f"{first_name} {last_name}"
    if last_name and salutation:
        return f"{salutation} {last_name}"
    return first_name or last_name or default


def format_quantity(quantity) -> str:
    """
    Количество для отображения: 1, 0,5, 2,5

    Args:
        quantity: Decimal, float или строка

    Returns:
        Строка без лишних нулей, с запятой
    """
    value = Decimal(str(quantity)).normalize()
    return f"{value:f}".replace(".", ",")
