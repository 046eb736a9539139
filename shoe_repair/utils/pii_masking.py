"""
Утилиты для маскирования персональных данных (PII) в логах
Соответствие GDPR (DSGVO)

Маскируются:
- E-mail клиентов
- Имена клиентов
- Телефоны клиентов
"""

import re
from typing import Any


def mask_email(email: str | None) -> str:
    """
    Маскирует e-mail

    Примеры:
        max.mustermann@example.com → m***n@example.com
        ab@example.com → **@example.com

    Args:
        email: E-mail адрес

    Returns:
        Маскированный адрес (домен сохраняется для отладки доставки)
    """
    if not email:
        return "[no email]"

    local, sep, domain = email.partition("@")
    if not sep:
        return "***"

    if len(local) <= 2:
        masked_local = "*" * len(local)
    else:
        masked_local = f"{local[0]}***{local[-1]}"

    return f"{masked_local}@{domain}"


def mask_phone(phone: str | None) -> str:
    """
    Маскирует телефонный номер

    Примеры:
        +49 170 1234567 → +4****4567
        0170/1234567 → 01****4567

    Args:
        phone: Телефонный номер

    Returns:
        Маскированный номер
    """
    if not phone:
        return "[no phone]"

    # Удаляем все нецифровые символы кроме +
    clean_phone = re.sub(r"[^\d+]", "", phone)

    if len(clean_phone) < 5:
        return "****"

    return f"{clean_phone[:2]}****{clean_phone[-4:]}"


def mask_name(name: str | None) -> str:
    """
    Маскирует имя клиента

    Примеры:
        Max Mustermann → M***x M***n
        Li → L*

    Args:
        name: Имя клиента

    Returns:
        Маскированное имя
    """
    if not name:
        return "[no name]"

    masked_parts = []
    for part in name.strip().split():
        if len(part) <= 1:
            masked_parts.append("*")
        elif len(part) == 2:
            masked_parts.append(f"{part[0]}*")
        else:
            masked_parts.append(f"{part[0]}***{part[-1]}")

    return " ".join(masked_parts)


def safe_str_order(order: Any) -> str:
    """
    Безопасное строковое представление заказа для логов

    Args:
        order: ORM объект Order или словарь

    Returns:
        Строка без PII клиента
    """
    if not order:
        return "[no order]"

    if isinstance(order, dict):
        order_id = order.get("id", "?")
        status = order.get("status", "UNKNOWN")
        email = order.get("email")
    else:
        order_id = getattr(order, "id", "?")
        status = getattr(order, "status", "UNKNOWN")
        email = getattr(order, "email", None)

    return f"Order(#{order_id}, {status}, {mask_email(email)})"


def sanitize_log_message(message: str) -> str:
    """
    Очищает строку лога от возможных PII используя регулярные выражения

    Паттерны:
    - Email: xxx@xxx.xxx
    - Телефоны: +49..., 0170...

    Args:
        message: Исходное сообщение

    Returns:
        Очищенное сообщение
    """
    message = re.sub(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b", "[EMAIL]", message)
    message = re.sub(r"(?<![\w#])(?:\+\d{2}|0)[\d\s/-]{7,}\d", "[PHONE]", message)
    return message


PII_FIELDS = {
    "first_name",
    "last_name",
    "street",
    "house_number",
    "phone",
    "email",
    "delivery_first_name",
    "delivery_last_name",
    "delivery_street",
    "delivery_house_number",
}


def mask_dict(data: dict[str, Any]) -> dict[str, Any]:
    """
    Маскирует PII поля в словаре

    Args:
        data: Словарь с данными

    Returns:
        Словарь с маскированными PII
    """
    masked = data.copy()

    for key, value in masked.items():
        if key not in PII_FIELDS or not value:
            continue
        if key == "email":
            masked[key] = mask_email(str(value))
        elif key == "phone":
            masked[key] = mask_phone(str(value))
        elif "name" in key:
            masked[key] = mask_name(str(value))
        else:
            masked[key] = "***"

    return masked
