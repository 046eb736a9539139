"""Утилиты и вспомогательные функции"""
from shoe_repair.utils.helpers import (
    escape_html,
    format_datetime,
    format_order_number,
    format_quantity,
    get_customer_display_name,
    get_now,
    strip_html,
)
from shoe_repair.utils.pii_masking import (
    mask_dict,
    mask_email,
    mask_name,
    mask_phone,
    safe_str_order,
    sanitize_log_message,
)
from shoe_repair.utils.retry import (
    RetryableHTTPError,
    retry_on_http_error,
    retry_on_telegram_error,
    safe_send_message,
)


__all__ = [
    "RetryableHTTPError",
    "escape_html",
    # Format utilities
    "format_datetime",
    "format_order_number",
    "format_quantity",
    "get_customer_display_name",
    # DateTime utilities
    "get_now",
    # PII Masking (GDPR)
    "mask_dict",
    "mask_email",
    "mask_name",
    "mask_phone",
    # Retry utilities
    "retry_on_http_error",
    "retry_on_telegram_error",
    "safe_send_message",
    "safe_str_order",
    "sanitize_log_message",
    "strip_html",
]
