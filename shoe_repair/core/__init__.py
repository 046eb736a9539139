"""Ядро приложения - конфигурация и константы"""

from shoe_repair.core.config import MAX_COMMENT_LENGTH, MAX_NOTES_LENGTH, Config, Messages
from shoe_repair.core.constants import EdgeRubber, OrderStatus, Salutation, SoleType


__all__ = [
    "MAX_COMMENT_LENGTH",
    "MAX_NOTES_LENGTH",
    "Config",
    "EdgeRubber",
    "Messages",
    "OrderStatus",
    "Salutation",
    "SoleType",
]
