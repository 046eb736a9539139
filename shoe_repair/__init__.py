"""Сервис приёма и администрирования заказов на ремонт скальных туфель"""

__version__ = "1.0.0"
