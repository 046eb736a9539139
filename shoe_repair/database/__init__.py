"""
Database package: ORM модели и подключение
"""

from shoe_repair.database.orm_database import ORMDatabase
from shoe_repair.database.orm_models import (
    Base,
    Order,
    OrderHistory,
    OrderItem,
    OrderStatusChange,
)


__all__ = [
    "Base",
    "ORMDatabase",
    "Order",
    "OrderHistory",
    "OrderItem",
    "OrderStatusChange",
]
