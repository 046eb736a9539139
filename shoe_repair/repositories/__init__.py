"""
Repository layer для абстракции работы с базой данных
"""

from shoe_repair.repositories.base import BaseRepository
from shoe_repair.repositories.exceptions import (
    ConcurrentModificationError,
    EntityNotFoundError,
    IntegrityError,
    RepositoryError,
)
from shoe_repair.repositories.order_repository import FieldChange, OrderRepository


__all__ = [
    "BaseRepository",
    "ConcurrentModificationError",
    "EntityNotFoundError",
    "FieldChange",
    "IntegrityError",
    "OrderRepository",
    "RepositoryError",
]
