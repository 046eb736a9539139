"""
Сервисы бизнес-логики
"""

from shoe_repair.services.catalog_search import CatalogSearchClient, ProductSuggestion
from shoe_repair.services.email_sender import EmailSender, SendResult
from shoe_repair.services.exceptions import (
    NotificationError,
    OrderNotEditableError,
    OrderValidationError,
    UnauthorizedError,
)
from shoe_repair.services.identity import IdentityProvider, StaticIdentityProvider
from shoe_repair.services.notification_service import NotificationService
from shoe_repair.services.order_export import OrderExportService
from shoe_repair.services.order_service import OrderService, OrderWithHistory, Quote
from shoe_repair.services.staff_notifier import StaffNotifier


__all__ = [
    "CatalogSearchClient",
    "EmailSender",
    "IdentityProvider",
    "NotificationError",
    "NotificationService",
    "OrderExportService",
    "OrderNotEditableError",
    "OrderService",
    "OrderValidationError",
    "OrderWithHistory",
    "ProductSuggestion",
    "Quote",
    "SendResult",
    "StaffNotifier",
    "StaticIdentityProvider",
    "UnauthorizedError",
]
