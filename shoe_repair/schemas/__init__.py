"""Pydantic schemas package"""
from shoe_repair.schemas.order import (
    CustomerConsentSchema,
    CustomerSchema,
    DraftSchema,
    OrderCreateSchema,
    OrderItemSchema,
    OrderItemUpdateSchema,
    OrderUpdateSchema,
    StatusChangeSchema,
)


__all__ = [
    # Customer schemas
    "CustomerConsentSchema",
    "CustomerSchema",
    # Order schemas
    "DraftSchema",
    "OrderCreateSchema",
    "OrderItemSchema",
    "OrderItemUpdateSchema",
    "OrderUpdateSchema",
    "StatusChangeSchema",
]
