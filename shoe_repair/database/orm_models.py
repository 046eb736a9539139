"""
SQLAlchemy ORM модели для базы данных
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

from shoe_repair.utils.helpers import format_order_number, get_now


# Базовый класс для всех моделей
Base = declarative_base()

_STATUS_LIST = (
    "'DRAFT', 'SUBMITTED', 'RECEIVED', 'INSPECTED', 'REPAIRING', "
    "'READY', 'SHIPPED', 'COMPLETED', 'CANCELLED', 'ON_HOLD'"
)


class Order(Base):
    """Модель заказа на ремонт"""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="SUBMITTED")

    # Данные клиента
    salutation: Mapped[str] = mapped_column(String(10), nullable=False, default="Herr")
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    street: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    house_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    zip: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(2), nullable=False, default="DE")
    phone: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    # Адрес доставки (если отличается)
    delivery_same: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    delivery_salutation: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    delivery_first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    delivery_last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    delivery_street: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    delivery_house_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    delivery_zip: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    delivery_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    delivery_country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)

    station_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Согласия
    gdpr_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    agb_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    newsletter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # KVA: сумма сохранённых цен позиций
    total_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    pricing_ruleset: Mapped[str] = mapped_column(String(50), nullable=False)

    # Системные поля
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=get_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=get_now, onupdate=get_now
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    # Связи
    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
    )
    status_changes: Mapped[list["OrderStatusChange"]] = relationship(
        "OrderStatusChange",
        back_populates="order",
        order_by=lambda: [OrderStatusChange.changed_at.desc(), OrderStatusChange.id.desc()],
    )
    field_history: Mapped[list["OrderHistory"]] = relationship(
        "OrderHistory",
        back_populates="order",
        order_by=lambda: [OrderHistory.changed_at.desc(), OrderHistory.id.desc()],
    )

    # Индексы и ограничения
    __table_args__ = (
        Index("idx_orders_status", "status"),
        Index("idx_orders_email", "email"),
        Index("idx_orders_status_created", "status", "created_at"),
        CheckConstraint(f"status IN ({_STATUS_LIST})", name="chk_orders_status"),
        CheckConstraint("total_price >= 0", name="chk_orders_total_price"),
    )

    @property
    def order_number(self) -> str:
        """Номер заказа для клиента"""
        return format_order_number(self.id)

    @property
    def customer_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class OrderItem(Base):
    """Позиция заказа: пара (1) или одна туфля (0.5)"""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    quantity: Mapped[Decimal] = mapped_column(Numeric(4, 1), nullable=False)
    manufacturer: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(200), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    size: Mapped[str] = mapped_column(String(10), nullable=False)

    # Техническое решение (None - на усмотрение мастера)
    sole: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    edge_rubber: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    closure: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    disinfection: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    trust_professionals: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    additional_work: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    internal_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Цена рассчитывается один раз при отправке и не пересчитывается при смене прайса
    calculated_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    order: Mapped["Order"] = relationship("Order", back_populates="items")

    __table_args__ = (
        Index("idx_order_items_order", "order_id", "position"),
        CheckConstraint("quantity > 0 AND quantity <= 10", name="chk_order_items_quantity"),
        CheckConstraint(
            "edge_rubber IS NULL OR edge_rubber IN ('YES', 'NO', 'DISCRETION')",
            name="chk_order_items_edge_rubber",
        ),
        CheckConstraint("calculated_price >= 0", name="chk_order_items_price"),
    )


class OrderStatusChange(Base):
    """История смены статусов (только добавление)"""

    __tablename__ = "order_status_changes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    from_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tracking_carrier: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    tracking_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    changed_by: Mapped[str] = mapped_column(String(255), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=get_now)

    order: Mapped["Order"] = relationship("Order", back_populates="status_changes")

    __table_args__ = (
        Index("idx_status_changes_order", "order_id", "changed_at"),
        CheckConstraint(
            "tracking_number IS NULL OR to_status = 'SHIPPED'",
            name="chk_status_changes_tracking",
        ),
    )


class OrderHistory(Base):
    """История изменения полей заказа (только добавление)"""

    __tablename__ = "order_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    field: Mapped[str] = mapped_column(String(100), nullable=False)
    old_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    new_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    changed_by: Mapped[str] = mapped_column(String(255), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=get_now)

    order: Mapped["Order"] = relationship("Order", back_populates="field_history")

    __table_args__ = (Index("idx_order_history_order", "order_id", "changed_at"),)
