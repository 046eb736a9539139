"""Тесты для Pydantic схем валидации"""
from copy import deepcopy
from decimal import Decimal

import pytest
from pydantic import ValidationError

from shoe_repair.schemas import (
    DraftSchema,
    OrderCreateSchema,
    OrderItemSchema,
    OrderItemUpdateSchema,
    OrderUpdateSchema,
    StatusChangeSchema,
)
from tests.factories import CUSTOMER, DELEGATED_ITEM, PAIR_ITEM


def order_data(**customer_overrides) -> dict:
    customer = deepcopy(CUSTOMER)
    customer.update(customer_overrides)
    return {"customer": customer, "items": [deepcopy(PAIR_ITEM)]}


class TestOrderCreateSchema:
    """Тесты валидации формы заказа"""

    def test_valid_order(self):
        order = OrderCreateSchema(**order_data())
        assert order.customer.email == "lena.berger@example.com"
        assert order.items[0].quantity == Decimal("1")

    def test_requires_items(self):
        data = order_data()
        data["items"] = []
        with pytest.raises(ValidationError):
            OrderCreateSchema(**data)

    def test_requires_gdpr(self):
        with pytest.raises(ValidationError):
            OrderCreateSchema(**order_data(gdpr_accepted=False))

    def test_requires_agb(self):
        with pytest.raises(ValidationError):
            OrderCreateSchema(**order_data(agb_accepted=False))

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            OrderCreateSchema(**order_data(email="not-an-email"))

    @pytest.mark.parametrize("zip_code", ["123", "ABCDE", "123456"])
    def test_invalid_zip(self, zip_code):
        with pytest.raises(ValidationError):
            OrderCreateSchema(**order_data(zip=zip_code))

    def test_austrian_zip(self):
        order = OrderCreateSchema(**order_data(zip="1010", city="Wien", country="at"))
        assert order.customer.country == "AT"

    def test_unsupported_country(self):
        with pytest.raises(ValidationError):
            OrderCreateSchema(**order_data(country="US"))

    def test_invalid_phone(self):
        with pytest.raises(ValidationError):
            OrderCreateSchema(**order_data(phone="call me maybe"))

    def test_delivery_address_required_when_different(self):
        with pytest.raises(ValidationError):
            OrderCreateSchema(**order_data(delivery_same=False))

    def test_delivery_address_complete(self):
        order = OrderCreateSchema(
            **order_data(
                delivery_same=False,
                delivery_first_name="Max",
                delivery_last_name="Berger",
                delivery_street="Nebenweg",
                delivery_zip="10115",
                delivery_city="Berlin",
            )
        )
        assert order.customer.delivery_city == "Berlin"

    def test_blank_optional_fields_become_none(self):
        order = OrderCreateSchema(**order_data(house_number="  ", station_notes=""))
        assert order.customer.house_number is None
        assert order.customer.station_notes is None


class TestOrderItemSchema:
    """Тесты позиции заказа"""

    @pytest.mark.parametrize("quantity", ["0.5", "1", "2.5", "10"])
    def test_valid_quantity(self, quantity):
        item = OrderItemSchema(**{**PAIR_ITEM, "quantity": quantity})
        assert item.quantity == Decimal(quantity)

    @pytest.mark.parametrize("quantity", ["0", "-1", "0.3", "1.25", "10.5", "11"])
    def test_invalid_quantity(self, quantity):
        with pytest.raises(ValidationError):
            OrderItemSchema(**{**PAIR_ITEM, "quantity": quantity})

    def test_sole_required_unless_delegated(self):
        with pytest.raises(ValidationError):
            OrderItemSchema(**{**PAIR_ITEM, "sole": None})

    def test_edge_rubber_required_unless_delegated(self):
        with pytest.raises(ValidationError):
            OrderItemSchema(**{**PAIR_ITEM, "edge_rubber": None})

    def test_delegated_item_without_choice(self):
        item = OrderItemSchema(**DELEGATED_ITEM)
        assert item.sole is None
        assert item.edge_rubber is None

    def test_unknown_sole(self):
        with pytest.raises(ValidationError):
            OrderItemSchema(**{**PAIR_ITEM, "sole": "gummi_bärchen"})

    def test_unknown_edge_rubber(self):
        with pytest.raises(ValidationError):
            OrderItemSchema(**{**PAIR_ITEM, "edge_rubber": "MAYBE"})


class TestDraftSchema:
    """Тесты черновика"""

    def test_only_email_required(self):
        draft = DraftSchema(email="kunde@example.com")
        assert draft.first_name == ""
        assert draft.country == "DE"

    def test_email_required(self):
        with pytest.raises(ValidationError):
            DraftSchema(first_name="Lena")


class TestStatusChangeSchema:
    """Тесты смены статуса"""

    def test_valid(self):
        data = StatusChangeSchema(
            order_id=1, new_status="SHIPPED", tracking_number=" 0034 ", comment=""
        )
        assert data.tracking_number == "0034"
        assert data.comment is None

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            StatusChangeSchema(order_id=1, new_status="LOST")

    def test_order_id_positive(self):
        with pytest.raises(ValidationError):
            StatusChangeSchema(order_id=0, new_status="RECEIVED")

    def test_comment_length(self):
        with pytest.raises(ValidationError):
            StatusChangeSchema(order_id=1, new_status="RECEIVED", comment="x" * 2001)


class TestOrderUpdateSchema:
    """Тесты редактирования заказа"""

    def test_valid_update(self):
        data = OrderUpdateSchema(
            order_id=1,
            customer=CUSTOMER,
            items=[{**PAIR_ITEM, "id": 5, "calculated_price": "60.00"}],
        )
        assert data.items[0].calculated_price == Decimal("60.00")

    def test_duplicate_items(self):
        item = {**PAIR_ITEM, "id": 5}
        with pytest.raises(ValidationError):
            OrderUpdateSchema(order_id=1, customer=CUSTOMER, items=[item, item])

    def test_negative_price(self):
        with pytest.raises(ValidationError):
            OrderItemUpdateSchema(**{**PAIR_ITEM, "id": 5, "calculated_price": "-1"})
