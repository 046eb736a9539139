"""Pydantic схемы для валидации заказов (форма приёма и админка)"""
import re
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from shoe_repair.core.config import MAX_COMMENT_LENGTH, MAX_NOTES_LENGTH
from shoe_repair.core.constants import (
    MAX_QUANTITY,
    QUANTITY_STEP,
    SUPPORTED_COUNTRIES,
    OrderStatus,
    Salutation,
    SoleType,
)


SalutationValue = Literal["Herr", "Frau", "Divers"]
EdgeRubberValue = Literal["YES", "NO", "DISCRETION"]

ZIP_REGEX = r"^\d{4,5}$"


def _blank_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


def validate_quantity(v: Decimal) -> Decimal:
    """Количество: положительное, кратное 0.5, не больше MAX_QUANTITY"""
    if v <= 0:
        raise ValueError("Die Anzahl muss größer als 0 sein")
    if v > MAX_QUANTITY:
        raise ValueError(f"Die Anzahl darf höchstens {MAX_QUANTITY} sein")
    if v % Decimal(QUANTITY_STEP) != 0:
        raise ValueError("Die Anzahl muss ein Vielfaches von 0,5 sein")
    return v


class CustomerSchema(BaseModel):
    """Данные клиента (шаг 1 формы)"""

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    salutation: SalutationValue
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    street: str = Field(..., min_length=3, max_length=200)
    house_number: str | None = Field(None, max_length=20)
    zip: str = Field(..., pattern=ZIP_REGEX)
    city: str = Field(..., min_length=2, max_length=100)
    country: str = Field("DE", min_length=2, max_length=2)
    phone: str = Field(..., min_length=6, max_length=30)
    email: EmailStr

    # Адрес доставки
    delivery_same: bool = True
    delivery_salutation: SalutationValue | None = None
    delivery_first_name: str | None = Field(None, max_length=100)
    delivery_last_name: str | None = Field(None, max_length=100)
    delivery_street: str | None = Field(None, max_length=200)
    delivery_house_number: str | None = Field(None, max_length=20)
    delivery_zip: str | None = Field(None, max_length=10)
    delivery_city: str | None = Field(None, max_length=100)
    delivery_country: str | None = Field(None, max_length=2)

    station_notes: str | None = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("country", "delivery_country")
    @classmethod
    def validate_country(cls, v: str | None) -> str | None:
        """Страна - код из списка поддерживаемых"""
        if v is None:
            return None
        v = v.upper()
        if v not in SUPPORTED_COUNTRIES:
            raise ValueError(f"Lieferung nach '{v}' wird nicht unterstützt")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Телефон: цифры, пробелы, +, /, -, скобки"""
        if not re.fullmatch(r"[\d\s+/()-]+", v):
            raise ValueError("Bitte geben Sie eine gültige Telefonnummer ein")
        if len(re.sub(r"\D", "", v)) < 6:
            raise ValueError("Bitte geben Sie eine gültige Telefonnummer ein")
        return v

    @field_validator(
        "house_number",
        "delivery_first_name",
        "delivery_last_name",
        "delivery_street",
        "delivery_house_number",
        "delivery_zip",
        "delivery_city",
        "station_notes",
    )
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def validate_delivery_address(self):
        """Если адрес доставки отличается - он должен быть заполнен полностью"""
        if self.delivery_same:
            return self

        required = [
            self.delivery_first_name,
            self.delivery_last_name,
            self.delivery_street,
            self.delivery_zip,
            self.delivery_city,
        ]
        if not all(required):
            raise ValueError("Bitte füllen Sie die Lieferadresse vollständig aus")
        if not re.match(ZIP_REGEX, self.delivery_zip or ""):
            raise ValueError("Bitte geben Sie eine gültige PLZ für die Lieferadresse ein")
        return self


class CustomerConsentSchema(CustomerSchema):
    """Данные клиента с согласиями (только для новой заявки)"""

    gdpr_accepted: bool
    agb_accepted: bool
    newsletter: bool = False

    @field_validator("gdpr_accepted")
    @classmethod
    def validate_gdpr(cls, v: bool) -> bool:
        if not v:
            raise ValueError("Bitte akzeptieren Sie die Datenschutzerklärung")
        return v

    @field_validator("agb_accepted")
    @classmethod
    def validate_agb(cls, v: bool) -> bool:
        if not v:
            raise ValueError("Bitte akzeptieren Sie die AGB")
        return v


class OrderItemSchema(BaseModel):
    """Позиция заказа - пара или одна туфля (шаг 2 формы)"""

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    quantity: Decimal = Field(..., description="0.5 = одна туфля, 1 = пара")
    manufacturer: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=200)
    color: str | None = Field(None, max_length=100)
    size: str = Field(..., min_length=1, max_length=10)
    sole: str | None = None
    edge_rubber: EdgeRubberValue | None = None
    closure: bool = False
    disinfection: bool = False
    trust_professionals: bool = False
    additional_work: str | None = Field(None, max_length=MAX_NOTES_LENGTH)
    internal_notes: str | None = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, v: Decimal) -> Decimal:
        return validate_quantity(v)

    @field_validator("sole")
    @classmethod
    def validate_sole(cls, v: str | None) -> str | None:
        """Подошва из прайса (пустая допустима только при делегировании)"""
        v = _blank_to_none(v)
        if v is not None and v not in SoleType.all_types():
            raise ValueError("Unbekannte Sohle")
        return v

    @field_validator("color", "additional_work", "internal_notes")
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def validate_technical_choice(self):
        """Без делегирования мастеру подошва и рандгумми обязательны"""
        if self.trust_professionals:
            return self
        if not self.sole:
            raise ValueError("Bitte wählen Sie eine Sohle")
        if self.edge_rubber is None:
            raise ValueError("Bitte wählen Sie eine Option für den Randgummi")
        return self


class OrderCreateSchema(BaseModel):
    """Схема для создания заказа из формы"""

    customer: CustomerConsentSchema
    items: list[OrderItemSchema]

    @field_validator("items")
    @classmethod
    def validate_items(cls, v: list[OrderItemSchema]) -> list[OrderItemSchema]:
        if not v:
            raise ValueError("Bitte fügen Sie mindestens einen Schuh hinzu")
        return v


class DraftSchema(BaseModel):
    """Черновик заказа - минимальная валидация, нужен только e-mail"""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    salutation: SalutationValue = Salutation.HERR
    first_name: str = ""
    last_name: str = ""
    street: str = ""
    house_number: str | None = None
    zip: str = ""
    city: str = ""
    country: str = "DE"
    phone: str = ""
    delivery_same: bool = True
    gdpr_accepted: bool = False
    agb_accepted: bool = False
    newsletter: bool = False


class StatusChangeSchema(BaseModel):
    """Схема смены статуса заказа в админке"""

    model_config = ConfigDict(str_strip_whitespace=True)

    order_id: int = Field(..., gt=0)
    new_status: str
    comment: str | None = Field(None, max_length=MAX_COMMENT_LENGTH)
    tracking_number: str | None = Field(None, max_length=100)
    tracking_carrier: str | None = Field(None, max_length=50)

    @field_validator("new_status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in OrderStatus.all_statuses():
            raise ValueError(f"Unbekannter Status '{v}'")
        return v

    @field_validator("comment", "tracking_number", "tracking_carrier")
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


class OrderItemUpdateSchema(BaseModel):
    """Позиция при редактировании: те же поля, но делегирование не требует выбора"""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: int = Field(..., gt=0)
    quantity: Decimal
    manufacturer: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=200)
    color: str | None = Field(None, max_length=100)
    size: str = Field(..., min_length=1, max_length=10)
    sole: str | None = None
    edge_rubber: EdgeRubberValue | None = None
    closure: bool = False
    disinfection: bool = False
    trust_professionals: bool = False
    additional_work: str | None = Field(None, max_length=MAX_NOTES_LENGTH)
    internal_notes: str | None = Field(None, max_length=MAX_NOTES_LENGTH)
    # Цена, подтверждённая сотрудником; None - рассчитать заново
    calculated_price: Decimal | None = Field(None, ge=0)

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, v: Decimal) -> Decimal:
        return validate_quantity(v)

    @field_validator("sole")
    @classmethod
    def validate_sole(cls, v: str | None) -> str | None:
        v = _blank_to_none(v)
        if v is not None and v not in SoleType.all_types():
            raise ValueError("Unbekannte Sohle")
        return v

    @field_validator("color", "additional_work", "internal_notes")
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def validate_technical_choice(self):
        if self.trust_professionals:
            return self
        if not self.sole or self.edge_rubber is None:
            raise ValueError("Sohle und Randgummi sind erforderlich, wenn nicht delegiert")
        return self


class OrderUpdateSchema(BaseModel):
    """Схема редактирования заказа сотрудником"""

    order_id: int = Field(..., gt=0)
    customer: CustomerSchema
    items: list[OrderItemUpdateSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_items(self):
        ids = [item.id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("Jede Position darf nur einmal vorkommen")
        return self

