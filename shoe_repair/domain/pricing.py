"""
Расчёт стоимости ремонта (KVA - Kostenvoranschlag)

Чистые функции: одинаковые входные данные всегда дают одинаковую цену,
без обращения к БД, времени или локали. Таблицы цен неизменяемы.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType

from shoe_repair.core.constants import EdgeRubber, SoleType


CENT = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class SoleInfo:
    """Позиция прайса подошвенной резины"""

    price: Decimal
    thickness: str
    label: str


SOLE_PRICES: Mapping[str, SoleInfo] = MappingProxyType(
    {
        SoleType.VIBRAM_XS_GRIP: SoleInfo(Decimal("32"), "4mm", "Vibram XS Grip"),
        SoleType.VIBRAM_XS_GRIP_2: SoleInfo(Decimal("32"), "4mm", "Vibram XS Grip 2"),
        SoleType.VIBRAM_XS_EDGE: SoleInfo(Decimal("32"), "4mm", "Vibram XS Edge"),
        SoleType.STEALTH_C4: SoleInfo(Decimal("32"), "4mm", "Stealth C4"),
        SoleType.STEALTH_HF: SoleInfo(Decimal("32"), "4mm", "Stealth HF"),
        SoleType.BOREAL: SoleInfo(Decimal("32"), "4mm", "Boreal"),
        SoleType.ORIGINAL_LA_SPORTIVA: SoleInfo(Decimal("41"), "variabel", "Original La Sportiva"),
        SoleType.ORIGINAL_SCARPA: SoleInfo(Decimal("41"), "variabel", "Original Scarpa"),
    }
)

# Стоимость доставки - только для информации, в KVA не входит
SHIPPING_COSTS: Mapping[str, Mapping[str, Decimal]] = MappingProxyType(
    {
        "germany": MappingProxyType({"label": Decimal("7"), "return": Decimal("7")}),
        "eu": MappingProxyType({"label": Decimal("15"), "return": Decimal("11")}),
        "non_eu": MappingProxyType({"label": Decimal("15"), "return": Decimal("15")}),
    }
)

# Страны ЕС из списка доставки (кроме Германии)
EU_COUNTRIES = frozenset({"AT", "BE", "CZ", "DK", "FR", "IT", "LU", "NL", "PL"})


def shipping_zone(country: str | None) -> str:
    """Зона доставки по коду страны: germany, eu или non_eu"""
    code = (country or "DE").upper()
    if code == "DE":
        return "germany"
    return "eu" if code in EU_COUNTRIES else "non_eu"


@dataclass(frozen=True)
class PricingRuleset:
    """
    Набор правил ценообразования

    Доплата за дезинфекцию (v2) и доплата за свободное описание доп. работ (v1)
    - взаимоисключающие политики, в одном наборе может быть только одна.
    """

    name: str
    edge_rubber: Decimal
    closure: Decimal  # Цена за пару
    disinfection: Decimal | None = None
    additional_work: Decimal | None = None
    sole_prices: Mapping[str, SoleInfo] = field(default_factory=lambda: SOLE_PRICES)

    def __post_init__(self):
        if self.disinfection is not None and self.additional_work is not None:
            raise ValueError(
                f"Набор правил '{self.name}': доплаты disinfection и additional_work "
                "не могут действовать одновременно"
            )

    def get_sole_price(self, sole: str | None) -> Decimal:
        """Цена подошвы; пустая или неизвестная подошва стоит 0"""
        if not sole:
            return ZERO
        info = self.sole_prices.get(sole)
        return info.price if info else ZERO


RULESET_V1_ADDITIONAL_WORK = PricingRuleset(
    name="v1_additional_work",
    edge_rubber=Decimal("19"),
    closure=Decimal("20"),
    additional_work=Decimal("10"),
)

RULESET_V2_DISINFECTION = PricingRuleset(
    name="v2_disinfection",
    edge_rubber=Decimal("19"),
    closure=Decimal("20"),
    disinfection=Decimal("3"),
)

RULESETS: Mapping[str, PricingRuleset] = MappingProxyType(
    {
        RULESET_V1_ADDITIONAL_WORK.name: RULESET_V1_ADDITIONAL_WORK,
        RULESET_V2_DISINFECTION.name: RULESET_V2_DISINFECTION,
    }
)

ACTIVE_RULESET = RULESET_V2_DISINFECTION


def get_ruleset(name: str | None = None) -> PricingRuleset:
    """
    Получение набора правил по имени

    Args:
        name: Имя набора (None - активный набор)

    Returns:
        PricingRuleset

    Raises:
        KeyError: Если набор неизвестен
    """
    if name is None:
        return ACTIVE_RULESET
    try:
        return RULESETS[name]
    except KeyError:
        raise KeyError(f"Неизвестный набор правил ценообразования: {name}") from None


@dataclass(frozen=True)
class LineItemOptions:
    """Опции одной позиции заказа, влияющие на цену"""

    quantity: Decimal
    sole: str | None = None
    edge_rubber: str | None = None
    closure: bool = False
    disinfection: bool = False
    trust_professionals: bool = False  # На цену не влияет, только на валидацию
    additional_work: str | None = None

    @property
    def has_additional_work(self) -> bool:
        return bool(self.additional_work and self.additional_work.strip())

    @classmethod
    def from_item(cls, item) -> "LineItemOptions":
        """Построение из схемы или ORM-объекта позиции"""
        return cls(
            quantity=to_decimal(item.quantity),
            sole=item.sole or None,
            edge_rubber=item.edge_rubber,
            closure=bool(item.closure),
            disinfection=bool(getattr(item, "disinfection", False)),
            trust_professionals=bool(getattr(item, "trust_professionals", False)),
            additional_work=getattr(item, "additional_work", None),
        )


def to_decimal(value) -> Decimal:
    """Перевод числа в Decimal без артефактов float (0.1 -> Decimal('0.1'))"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_price(value: Decimal) -> Decimal:
    """Округление до центов (коммерческое округление)"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_unit_price(item: LineItemOptions, ruleset: PricingRuleset = ACTIVE_RULESET) -> Decimal:
    """Цена за единицу (пару) до умножения на количество"""
    price = ruleset.get_sole_price(item.sole)

    if item.edge_rubber == EdgeRubber.YES:
        price += ruleset.edge_rubber

    # Парная цена: добавляется до умножения на количество
    if item.closure:
        price += ruleset.closure

    if ruleset.disinfection is not None and item.disinfection:
        price += ruleset.disinfection

    if ruleset.additional_work is not None and item.has_additional_work:
        price += ruleset.additional_work

    return price


def calculate_item_price(item: LineItemOptions, ruleset: PricingRuleset = ACTIVE_RULESET) -> Decimal:
    """
    Цена одной позиции заказа

    Args:
        item: Опции позиции
        ruleset: Набор правил ценообразования

    Returns:
        Цена, округлённая до центов
    """
    return round_price(calculate_unit_price(item, ruleset) * to_decimal(item.quantity))


def calculate_total_price(
    items: Iterable[LineItemOptions], ruleset: PricingRuleset = ACTIVE_RULESET
) -> Decimal:
    """Итог заказа - сумма уже округлённых цен позиций"""
    return sum((calculate_item_price(item, ruleset) for item in items), round_price(ZERO))


def sum_prices(prices: Iterable[Decimal]) -> Decimal:
    """Сумма сохранённых цен позиций"""
    return round_price(sum((to_decimal(p) for p in prices), ZERO))


def format_price(price) -> str:
    """
    Форматирование цены для отображения (de-DE)

    Примеры:
        Decimal("71") -> "71,00 €"
        Decimal("1234.5") -> "1.234,50 €"
    """
    value = round_price(to_decimal(price))
    text = f"{value:,.2f}"
    # 1,234.50 -> 1.234,50
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text} €"
