"""
Тесты расчёта стоимости ремонта (KVA)
"""
from decimal import Decimal

import pytest

from shoe_repair.core.constants import EdgeRubber, SoleType
from shoe_repair.domain.pricing import (
    ACTIVE_RULESET,
    RULESET_V1_ADDITIONAL_WORK,
    RULESET_V2_DISINFECTION,
    SOLE_PRICES,
    LineItemOptions,
    PricingRuleset,
    calculate_item_price,
    calculate_total_price,
    calculate_unit_price,
    format_price,
    get_ruleset,
    round_price,
    sum_prices,
)


def make_item(**overrides) -> LineItemOptions:
    values = {
        "quantity": Decimal("1"),
        "sole": SoleType.VIBRAM_XS_GRIP,
        "edge_rubber": EdgeRubber.YES,
        "closure": True,
    }
    values.update(overrides)
    return LineItemOptions(**values)


class TestScenarios:
    """Типовые заказы"""

    def test_pair_with_edge_rubber_and_closure(self):
        assert calculate_item_price(make_item()) == Decimal("71.00")

    def test_single_shoe_is_half_price(self):
        assert calculate_item_price(make_item(quantity=Decimal("0.5"))) == Decimal("35.50")

    def test_order_total(self):
        items = [make_item(), make_item(quantity=Decimal("0.5"))]
        assert calculate_total_price(items) == Decimal("106.50")

    def test_original_sole_only(self):
        item = make_item(
            sole=SoleType.ORIGINAL_LA_SPORTIVA, edge_rubber=EdgeRubber.NO, closure=False
        )
        assert calculate_item_price(item) == Decimal("41.00")

    def test_three_pairs(self):
        assert calculate_item_price(make_item(quantity=Decimal("3"))) == Decimal("213.00")

    def test_delegated_item_without_sole_costs_nothing(self):
        item = make_item(sole=None, edge_rubber=None, closure=False, trust_professionals=True)
        assert calculate_item_price(item) == Decimal("0.00")

    def test_delegated_item_keeps_closure_price(self):
        item = make_item(sole=None, edge_rubber=None, trust_professionals=True)
        assert calculate_item_price(item) == Decimal("20.00")


class TestOptions:
    """Влияние отдельных опций на цену"""

    @pytest.mark.parametrize("sole", list(SOLE_PRICES))
    def test_every_sole_has_price(self, sole):
        item = make_item(sole=sole, edge_rubber=EdgeRubber.NO, closure=False)
        assert calculate_item_price(item) == SOLE_PRICES[sole].price

    def test_unknown_sole_costs_nothing(self):
        item = make_item(sole="unknown", edge_rubber=EdgeRubber.NO, closure=False)
        assert calculate_item_price(item) == Decimal("0.00")

    def test_edge_rubber_no_equals_discretion(self):
        no = calculate_item_price(make_item(edge_rubber=EdgeRubber.NO))
        discretion = calculate_item_price(make_item(edge_rubber=EdgeRubber.DISCRETION))
        assert no == discretion == Decimal("52.00")

    def test_closure_is_halved_for_single_shoe(self):
        with_closure = calculate_item_price(make_item(quantity=Decimal("0.5")))
        without = calculate_item_price(make_item(quantity=Decimal("0.5"), closure=False))
        assert with_closure - without == Decimal("10.00")

    def test_disinfection_surcharge_in_v2(self):
        price = calculate_item_price(make_item(disinfection=True), RULESET_V2_DISINFECTION)
        assert price == Decimal("74.00")

    def test_disinfection_ignored_in_v1(self):
        price = calculate_item_price(make_item(disinfection=True), RULESET_V1_ADDITIONAL_WORK)
        assert price == Decimal("71.00")

    def test_additional_work_surcharge_in_v1(self):
        item = make_item(additional_work="Zehenkappe flicken")
        assert calculate_item_price(item, RULESET_V1_ADDITIONAL_WORK) == Decimal("81.00")

    def test_blank_additional_work_is_free_in_v1(self):
        item = make_item(additional_work="   ")
        assert calculate_item_price(item, RULESET_V1_ADDITIONAL_WORK) == Decimal("71.00")

    def test_additional_work_free_in_v2(self):
        item = make_item(additional_work="Zehenkappe flicken")
        assert calculate_item_price(item, RULESET_V2_DISINFECTION) == Decimal("71.00")


class TestProperties:
    """Свойства расчёта"""

    @pytest.mark.parametrize("quantity", ["0.5", "1", "1.5", "2", "4.5", "10"])
    def test_price_is_linear_in_quantity(self, quantity):
        unit = calculate_unit_price(make_item(disinfection=True))
        price = calculate_item_price(make_item(quantity=Decimal(quantity), disinfection=True))
        assert price == round_price(unit * Decimal(quantity))

    def test_same_input_same_price(self):
        assert calculate_item_price(make_item()) == calculate_item_price(make_item())

    def test_total_is_sum_of_rounded_items(self):
        items = [make_item(), make_item(quantity=Decimal("1.5")), make_item(quantity=Decimal("0.5"))]
        expected = sum((calculate_item_price(item) for item in items), Decimal("0"))
        assert calculate_total_price(items) == expected

    def test_empty_total_is_zero(self):
        assert calculate_total_price([]) == Decimal("0.00")
        assert sum_prices([]) == Decimal("0.00")

    def test_prices_have_two_decimals(self):
        assert calculate_item_price(make_item()).as_tuple().exponent == -2

    def test_round_half_up(self):
        assert round_price(Decimal("0.005")) == Decimal("0.01")
        assert round_price(Decimal("1.234")) == Decimal("1.23")


class TestRulesets:
    """Наборы правил"""

    def test_active_ruleset_is_v2(self):
        assert ACTIVE_RULESET is RULESET_V2_DISINFECTION
        assert get_ruleset() is ACTIVE_RULESET

    def test_get_ruleset_by_name(self):
        assert get_ruleset("v1_additional_work") is RULESET_V1_ADDITIONAL_WORK

    def test_unknown_ruleset(self):
        with pytest.raises(KeyError):
            get_ruleset("v99")

    def test_default_sole_table(self):
        """Без своей таблицы набор использует общий прайс подошв"""
        ruleset = PricingRuleset(name="custom", edge_rubber=Decimal("19"), closure=Decimal("20"))

        assert ruleset.sole_prices is SOLE_PRICES
        assert RULESET_V1_ADDITIONAL_WORK.sole_prices is SOLE_PRICES
        assert ruleset.get_sole_price(SoleType.VIBRAM_XS_GRIP) == Decimal("32")

    def test_custom_sole_table(self):
        ruleset = PricingRuleset(
            name="custom",
            edge_rubber=Decimal("19"),
            closure=Decimal("20"),
            sole_prices={},
        )

        assert ruleset.get_sole_price(SoleType.VIBRAM_XS_GRIP) == Decimal("0")

    def test_surcharges_are_mutually_exclusive(self):
        with pytest.raises(ValueError):
            PricingRuleset(
                name="broken",
                edge_rubber=Decimal("19"),
                closure=Decimal("20"),
                disinfection=Decimal("3"),
                additional_work=Decimal("10"),
            )


class TestFromItem:
    """Построение опций из схемы или ORM-объекта"""

    def test_from_object(self):
        class Item:
            quantity = 0.5
            sole = ""
            edge_rubber = None
            closure = 1

        options = LineItemOptions.from_item(Item())
        assert options.quantity == Decimal("0.5")
        assert options.sole is None
        assert options.closure is True
        assert options.disinfection is False


class TestFormatPrice:
    """Форматирование цены (de-DE)"""

    def test_simple(self):
        assert format_price(Decimal("71")) == "71,00 €"

    def test_thousands(self):
        assert format_price(Decimal("1234.5")) == "1.234,50 €"

    def test_float_input(self):
        assert format_price(35.5) == "35,50 €"
