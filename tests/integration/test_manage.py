"""
Тесты командной строки: экспорт заказов в Excel
"""
from decimal import Decimal
from unittest.mock import patch

import pytest
from openpyxl import load_workbook

import manage
from shoe_repair.core.config import Config
from shoe_repair.core.constants import INTAKE_ACTOR, OrderStatus
from shoe_repair.services.order_service import DEFAULT_LIST_LIMIT
from tests.factories import CUSTOMER, STAFF_ACTOR


pytestmark = pytest.mark.integration


async def fill_orders(order_repo, count: int, status: str = OrderStatus.SUBMITTED) -> None:
    for _ in range(count):
        await order_repo.create(
            status=status,
            customer=CUSTOMER,
            items=[],
            total_price=Decimal("0.00"),
            pricing_ruleset="v2_disinfection",
            changed_by=INTAKE_ACTOR,
        )


async def run(orm_db, *argv: str) -> int:
    args = manage.build_parser().parse_args(["--actor", STAFF_ACTOR, *argv])
    with patch.object(Config, "DATABASE_URL", orm_db.database_url):
        return await manage.run_command(args)


class TestExport:
    async def test_all_orders_exported(self, orm_db, order_repo, tmp_path):
        """Экспорт без --limit не обрезается лимитом списка"""
        await fill_orders(order_repo, DEFAULT_LIST_LIMIT + 5)
        output = tmp_path / "orders.xlsx"

        code = await run(orm_db, "export", str(output))

        assert code == 0
        ws = load_workbook(output).active
        assert ws.max_row == DEFAULT_LIST_LIMIT + 5 + 1

    async def test_limit_and_status(self, orm_db, order_repo, tmp_path):
        await fill_orders(order_repo, 4)
        await fill_orders(order_repo, 2, status=OrderStatus.DRAFT)
        output = tmp_path / "orders.xlsx"

        code = await run(orm_db, "export", str(output), "--status", OrderStatus.SUBMITTED, "--limit", "3")

        assert code == 0
        ws = load_workbook(output).active
        assert ws.max_row == 3 + 1
        assert {ws.cell(row=row, column=2).value for row in range(2, 5)} == {"Eingereicht"}

    async def test_without_actor(self, orm_db, tmp_path, capsys):
        args = manage.build_parser().parse_args(["export", str(tmp_path / "orders.xlsx")])

        with patch.object(Config, "DATABASE_URL", orm_db.database_url):
            code = await manage.run_command(args)

        assert code == 1
        assert "❌" in capsys.readouterr().out
        assert not (tmp_path / "orders.xlsx").exists()
