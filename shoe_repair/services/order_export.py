"""
Сервис экспорта заказов в Excel
"""

import logging
from collections.abc import Sequence
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from shoe_repair.core.constants import EdgeRubber, OrderStatus
from shoe_repair.database.orm_models import Order, OrderStatusChange
from shoe_repair.presenters.order_presenter import OrderPresenter
from shoe_repair.utils.helpers import format_datetime, format_order_number, format_quantity


logger = logging.getLogger(__name__)

HEADER_FONT = Font(bold=True, size=12, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
SUBHEADER_FILL = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
CENTER_ALIGNMENT = Alignment(horizontal="center", vertical="center")
WRAP_ALIGNMENT = Alignment(vertical="top", wrap_text=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
EURO_FORMAT = '#,##0.00 "€"'

ORDER_COLUMNS: list[tuple[str, int]] = [
    ("Auftrag", 12),
    ("Status", 22),
    ("Erstellt", 18),
    ("Kunde", 28),
    ("E-Mail", 30),
    ("Telefon", 18),
    ("PLZ / Ort", 24),
    ("Positionen", 12),
    ("KVA", 14),
]

ITEM_COLUMNS: list[tuple[str, int]] = [
    ("Pos.", 6),
    ("Menge", 8),
    ("Hersteller", 18),
    ("Modell", 26),
    ("Größe", 8),
    ("Sohle", 26),
    ("Randgummi", 22),
    ("Verschluss", 11),
    ("Desinfektion", 12),
    ("Zusatzarbeiten", 30),
    ("Preis", 12),
]


def _write_header(ws, row: int, columns: list[tuple[str, int]]) -> None:
    for col_idx, (title, width) in enumerate(columns, start=1):
        cell = ws.cell(row=row, column=col_idx, value=title)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER_ALIGNMENT
        cell.border = THIN_BORDER
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def _save(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class OrderExportService:
    """Сервис для экспорта заказов в Excel"""

    @staticmethod
    def export_orders(orders: Sequence[Order], title: str = "Aufträge") -> bytes:
        """
        Экспорт списка заказов: одна строка на заказ

        Args:
            orders: Заказы (с загруженными позициями)
            title: Название листа

        Returns:
            Содержимое .xlsx файла
        """
        wb = Workbook()
        ws = wb.active
        ws.title = title[:31]

        _write_header(ws, 1, ORDER_COLUMNS)
        ws.freeze_panes = "A2"

        for row, order in enumerate(orders, start=2):
            values = [
                format_order_number(order.id),
                OrderStatus.get_status_name(order.status),
                format_datetime(order.created_at),
                order.customer_name,
                order.email,
                order.phone,
                f"{order.zip} {order.city}".strip(),
                len(order.items),
                order.total_price,
            ]
            for col_idx, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col_idx, value=value)
                cell.border = THIN_BORDER
            ws.cell(row=row, column=len(values)).number_format = EURO_FORMAT

        logger.info(f"Экспорт в Excel: заказов {len(orders)}")
        return _save(wb)

    @staticmethod
    def export_order(
        order: Order,
        status_history: Sequence[OrderStatusChange] = (),
    ) -> bytes:
        """
        Экспорт одного заказа: данные клиента, позиции и история статусов

        Args:
            order: Заказ с позициями
            status_history: События статуса (новые сверху)

        Returns:
            Содержимое .xlsx файла
        """
        wb = Workbook()
        ws = wb.active
        ws.title = f"Auftrag {format_order_number(order.id)}"

        last_col = get_column_letter(len(ITEM_COLUMNS))
        ws.merge_cells(f"A1:{last_col}1")
        ws["A1"] = f"REPARATURAUFTRAG {format_order_number(order.id)}"
        ws["A1"].font = Font(bold=True, size=14, color="FFFFFF")
        ws["A1"].fill = HEADER_FILL
        ws["A1"].alignment = CENTER_ALIGNMENT

        data = [
            ("Status", OrderStatus.get_status_name(order.status)),
            ("Erstellt", format_datetime(order.created_at)),
            ("Aktualisiert", format_datetime(order.updated_at)),
            ("Kunde", f"{order.salutation} {order.customer_name}"),
            ("Adresse", f"{order.street} {order.house_number or ''}".strip()),
            ("", f"{order.zip} {order.city}, {order.country}"),
            ("Telefon", order.phone),
            ("E-Mail", order.email),
        ]
        if not order.delivery_same:
            data.append(
                (
                    "Lieferadresse",
                    f"{order.delivery_first_name or ''} {order.delivery_last_name or ''}, "
                    f"{order.delivery_street or ''} {order.delivery_house_number or ''}, "
                    f"{order.delivery_zip or ''} {order.delivery_city or ''}",
                )
            )
        if order.station_notes:
            data.append(("Hinweise", order.station_notes))

        row = 3
        for label, value in data:
            ws.cell(row=row, column=1, value=label).font = Font(bold=True)
            ws.merge_cells(start_row=row, start_column=2, end_row=row, end_column=6)
            ws.cell(row=row, column=2, value=value).alignment = WRAP_ALIGNMENT
            row += 1

        row += 1
        _write_header(ws, row, ITEM_COLUMNS)
        for position, item in enumerate(order.items, start=1):
            row += 1
            values = [
                position,
                format_quantity(item.quantity),
                item.manufacturer,
                item.model,
                item.size,
                OrderPresenter.sole_label(item.sole),
                EdgeRubber.get_label(item.edge_rubber),
                "Ja" if item.closure else "Nein",
                "Ja" if item.disinfection else "Nein",
                item.additional_work or "",
                item.calculated_price,
            ]
            for col_idx, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col_idx, value=value)
                cell.border = THIN_BORDER
                cell.alignment = WRAP_ALIGNMENT
            ws.cell(row=row, column=len(values)).number_format = EURO_FORMAT

        row += 1
        total_label = ws.cell(row=row, column=len(ITEM_COLUMNS) - 1, value="Gesamt (KVA)")
        total_label.font = Font(bold=True)
        total_label.fill = SUBHEADER_FILL
        total = ws.cell(row=row, column=len(ITEM_COLUMNS), value=order.total_price)
        total.font = Font(bold=True)
        total.fill = SUBHEADER_FILL
        total.number_format = EURO_FORMAT

        if status_history:
            row += 2
            ws.cell(row=row, column=1, value="STATUSVERLAUF").font = Font(bold=True, size=12)
            for change in status_history:
                row += 1
                ws.cell(row=row, column=1, value=format_datetime(change.changed_at))
                ws.cell(row=row, column=3, value=OrderStatus.get_status_name(change.to_status))
                ws.cell(row=row, column=5, value=change.changed_by)
                if change.tracking_number:
                    ws.cell(
                        row=row,
                        column=7,
                        value=f"{change.tracking_carrier or ''} {change.tracking_number}".strip(),
                    )
                if change.comment:
                    ws.cell(row=row, column=9, value=change.comment)

        logger.info(f"Экспорт в Excel: заказ #{order.id}")
        return _save(wb)
