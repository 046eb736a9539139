"""
OrderPresenter - форматирование заказов для отображения (CLI, чат сотрудников)
"""

from shoe_repair.core.constants import SUPPORTED_COUNTRIES, EdgeRubber, OrderStatus
from shoe_repair.domain.pricing import SOLE_PRICES, format_price
from shoe_repair.utils.helpers import (
    escape_html as escape_html_util,
    format_datetime,
    format_order_number,
    format_quantity,
    get_customer_display_name,
)


class OrderPresenter:
    """Presenter для форматирования заказов"""

    @staticmethod
    def sole_label(sole: str | None) -> str:
        """Название подошвы для людей"""
        if not sole:
            return "Wird von uns festgelegt"
        info = SOLE_PRICES.get(sole)
        return info.label if info else sole

    @staticmethod
    def format_item(item, escape_html: bool = False) -> str:
        """
        Одна позиция заказа в несколько строк

        Args:
            item: Позиция заказа
            escape_html: Экранировать HTML-спецсимволы

        Returns:
            Текст позиции
        """

        def safe(value):
            return escape_html_util(value) if escape_html and value else value

        head = f"{format_quantity(item.quantity)}x {safe(item.manufacturer)} {safe(item.model)}"
        details = [f"Größe {safe(item.size)}"]
        if item.color:
            details.append(safe(item.color))

        text = f"{head} ({', '.join(details)}) - {format_price(item.calculated_price)}\n"
        if item.trust_professionals:
            text += "   Technik: Vertrauen in die Profis\n"
        text += f"   Sohle: {OrderPresenter.sole_label(item.sole)}\n"
        text += f"   Randgummi: {EdgeRubber.get_label(item.edge_rubber)}\n"

        extras = []
        if item.closure:
            extras.append("Verschluss")
        if item.disinfection:
            extras.append("Desinfektion")
        if extras:
            text += f"   Extras: {', '.join(extras)}\n"
        if item.additional_work:
            text += f"   Zusatzarbeiten: {safe(item.additional_work)}\n"
        if item.internal_notes:
            text += f"   Intern: {safe(item.internal_notes)}\n"
        return text

    @staticmethod
    def format_order_details(order, status_history=None, field_history=None) -> str:
        """
        Форматирование детальной информации о заказе (CLI)

        Args:
            order: Объект заказа с позициями
            status_history: События статуса (новые сверху)
            field_history: Изменения полей (новые сверху)

        Returns:
            Отформатированный текст
        """
        status_name = OrderStatus.get_status_name(order.status)
        status_emoji = OrderStatus.get_status_emoji(order.status)

        text = f"Auftrag {format_order_number(order.id)}\n"
        text += f"Status: {status_emoji} {status_name}\n"
        text += f"Erstellt: {format_datetime(order.created_at)}\n\n"

        text += "Kunde:\n"
        text += f"   {order.salutation} {order.first_name} {order.last_name}\n"
        street = f"{order.street} {order.house_number or ''}".strip()
        text += f"   {street}\n"
        country = SUPPORTED_COUNTRIES.get(order.country, order.country)
        text += f"   {order.zip} {order.city}, {country}\n"
        text += f"   {order.email} | {order.phone}\n"

        if not order.delivery_same:
            text += "Lieferadresse:\n"
            text += f"   {order.delivery_first_name} {order.delivery_last_name}\n"
            delivery_street = f"{order.delivery_street} {order.delivery_house_number or ''}".strip()
            text += f"   {delivery_street}\n"
            text += f"   {order.delivery_zip} {order.delivery_city}\n"

        if order.station_notes:
            text += f"Hinweise: {order.station_notes}\n"

        text += f"\nPositionen ({len(order.items)}):\n"
        for index, item in enumerate(order.items, start=1):
            text += f"{index}. {OrderPresenter.format_item(item)}"

        text += f"\nKostenvoranschlag (KVA): {format_price(order.total_price)}\n"

        if status_history:
            text += "\nStatusverlauf:\n"
            for change in status_history:
                text += f"   {OrderPresenter.format_status_change(change)}\n"

        if field_history:
            text += "\nÄnderungen:\n"
            for record in field_history:
                text += (
                    f"   {format_datetime(record.changed_at)} {record.field}: "
                    f"{record.old_value or '-'} → {record.new_value or '-'} ({record.changed_by})\n"
                )

        return text

    @staticmethod
    def format_status_change(change) -> str:
        """Одна строка истории статусов"""
        target = OrderStatus.get_status_name(change.to_status)
        if change.from_status:
            line = f"{OrderStatus.get_status_name(change.from_status)} → {target}"
        else:
            line = f"Angelegt: {target}"

        text = f"{format_datetime(change.changed_at)} {line} ({change.changed_by})"
        if change.tracking_number:
            text += f" [{change.tracking_carrier or '-'} {change.tracking_number}]"
        if change.comment:
            text += f" - {change.comment}"
        return text

    @staticmethod
    def format_order_short(order) -> str:
        """
        Краткое форматирование заказа для списков

        Args:
            order: Объект заказа

        Returns:
            Краткий текст заказа
        """
        status_emoji = OrderStatus.get_status_emoji(order.status)
        name = get_customer_display_name(
            order.first_name, order.last_name, order.salutation, default=order.email
        )
        return (
            f"{status_emoji} {format_order_number(order.id)} - {name} - "
            f"{OrderStatus.get_status_name(order.status)} - {format_price(order.total_price)}"
        )

    @staticmethod
    def format_order_list(orders: list, title: str = "Aufträge") -> str:
        """
        Форматирование списка заказов

        Args:
            orders: Список заказов
            title: Заголовок списка

        Returns:
            Отформатированный список заказов
        """
        if not orders:
            return f"{title}: keine Aufträge"

        text = f"{title} ({len(orders)}):\n\n"
        for order in orders:
            text += f"• {OrderPresenter.format_order_short(order)}\n"
        return text

    @staticmethod
    def format_staff_notice(order) -> str:
        """
        Уведомление о новом заказе для чата сотрудников (parse_mode=HTML)

        Args:
            order: Заказ с позициями

        Returns:
            HTML текст для Telegram
        """
        text = (
            f"🆕 <b>Neuer Auftrag {format_order_number(order.id)}</b>\n\n"
            f"👤 {escape_html_util(order.first_name)} {escape_html_util(order.last_name)}\n"
            f"📍 {escape_html_util(order.zip)} {escape_html_util(order.city)}\n"
        )
        for item in order.items:
            text += (
                f"• {format_quantity(item.quantity)}x "
                f"{escape_html_util(item.manufacturer)} {escape_html_util(item.model)} "
                f"({format_price(item.calculated_price)})\n"
            )
        text += f"\n💰 <b>KVA:</b> {format_price(order.total_price)}"
        return text
