"""
EmailPresenter - HTML письма клиенту и администратору

Все подставляемые значения экранируются.
"""

from dataclasses import dataclass

from shoe_repair.core.config import Config
from shoe_repair.core.constants import DEFAULT_TRACKING_CARRIER, OrderStatus
from shoe_repair.domain.pricing import format_price
from shoe_repair.utils.helpers import escape_html, format_order_number, format_quantity


@dataclass(frozen=True)
class EmailMessage:
    """Готовое письмо"""

    to: str
    subject: str
    html: str
    text: str | None = None


# Заголовок и текст письма для статусов, о которых сообщаем клиенту
STATUS_MESSAGES: dict[str, tuple[str, str]] = {
    OrderStatus.RECEIVED: (
        "Ihre Schuhe sind eingetroffen!",
        "Wir haben Ihre Schuhe erhalten und werden sie in Kürze begutachten.",
    ),
    OrderStatus.INSPECTED: (
        "Begutachtung abgeschlossen",
        "Wir haben Ihre Schuhe begutachtet. Die Reparatur kann beginnen.",
    ),
    OrderStatus.REPAIRING: (
        "Reparatur gestartet",
        "Ihre Schuhe befinden sich jetzt in der Reparatur.",
    ),
    OrderStatus.READY: (
        "Reparatur abgeschlossen!",
        "Ihre Schuhe sind fertig repariert und werden in Kürze versandt.",
    ),
    OrderStatus.SHIPPED: (
        "Ihre Schuhe sind unterwegs!",
        "Wir haben Ihre reparierten Schuhe versandt.",
    ),
    OrderStatus.ON_HOLD: (
        "Rückfrage zu Ihrem Auftrag",
        "Wir haben eine Frage zu Ihrem Auftrag. Bitte kontaktieren Sie uns.",
    ),
}

_FOOTER = """
<hr style="margin: 32px 0; border: none; border-top: 1px solid #e5e5e5;">
<p style="font-size: 12px; color: #888888; line-height: 1.5;">
  Diese E-Mail wurde automatisch generiert.<br>
  Bei Fragen antworten Sie bitte direkt auf diese E-Mail oder kontaktieren Sie uns unter:<br>
  <a href="mailto:info@kletterschuhe.de" style="color: #ef6a27;">info@kletterschuhe.de</a>
</p>
"""


def _base_template(content: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family: Arial, sans-serif; margin: 0; padding: 0; background-color: #f3f3f3;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: #ef6a27; padding: 24px; border-radius: 8px 8px 0 0; text-align: center;">
      <h1 style="margin: 0; color: white; font-size: 24px;">kletterschuhe.de</h1>
      <p style="margin: 8px 0 0; color: rgba(255,255,255,0.9); font-size: 14px;">Reparatur-Service</p>
    </div>
    <div style="background: white; padding: 32px; border-radius: 0 0 8px 8px;">
      {content}
      {_FOOTER}
    </div>
  </div>
</body>
</html>
"""


class EmailPresenter:
    """Presenter для писем"""

    @staticmethod
    def print_url(order_id: int) -> str:
        """Ссылка на страницу печати бланка заказа"""
        return f"{Config.PUBLIC_BASE_URL}/order/{order_id}/print"

    @staticmethod
    def admin_url(order_id: int) -> str:
        return f"{Config.PUBLIC_BASE_URL}/admin/orders/{order_id}"

    @staticmethod
    def _item_line(item) -> str:
        return (
            f"{format_quantity(item.quantity)}x "
            f"{escape_html(item.manufacturer)} {escape_html(item.model)}"
        )

    @staticmethod
    def order_confirmation(order) -> EmailMessage:
        """
        Подтверждение заказа клиенту (после отправки формы)

        Args:
            order: Заказ с загруженными позициями

        Returns:
            EmailMessage
        """
        number = format_order_number(order.id)
        rows = "".join(
            f"""
      <tr>
        <td style="padding: 12px; border-bottom: 1px solid #eee;">{EmailPresenter._item_line(item)}</td>
        <td style="padding: 12px; border-bottom: 1px solid #eee; text-align: right; font-weight: bold;">
          {escape_html(format_price(item.calculated_price))}
        </td>
      </tr>"""
            for item in order.items
        )
        print_url = escape_html(EmailPresenter.print_url(order.id))

        html = _base_template(f"""
    <h2 style="margin: 0 0 16px; color: #38362d;">Vielen Dank für Ihren Reparaturauftrag!</h2>
    <p style="color: #666; line-height: 1.6;">
      Guten Tag {escape_html(order.customer_name)},<br><br>
      wir haben Ihren Reparaturauftrag erhalten und bestätigen hiermit den Eingang.
    </p>
    <div style="background: #f8f8f8; padding: 16px; border-radius: 8px; margin: 24px 0;">
      <p style="margin: 0; font-size: 14px; color: #888;">Auftragsnummer</p>
      <p style="margin: 4px 0 0; font-size: 24px; font-weight: bold; color: #ef6a27;">{number}</p>
    </div>
    <h3 style="margin: 24px 0 12px; color: #38362d;">Ihre Positionen:</h3>
    <table style="width: 100%; border-collapse: collapse;">
      {rows}
      <tr style="background: #f8f8f8;">
        <td style="padding: 12px; font-weight: bold;">Kostenvoranschlag (KVA)</td>
        <td style="padding: 12px; text-align: right; font-weight: bold; color: #ef6a27;">
          {escape_html(format_price(order.total_price))}
        </td>
      </tr>
    </table>
    <div style="background: #fff8f0; border: 1px solid #ef6a27; border-radius: 8px; padding: 16px; margin: 24px 0;">
      <h4 style="margin: 0 0 8px; color: #ef6a27;">Nächste Schritte:</h4>
      <ol style="margin: 0; padding-left: 20px; color: #666; line-height: 1.8;">
        <li>Drucken Sie den <a href="{print_url}" style="color: #ef6a27;">Auftragszettel</a> aus</li>
        <li>Legen Sie den Zettel zu Ihren Schuhen</li>
        <li>Senden Sie das Paket an unsere Werkstatt</li>
        <li>Wir informieren Sie über den Fortschritt</li>
      </ol>
    </div>
    <p style="color: #666; line-height: 1.6;">
      Der KVA ist eine Kostenschätzung. Der endgültige Preis wird nach Begutachtung
      Ihrer Schuhe festgelegt. Bei Abweichungen kontaktieren wir Sie vorher.
    </p>
""")

        return EmailMessage(
            to=order.email,
            subject=f"Auftragsbestätigung {number} - kletterschuhe.de",
            html=html,
        )

    @staticmethod
    def status_update(
        order,
        new_status: str,
        comment: str | None = None,
        tracking_number: str | None = None,
        tracking_carrier: str | None = None,
    ) -> EmailMessage:
        """
        Письмо о смене статуса

        Args:
            order: Заказ (нужны id, email, имя клиента)
            new_status: Новый статус
            comment: Комментарий сотрудника (показывается клиенту)
            tracking_number: Трек-номер (только для SHIPPED)
            tracking_carrier: Служба доставки (по умолчанию DHL)

        Returns:
            EmailMessage
        """
        number = format_order_number(order.id)
        status_label = OrderStatus.get_status_name(new_status)
        title, message = STATUS_MESSAGES.get(
            new_status,
            (f"Status-Update: {status_label}", "Der Status Ihres Auftrags wurde aktualisiert."),
        )

        tracking_html = ""
        if new_status == OrderStatus.SHIPPED and tracking_number:
            carrier = tracking_carrier or DEFAULT_TRACKING_CARRIER
            tracking_html = f"""
    <div style="background: #e8f5e9; border: 1px solid #4caf50; border-radius: 8px; padding: 16px; margin: 24px 0;">
      <h4 style="margin: 0 0 8px; color: #2e7d32;">Sendungsverfolgung</h4>
      <p style="margin: 0; color: #666;">
        <strong>Versanddienstleister:</strong> {escape_html(carrier)}<br>
        <strong>Sendungsnummer:</strong> {escape_html(tracking_number)}
      </p>
    </div>"""

        comment_html = ""
        if comment:
            comment_html = f"""
    <div style="background: #f5f5f5; border-left: 4px solid #ef6a27; padding: 12px 16px; margin: 24px 0;">
      <p style="margin: 0; color: #666; font-style: italic;">&quot;{escape_html(comment)}&quot;</p>
    </div>"""

        html = _base_template(f"""
    <h2 style="margin: 0 0 16px; color: #38362d;">{escape_html(title)}</h2>
    <p style="color: #666; line-height: 1.6;">
      Guten Tag {escape_html(order.customer_name)},<br><br>
      {escape_html(message)}
    </p>
    <div style="background: #f8f8f8; padding: 16px; border-radius: 8px; margin: 24px 0;">
      <p style="margin: 0; font-size: 14px; color: #888;">Auftrag</p>
      <p style="margin: 4px 0 0; font-size: 20px; font-weight: bold; color: #38362d;">{number}</p>
      <p style="margin: 8px 0 0;">
        <span style="padding: 4px 12px; background: #ef6a27; color: white; border-radius: 16px; font-size: 12px;">
          {escape_html(status_label)}
        </span>
      </p>
    </div>
    {tracking_html}
    {comment_html}
    <p style="color: #666; line-height: 1.6;">Bei Fragen stehen wir Ihnen gerne zur Verfügung.</p>
""")

        return EmailMessage(
            to=order.email,
            subject=f"{title} - Auftrag {number}",
            html=html,
        )

    @staticmethod
    def admin_new_order(order, admin_email: str) -> EmailMessage:
        """Уведомление администратора о новом заказе"""
        number = format_order_number(order.id)
        items_html = "".join(
            f"<li>{EmailPresenter._item_line(item)} "
            f"({escape_html(format_price(item.calculated_price))})</li>"
            for item in order.items
        )

        html = _base_template(f"""
    <h2 style="margin: 0 0 16px; color: #38362d;">Neuer Reparaturauftrag eingegangen</h2>
    <div style="background: #f8f8f8; padding: 16px; border-radius: 8px; margin: 24px 0;">
      <p style="margin: 0; font-size: 14px; color: #888;">Auftragsnummer</p>
      <p style="margin: 4px 0 0; font-size: 24px; font-weight: bold; color: #ef6a27;">{number}</p>
    </div>
    <h3 style="margin: 24px 0 12px; color: #38362d;">Kunde:</h3>
    <p style="margin: 0; color: #666;">
      <strong>{escape_html(order.customer_name)}</strong><br>
      {escape_html(order.email)}
    </p>
    <h3 style="margin: 24px 0 12px; color: #38362d;">Positionen:</h3>
    <ul style="margin: 0; padding-left: 20px; color: #666;">{items_html}</ul>
    <p style="margin: 16px 0; font-size: 18px; font-weight: bold; color: #ef6a27;">
      KVA: {escape_html(format_price(order.total_price))}
    </p>
    <p style="margin-top: 24px;">
      <a href="{escape_html(EmailPresenter.admin_url(order.id))}"
         style="padding: 12px 24px; background: #ef6a27; color: white; text-decoration: none; border-radius: 6px;">
        Auftrag im Admin öffnen
      </a>
    </p>
""")

        return EmailMessage(
            to=admin_email,
            subject=f"[Neu] Reparaturauftrag {number} von {order.customer_name}",
            html=html,
        )
