"""
Presenters - модуль для форматирования текста и данных для отображения

Presenters отвечают за преобразование данных из моделей в текст для пользователя.
Это разделяет бизнес-логику (services) и логику представления (presenters).
"""

from shoe_repair.presenters.email_presenter import EmailMessage, EmailPresenter
from shoe_repair.presenters.order_presenter import OrderPresenter


__all__ = ["EmailMessage", "EmailPresenter", "OrderPresenter"]
