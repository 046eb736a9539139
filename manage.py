#!/usr/bin/env python3
"""
Командная строка мастерской: база, заказы, статусы, экспорт, подсказки каталога

Примеры:
    python manage.py init-db
    python manage.py list --status SUBMITTED
    python manage.py show 42
    python manage.py set-status 42 SHIPPED --tracking 00340434161234567890 --actor werkstatt@kletterschuhe.de
    python manage.py export orders.xlsx
    python manage.py suggest "La Sportiva" Solution
"""

import argparse
import asyncio
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from shoe_repair import actions
from shoe_repair.core.config import Config
from shoe_repair.database import ORMDatabase
from shoe_repair.presenters.order_presenter import OrderPresenter
from shoe_repair.repositories import OrderRepository
from shoe_repair.services import (
    CatalogSearchClient,
    NotificationService,
    OrderExportService,
    OrderService,
    StaffNotifier,
    StaticIdentityProvider,
)
from shoe_repair.utils.sentry import init_sentry


logger = logging.getLogger("shoe_repair.manage")

NOISY_LOGGERS = ("sqlalchemy", "aiosqlite", "aiogram", "aiohttp")


def setup_logging() -> None:
    """
    Логирование в консоль и в logs/repair.log с ротацией

    Если нет прав на запись в каталог логов, пишем только в консоль.
    """
    log_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    if hasattr(console_handler.stream, "reconfigure"):
        console_handler.stream.reconfigure(encoding="utf-8")

    handlers: list[logging.Handler] = [console_handler]

    log_file_path = Path(Config.LOGS_DIR) / "repair.log"
    try:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_file_path),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(log_formatter)
        handlers.insert(0, file_handler)
    except (PermissionError, OSError) as e:
        sys.stderr.write(f"[logging] WARNING: cannot use file logging at {log_file_path}: {e}\n")

    log_level = getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=log_level, handlers=handlers)

    logging.getLogger("shoe_repair").setLevel(log_level)
    noisy_level = logging.INFO if log_level == logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reparaturaufträge Kletterschuhe")
    parser.add_argument("--actor", help="E-Mail des Mitarbeiters (für Statuswechsel und Admin-Ansichten)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Tabellen anlegen")

    list_cmd = sub.add_parser("list", help="Aufträge anzeigen")
    list_cmd.add_argument("--status")
    list_cmd.add_argument("--search")
    list_cmd.add_argument("--limit", type=int, default=50)

    show_cmd = sub.add_parser("show", help="Auftrag mit Verlauf anzeigen")
    show_cmd.add_argument("order_id", type=int)

    status_cmd = sub.add_parser("set-status", help="Status ändern")
    status_cmd.add_argument("order_id", type=int)
    status_cmd.add_argument("status")
    status_cmd.add_argument("--comment")
    status_cmd.add_argument("--tracking")
    status_cmd.add_argument("--carrier")

    export_cmd = sub.add_parser("export", help="Excel-Export")
    export_cmd.add_argument("output")
    export_cmd.add_argument("--status")
    export_cmd.add_argument("--order", type=int, help="Nur diesen Auftrag exportieren")
    export_cmd.add_argument("--limit", type=int, default=0, help="Höchstens so viele Aufträge (0 = alle)")

    suggest_cmd = sub.add_parser("suggest", help="Modellvorschläge aus dem Shop")
    suggest_cmd.add_argument("manufacturer")
    suggest_cmd.add_argument("query")

    return parser


async def run_command(args: argparse.Namespace) -> int:
    """Выполнение команды, код возврата для sys.exit"""
    if args.command == "suggest":
        result = await actions.search_catalog(CatalogSearchClient(), args.manufacturer, args.query)
        if not result.data:
            print("Keine Vorschläge")
        for suggestion in result.data:
            print(f"{suggestion.name} | {suggestion.price} | {suggestion.url}")
        return 0

    db = ORMDatabase()
    await db.connect()
    staff_notifier = StaffNotifier()
    notifications = NotificationService(staff_notifier=staff_notifier)

    try:
        if args.command == "init-db":
            await db.init_db()
            print(f"✅ Datenbank bereit: {Config.get_database_url()}")
            return 0

        service = OrderService(
            OrderRepository(db),
            notifications=notifications,
            identity=StaticIdentityProvider(args.actor),
        )

        if args.command == "list":
            result = await actions.list_orders(
                service, status=args.status, search=args.search, limit=args.limit
            )
            if not result.success:
                print(f"❌ {result.error}")
                return 1
            print(OrderPresenter.format_order_list(result.data))
            return 0

        if args.command == "show":
            result = await actions.get_order_with_history(service, args.order_id)
            if not result.success:
                print(f"❌ {result.error}")
                return 1
            details = result.data
            print(
                OrderPresenter.format_order_details(
                    details.order, details.status_history, details.field_history
                )
            )
            return 0

        if args.command == "set-status":
            result = await actions.update_order_status(
                service,
                {
                    "order_id": args.order_id,
                    "new_status": args.status.upper(),
                    "comment": args.comment,
                    "tracking_number": args.tracking,
                    "tracking_carrier": args.carrier,
                },
            )
            if not result.success:
                print(f"❌ {result.error}")
                return 1
            print(f"✅ Auftrag #{args.order_id}: {result.data['from_status']} → {result.data['status']}")
            return 0

        if args.command == "export":
            if args.order:
                result = await actions.get_order_with_history(service, args.order)
                if not result.success:
                    print(f"❌ {result.error}")
                    return 1
                content = OrderExportService.export_order(
                    result.data.order, result.data.status_history
                )
            else:
                result = await actions.list_orders(service, status=args.status, limit=args.limit)
                if not result.success:
                    print(f"❌ {result.error}")
                    return 1
                content = OrderExportService.export_orders(result.data)
            Path(args.output).write_bytes(content)
            print(f"✅ Exportiert: {args.output}")
            return 0

        return 2
    finally:
        await notifications.wait_pending(timeout=30)
        await staff_notifier.close()
        await db.disconnect()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging()
    init_sentry()

    try:
        Config.validate()
    except ValueError as e:
        logger.error("Ошибка конфигурации: %s", e)
        return 1

    return asyncio.run(run_command(args))


if __name__ == "__main__":
    sys.exit(main())
