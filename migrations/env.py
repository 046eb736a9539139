"""
Alembic environment configuration
"""
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from shoe_repair.core.config import Config
from shoe_repair.database.orm_models import Base

config = context.config


def _sync_url(url: str) -> str:
    """Alembic работает синхронно: убираем async-драйвер из URL"""
    return url.replace("+aiosqlite", "").replace("+asyncpg", "+psycopg2")


# URL берём из конфигурации приложения, если не передан явно
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", _sync_url(Config.get_database_url()))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def include_object(object, name, type_, reflected, compare_to):
    """Фильтр для игнорирования некоторых изменений при автогенерации"""
    # Внешние ключи в SQLite часто без имён
    if type_ == "foreign_key_constraint":
        return False
    return True


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (SQL script output)."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,  # Важно для SQLite при ALTER TABLE
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
            include_object=include_object,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
