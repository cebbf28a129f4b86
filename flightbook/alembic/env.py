from logging.config import fileConfig

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine
import asyncio
import os

from flightbook.database import Base
from flightbook import models  # noqa: F401  registers tables on Base.metadata

# Database URL priority: DATABASE_URL_MIGRATIONS > DATABASE_URL > POSTGRES_URL > local SQLite
MIGRATIONS_URL = (
    os.getenv("DATABASE_URL_MIGRATIONS")
    or os.getenv("DATABASE_URL")
    or os.getenv("POSTGRES_URL")
    or "sqlite+aiosqlite:///./flightbook.db"
)
if MIGRATIONS_URL.startswith("postgresql://"):
    MIGRATIONS_URL = MIGRATIONS_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

config.set_main_option("sqlalchemy.url", MIGRATIONS_URL)


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=MIGRATIONS_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations():
    """Migrations run over the same async drivers the application uses."""
    connectable = create_async_engine(MIGRATIONS_URL, future=True)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
