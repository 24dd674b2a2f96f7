"""
Alembic migration environment for the ORM metadata backend.
Loads DATABASE_URL from .env and uses app models for autogenerate.
In graphql mode the gateway's own migrations own the schema.
"""
import sys
from pathlib import Path

# Add project root so "prepup" is importable; alembic/ lives in prepup/
_root = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(_root))

from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

from prepup.app.core.config import settings
from prepup.app.db.base import Base

# Import all models so they register with Base.metadata
import prepup.app.models  # noqa: F401

config = context.config

if settings.metadata_backend != "orm":
    raise SystemExit("METADATA_BACKEND is not 'orm'; apply schema changes through the GraphQL gateway")

config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL for the configured database without connecting."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_is_sqlite(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = config.get_main_option("sqlalchemy.url")
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite cannot ALTER constraints in place
            render_as_batch=_is_sqlite(url),
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
