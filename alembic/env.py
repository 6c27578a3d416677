"""Alembic environment for the PayGo schema.

Runs both from the ``alembic`` command line and in-process through
``paygo.db.initialize_db``. The schema is written as explicit DDL in the
revisions, so there is no metadata to autogenerate against.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

from paygo.db import build_engine, is_sqlite
from paygo.settings import settings

config = context.config

if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or settings.db_url


def run_migrations_offline() -> None:
    """Emit the migration SQL instead of running it (``alembic upgrade --sql``)."""
    context.configure(
        url=_database_url(),
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = _database_url()
    engine = build_engine(url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        # SQLite cannot ALTER most columns in place; batch mode rebuilds the table.
        context.configure(
            connection=connection,
            target_metadata=None,
            render_as_batch=is_sqlite(url),
        )
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
