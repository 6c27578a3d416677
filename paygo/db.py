"""Engine, connections and migrations.

The API opens one connection per request from a thread pool and the CLI
keeps a single one. SQLite files run in WAL mode with a busy timeout equal
to the unit lock timeout.
"""

import logging
import os

from alembic.config import Config
from sqlalchemy import Connection, create_engine, event
from sqlalchemy.engine import Engine

from alembic import command
from paygo.settings import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

_engine: Engine | None = None
_connection: Connection | None = None


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def engine_options(url: str) -> dict:
    if is_sqlite(url):
        return {"connect_args": {"check_same_thread": False, "timeout": settings.lock_timeout_seconds}}
    return {"pool_pre_ping": True, "pool_recycle": 1800}


def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    busy_ms = int(settings.lock_timeout_seconds * 1000)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.execute("PRAGMA journal_mode = WAL")
    cursor.execute(f"PRAGMA busy_timeout = {busy_ms}")
    cursor.close()


def build_engine(url: str, **extra) -> Engine:
    engine = create_engine(url, **engine_options(url), **extra)
    if is_sqlite(url):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = build_engine(settings.db_url)
        logger.info("Database engine created (%s)", _engine.url.get_backend_name())
    return _engine


def get_connection() -> Connection:
    """Process-wide connection for the CLI. The API uses DBConnectionMiddleware."""
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
        logger.debug("CLI connection opened")
    return _connection


def _get_alembic_config() -> Config:
    cfg = Config(os.path.join(PROJECT_ROOT, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(PROJECT_ROOT, "alembic"))
    cfg.set_main_option("sqlalchemy.url", settings.db_url.replace("%", "%%"))
    # Keeps env.py from replacing the logging set up by configure_logging().
    cfg.attributes["configure_logger"] = False
    return cfg


def initialize_db() -> None:
    """Upgrade the configured database to the latest schema."""
    cfg = _get_alembic_config()
    logger.info("Upgrading schema to head")
    command.upgrade(cfg, "head")
    logger.info("Schema is up to date")
