"""SQLAlchemy database setup for Yearbook."""

import os
from pathlib import Path
from typing import Final

from sqlalchemy import Engine, create_engine, event, inspect, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from yearbook.utils import get_app_data_path

#: The default database name.
DEFAULT_DB_NAME: Final[str] = "yearbook.db"
#: Environment variable that overrides the database path.
DB_PATH_ENV: Final[str] = "YEARBOOK_DB_PATH"
#: The revision of the initial migration, stamped onto fresh databases.
HEAD_REVISION: Final[str] = "3f2a9c1d7b6e"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


def get_db_path() -> Path:
    """
    Get the path to the journal database.

    - If ``YEARBOOK_DB_PATH`` is set, use it.
    - Otherwise the database lives in the ``data`` folder of the platform
      specific application data directory (see
      :func:`~yearbook.utils.get_app_data_path`).

    Returns:
        Path to the database file

    """
    override = os.environ.get(DB_PATH_ENV)
    if override:
        return Path(override)
    db_dir = get_app_data_path() / "data"
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir / DEFAULT_DB_NAME


def create_engine_with_path(db_path: Path | None = None) -> Engine:
    """
    Create SQLAlchemy engine with proper SQLite settings.

    Args:
        db_path: Optional path to database file. If None, uses default path.

    Returns:
        SQLAlchemy engine

    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    db_path.touch(exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        echo=False,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        """Set SQLite pragmas on connection."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Build a session factory bound to ``engine``.

    Args:
        engine: SQLAlchemy engine

    Returns:
        A configured :class:`~sqlalchemy.orm.sessionmaker`

    """
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def apply_migrations(engine: Engine) -> None:
    """
    Apply pending Alembic migrations to the database behind ``engine``.

    A fresh database (no ``alembic_version`` table) is created directly from
    the models and stamped with :data:`HEAD_REVISION`; an existing one is
    upgraded to ``head``.

    Args:
        engine: SQLAlchemy engine

    """
    # Imported here so every model is registered on Base.metadata
    import yearbook.models  # noqa: F401, PLC0415

    existing_tables = inspect(engine).get_table_names()

    if "alembic_version" not in existing_tables:
        Base.metadata.create_all(engine)
        with engine.connect() as conn:
            conn.execute(
                text(
                    "CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL, PRIMARY KEY (version_num))"  # noqa: E501
                )
            )
            conn.execute(
                text("INSERT INTO alembic_version (version_num) VALUES (:rev)"),
                {"rev": HEAD_REVISION},
            )
            conn.commit()
        return

    from alembic import command  # noqa: PLC0415
    from alembic.config import Config  # noqa: PLC0415

    alembic_ini_path = Path(__file__).parent / "etc" / "alembic.ini"
    alembic_cfg = Config(str(alembic_ini_path))
    alembic_cfg.set_main_option(
        "script_location", str(Path(__file__).parent / "models" / "alembic")
    )
    alembic_cfg.set_main_option("sqlalchemy.url", str(engine.url))
    # Logging is already configured by yearbook.services.logs
    alembic_cfg.attributes["configure_logger"] = False
    command.upgrade(alembic_cfg, "head")
