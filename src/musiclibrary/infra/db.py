from __future__ import annotations

import contextlib
from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.schema import MetaData

from musiclibrary.infra.exceptions import StorageFailureError
from musiclibrary.infra.settings import settings

# Deterministic constraint/index names (prevents Alembic churn)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _configure_sqlite_connection(dbapi_conn, _):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()
    # Transactions are begun by SQLAlchemy (see _begin_sqlite_transaction), which
    # keeps SAVEPOINT inside the outer transaction
    dbapi_conn.isolation_level = None


def _begin_sqlite_transaction(conn):
    conn.exec_driver_sql("BEGIN")


def get_engine(db_url: str | None = None, for_test: bool = False) -> Engine:
    """Create a database engine.

    If ``for_test`` is True and ``settings.test_database_url`` is set, that URL is used.
    Otherwise falls back to the provided ``db_url`` or ``settings.database_url``.
    The caller owns the returned engine and is expected to ``dispose()`` it.
    """
    if for_test and settings.test_database_url:
        chosen_url = settings.test_database_url
    else:
        chosen_url = db_url or settings.database_url

    connect_args: dict[str, object] = {}
    if chosen_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(
        chosen_url,
        echo=settings.echo_sql,
        pool_pre_ping=True,
        future=True,
        connect_args=connect_args,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _configure_sqlite_connection)
        event.listen(engine, "begin", _begin_sqlite_transaction)
    return engine


def get_sessionmaker(engine: Engine) -> sessionmaker:
    """Get a session factory bound to ``engine``."""
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@contextlib.contextmanager
def storage_errors(db: Session, message: str) -> Generator[None, None, None]:
    """Run the block in a savepoint and translate backend errors into StorageFailureError.

    A failure rolls back only the savepoint, so earlier work in the caller's unit
    of work survives and the session stays usable. The original exception is
    chained as ``__cause__``.
    """
    try:
        with db.begin_nested():
            yield
    except SQLAlchemyError as exc:
        raise StorageFailureError(f"{message}: {exc.__class__.__name__}") from exc


def create_schema(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register on Base.metadata
    from musiclibrary.domain import entities  # noqa: F401

    Base.metadata.create_all(engine)
