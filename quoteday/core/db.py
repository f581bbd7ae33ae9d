from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager

from quoteday.config.settings import settings


def build_engine(url: str, echo: bool = False):
    """Create an engine; in-memory SQLite shares a single connection."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, echo=echo, future=True, **kwargs)

        # pysqlite defers BEGIN on its own, which breaks SAVEPOINT handling
        @event.listens_for(sqlite_engine, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(sqlite_engine, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

        return sqlite_engine
    return create_engine(url, echo=echo, pool_pre_ping=True, future=True)


engine = build_engine(settings.database_url, settings.database_echo)
SessionLocal = sessionmaker(
    bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
)

# SQLAlchemy declarative base for models
Base = declarative_base()


def make_session_scope(factory: sessionmaker):
    """Build a ``db_session``-style context manager bound to ``factory``."""

    @contextmanager
    def scope():
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return scope


db_session = make_session_scope(SessionLocal)


def init_db(bind=None) -> None:
    """Create all tables that do not exist yet."""
    import quoteday.models  # noqa: F401  (register mappers)
    Base.metadata.create_all(bind=bind or engine)
