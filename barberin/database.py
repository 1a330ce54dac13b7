import logging

from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from barberin.core.config import DATABASE_URL

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    kwargs = {"connect_args": {"check_same_thread": False}}
    # banco em memória precisa de uma única conexão compartilhada
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))


if DATABASE_URL.startswith("sqlite"):
    # SQLite só checa foreign keys com o pragma ligado em cada conexão
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_and_tables():
    # registra as tabelas no metadata
    from barberin.models import appointment, barber, barbershop, review, service, user  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created successfully")


def get_session():
    with Session(engine) as session:
        yield session
