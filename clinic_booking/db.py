# clinic_booking/db.py

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .config import settings


def make_engine(database_url: str):
    connect_args = {}
    kwargs = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
        if ":memory:" in database_url:
            # keep a single connection so every session sees the same database
            kwargs["poolclass"] = StaticPool

    return create_engine(
        database_url,
        echo=False,          # set to True to see SQL
        connect_args=connect_args,
        **kwargs,
    )


# Engine = connection to the database
engine = make_engine(settings.database_url)


def create_db_and_tables(bind=None):
    # registers StoredValue on SQLModel.metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
