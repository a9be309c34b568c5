# pickeasy/database.py
import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    # SQLite needs cross-thread access since sync handlers run in the threadpool
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    else:
        connect_args = {}
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def check_connection(engine: Engine) -> None:
    """Run a trivial query so a dead backend fails at startup rather than on the first request."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Connected to database %s", engine.url.render_as_string(hide_password=True))


def init_db(engine: Engine) -> None:
    # Importing the models registers their tables on Base.metadata
    import pickeasy.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    db = request.app.state.SessionLocal()
    try:
        yield db
    finally:
        db.close()
