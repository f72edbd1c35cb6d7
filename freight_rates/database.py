# freight_rates/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.engine import Engine

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Synchronous engine for the embedded commission store"""
    connect_args = {}
    if database_url.startswith('sqlite'):
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        echo=False,
        future=True,
        connect_args=connect_args,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)
