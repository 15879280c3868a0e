# db.py
from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session


def make_engine(database_url: str, echo: bool = False) -> Engine:
  if database_url.startswith("sqlite"):
    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
      # one shared connection, otherwise every session sees an empty db
      kwargs["poolclass"] = StaticPool
    return create_engine(database_url, echo=echo, **kwargs)
  return create_engine(database_url, echo=echo, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
  SQLModel.metadata.create_all(engine)


def open_session(engine: Engine) -> Session:
  return Session(engine, expire_on_commit=False)


def get_session(request: Request) -> Iterator[Session]:
  with open_session(request.app.state.engine) as session:
    yield session
