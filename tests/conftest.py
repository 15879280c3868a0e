from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
  sys.path.insert(0, str(ROOT))

# main builds a module-level app on import; keep it off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402

from config import Settings  # noqa: E402
from db import init_db, make_engine, open_session  # noqa: E402
from locks import RecordLocks  # noqa: E402
from main import create_app  # noqa: E402
from models import CustomerCreate  # noqa: E402
from repository import CustomerRepository  # noqa: E402


class FixedClock:
  def __init__(self, now: datetime) -> None:
    self.now = now

  def __call__(self) -> datetime:
    return self.now

  def advance(self, **kwargs) -> None:
    self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
  return FixedClock(datetime(2024, 3, 15, 10, 30))


@pytest.fixture
def engine():
  eng = make_engine("sqlite://")
  init_db(eng)
  yield eng
  eng.dispose()


@pytest.fixture
def session(engine):
  with open_session(engine) as s:
    yield s


@pytest.fixture
def locks() -> RecordLocks:
  return RecordLocks()


@pytest.fixture
def repo(session, clock, locks) -> CustomerRepository:
  return CustomerRepository(session, clock, locks)


@pytest.fixture
def make_customer(repo):
  def _make(name="John Doe", mobile="0123", area="North", email="john@example.com", bill=100, status=None):
    return repo.create(CustomerCreate(name=name, mobile=mobile, area=area, email=email, bill=bill, status=status))
  return _make


@pytest.fixture
def client(engine, clock) -> TestClient:
  app = create_app(Settings(database_url="sqlite://"), engine=engine, clock=clock)
  return TestClient(app, raise_server_exceptions=False)
