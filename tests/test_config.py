from __future__ import annotations

import pytest

from config import DEFAULT_DATABASE_URL, Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
  for name in ("DATABASE_URL", "CORS_ORIGINS", "PORT", "HOST", "LOG_LEVEL", "LOG_FILE", "MONTHLY_CLOSE_ENABLED", "SQL_ECHO"):
    monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
  s = Settings.from_env()
  assert s.database_url == DEFAULT_DATABASE_URL
  assert s.cors_origins == ("http://localhost:5173",)
  assert s.port == 5000
  assert s.monthly_close_enabled is False


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/billing")
  monkeypatch.setenv("CORS_ORIGINS", "http://a.test, ,http://b.test")
  monkeypatch.setenv("PORT", "8080")
  monkeypatch.setenv("MONTHLY_CLOSE_ENABLED", "yes")
  s = Settings.from_env()
  assert s.database_url == "postgresql://u:p@db/billing"
  assert s.cors_origins == ("http://a.test", "http://b.test")
  assert s.port == 8080
  assert s.monthly_close_enabled is True


def test_bad_port(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("PORT", "http")
  with pytest.raises(RuntimeError):
    Settings.from_env()
