# config.py
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./customers.db"
DEFAULT_CORS_ORIGINS = "http://localhost:5173"


def _env_bool(name: str, default: bool = False) -> bool:
  raw = (os.getenv(name, "") or "").strip().lower()
  if not raw:
    return default
  return raw in {"1", "true", "t", "yes", "y", "on"}


def _split_origins(raw: str) -> Tuple[str, ...]:
  return tuple(x.strip() for x in raw.split(",") if x.strip())


@dataclass(frozen=True)
class Settings:
  database_url: str = DEFAULT_DATABASE_URL
  cors_origins: Tuple[str, ...] = field(default_factory=lambda: _split_origins(DEFAULT_CORS_ORIGINS))
  host: str = "0.0.0.0"
  port: int = 5000
  log_level: str = "INFO"
  log_file: Optional[str] = None
  monthly_close_enabled: bool = False
  sql_echo: bool = False

  @classmethod
  def from_env(cls) -> "Settings":
    database_url = os.getenv("DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL
    port_raw = os.getenv("PORT", "").strip() or "5000"
    try:
      port = int(port_raw)
    except ValueError:
      raise RuntimeError(f"PORT must be an integer, got {port_raw!r}")
    return cls(
      database_url=database_url,
      cors_origins=_split_origins(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
      host=os.getenv("HOST", "").strip() or "0.0.0.0",
      port=port,
      log_level=os.getenv("LOG_LEVEL", "").strip() or "INFO",
      log_file=os.getenv("LOG_FILE", "").strip() or None,
      monthly_close_enabled=_env_bool("MONTHLY_CLOSE_ENABLED"),
      sql_echo=_env_bool("SQL_ECHO"),
    )
