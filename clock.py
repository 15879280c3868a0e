# clock.py
from datetime import datetime, timedelta
from typing import Callable, Tuple

Clock = Callable[[], datetime]
Window = Tuple[datetime, datetime]


def system_clock() -> datetime:
  # naive local time, the calendar every window below is cut on
  return datetime.now()


def day_window(now: datetime) -> Window:
  start = now.replace(hour=0, minute=0, second=0, microsecond=0)
  return start, start + timedelta(days=1)


def next_month_start(now: datetime) -> datetime:
  if now.month == 12:
    return datetime(now.year + 1, 1, 1)
  return datetime(now.year, now.month + 1, 1)


def month_window(now: datetime) -> Window:
  start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
  return start, next_month_start(now)


def trailing_days_window(now: datetime, days: int = 30) -> Window:
  """From `days` days before `now` up to the end of today."""
  _, end = day_window(now)
  return now - timedelta(days=days), end
