# archiver.py
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from clock import Clock, next_month_start, system_clock
from dashboard import DashboardAggregator
from db import open_session
from errors import ReportNotFound
from locks import RecordLocks
from models import MonthlyReport
from repository import CustomerRepository

logger = logging.getLogger(__name__)

Period = Tuple[int, int]


class MonthlyReportArchiver:
  def __init__(self, session: Session, clock: Clock = system_clock):
    self.session = session
    self.clock = clock

  def archive(self, period: Optional[Period] = None) -> MonthlyReport:
    """Snapshot the dashboard totals, tagged with `period` or the current month."""
    if period is None:
      now = self.clock()
      period = (now.year, now.month)
    year, month = period
    agg = DashboardAggregator(self.session, self.clock)
    report = MonthlyReport(
      year=year,
      month=month,
      total_collections=agg.total_collections(),
      total_dues=agg.total_dues(),
      total_advanced=agg.total_advanced(),
      created_at=self.clock(),
    )
    self.session.add(report)
    self.session.commit()
    self.session.refresh(report)
    logger.info(
      "Archived report %d-%02d: collections=%s dues=%s advanced=%s",
      year, month, report.total_collections, report.total_dues, report.total_advanced,
    )
    return report

  def list_reports(self) -> List[MonthlyReport]:
    stmt = select(MonthlyReport).order_by(
      MonthlyReport.year.desc(), MonthlyReport.month.desc(), MonthlyReport.created_at.desc()
    )
    return list(self.session.exec(stmt).all())

  def get_report(self, year: int, month: int) -> MonthlyReport:
    # (year, month) is not unique; the latest snapshot wins
    stmt = (
      select(MonthlyReport)
      .where(MonthlyReport.year == year, MonthlyReport.month == month)
      .order_by(MonthlyReport.created_at.desc(), MonthlyReport.id.desc())
    )
    report = self.session.exec(stmt).first()
    if not report:
      raise ReportNotFound(year, month)
    return report


def close_period(
  engine: Engine,
  clock: Clock = system_clock,
  locks: Optional[RecordLocks] = None,
  period: Optional[Period] = None,
) -> MonthlyReport:
  """Archive the period's totals, then clear every customer record.

  The two steps commit separately; a failed archive leaves customers untouched.
  """
  logger.info("Closing period %s", period or "current")
  with open_session(engine) as session:
    report = MonthlyReportArchiver(session, clock).archive(period)
  with open_session(engine) as session:
    removed = CustomerRepository(session, clock, locks).clear_all()
  logger.info("Closed period %d-%02d, %d customer(s) cleared", report.year, report.month, removed)
  return report


async def monthly_close_loop(
  engine: Engine,
  clock: Clock = system_clock,
  locks: Optional[RecordLocks] = None,
  sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
  """Run close_period at every local month boundary until cancelled."""
  while True:
    now = clock()
    period = (now.year, now.month)
    boundary = next_month_start(now)
    logger.info(
      "Next period close for %d-%02d in %.0fs",
      period[0], period[1], (boundary - now).total_seconds(),
    )
    # sleeping measures elapsed time, not the local calendar; re-check on wake
    while now < boundary:
      await sleep((boundary - now).total_seconds())
      now = clock()
    try:
      await asyncio.to_thread(close_period, engine, clock, locks, period)
    except Exception:
      logger.exception("Period close for %d-%02d failed", *period)
