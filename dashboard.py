# dashboard.py
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Tuple

from sqlalchemy import desc, extract, func
from sqlmodel import Session, select

from clock import Clock, day_window, month_window, system_clock, trailing_days_window
from ledger import PaymentStatus
from models import (
  AreaCount,
  ChartPoint,
  Customer,
  DashboardStats,
  MonthRevenue,
  Payment,
  TopPayer,
)

TOP_PAYERS = 5
CHART_DAYS = 30


class DashboardAggregator:
  """Read-only figures over the whole customer set, computed per call."""

  def __init__(self, session: Session, clock: Clock = system_clock):
    self.session = session
    self.clock = clock

  def _scalar(self, stmt) -> float:
    return self.session.exec(stmt).one() or 0

  def total_customers(self) -> int:
    return int(self._scalar(select(func.count()).select_from(Customer)))

  def total_collections(self) -> float:
    return float(self._scalar(select(func.coalesce(func.sum(Payment.amount), 0))))

  def total_dues(self) -> float:
    stmt = select(func.coalesce(func.sum(Customer.due), 0)).where(
      Customer.payment_status == PaymentStatus.UNPAID
    )
    return float(self._scalar(stmt))

  def total_advanced(self) -> float:
    # each single payment larger than the whole bill counts its excess
    stmt = (
      select(func.coalesce(func.sum(Payment.amount - Customer.bill), 0))
      .select_from(Payment)
      .join(Customer, Payment.customer_id == Customer.id)
      .where(Payment.amount > Customer.bill)
    )
    return float(self._scalar(stmt))

  def collection_between(self, start: datetime, end: datetime) -> float:
    stmt = select(func.coalesce(func.sum(Payment.amount), 0)).where(
      Payment.paid_at >= start, Payment.paid_at < end
    )
    return float(self._scalar(stmt))

  def todays_collection(self) -> float:
    return self.collection_between(*day_window(self.clock()))

  def this_months_collection(self) -> float:
    return self.collection_between(*month_window(self.clock()))

  def customer_distribution(self) -> List[AreaCount]:
    stmt = select(Customer.area, func.count()).group_by(Customer.area).order_by(Customer.area)
    return [AreaCount(area=area, count=count) for area, count in self.session.exec(stmt).all()]

  def top_payers(self, limit: int = TOP_PAYERS) -> List[TopPayer]:
    total_paid = func.sum(Payment.amount).label("total_paid")
    stmt = (
      select(Customer.id, Customer.name, total_paid)
      .join(Payment, Payment.customer_id == Customer.id)
      .group_by(Customer.id, Customer.name)
      .order_by(desc("total_paid"))
      .limit(limit)
    )
    return [
      TopPayer(id=cid, name=name, total_paid=float(paid))
      for cid, name, paid in self.session.exec(stmt).all()
    ]

  def monthly_revenue(self) -> List[MonthRevenue]:
    # month of year only, so every year lands in the same 12 buckets
    month = extract("month", Payment.paid_at).label("month")
    stmt = select(month, func.sum(Payment.amount)).group_by(month).order_by(month)
    return [
      MonthRevenue(month=int(m), total=float(total))
      for m, total in self.session.exec(stmt).all()
    ]

  def stats(self) -> DashboardStats:
    return DashboardStats(
      total_customers=self.total_customers(),
      total_collections=self.total_collections(),
      total_dues=self.total_dues(),
      total_advanced=self.total_advanced(),
      todays_collection=self.todays_collection(),
      this_months_collection=self.this_months_collection(),
      customer_distribution=self.customer_distribution(),
      top_payers=self.top_payers(),
      monthly_revenue=self.monthly_revenue(),
    )

  def chart_data(self, days: int = CHART_DAYS) -> List[ChartPoint]:
    """Per-day totals for the trailing window.

    `due` is bill minus that day's payments for each customer who paid
    that day, summed; it is not the customers' outstanding due.
    """
    start, end = trailing_days_window(self.clock(), days)
    stmt = (
      select(Payment.paid_at, Payment.amount, Payment.customer_id, Customer.bill)
      .join(Customer, Payment.customer_id == Customer.id)
      .where(Payment.paid_at >= start, Payment.paid_at < end)
    )
    paid: Dict[str, float] = defaultdict(float)
    per_customer: Dict[Tuple[str, str], float] = defaultdict(float)
    bills: Dict[str, float] = {}
    for paid_at, amount, customer_id, bill in self.session.exec(stmt).all():
      day = paid_at.strftime("%Y-%m-%d")
      paid[day] += amount
      per_customer[(day, customer_id)] += amount
      bills[customer_id] = bill

    due: Dict[str, float] = defaultdict(float)
    for (day, customer_id), amount in per_customer.items():
      due[day] += bills[customer_id] - amount

    return [
      ChartPoint(date=day, total=paid[day], pay=paid[day], due=due[day])
      for day in sorted(paid)
    ]
