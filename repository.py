# repository.py
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import Session, select, col

from clock import Clock, system_clock
from errors import CustomerNotFound, InvalidCustomer, InvalidQuery
from ledger import recompute_status
from locks import RecordLocks
from models import Customer, CustomerCreate, CustomerUpdate, Payment

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "mobile", "area", "email")
SEARCH_FIELDS = ("name", "mobile", "area", "email")


def refresh_status(customer: Customer) -> Customer:
  customer.due, customer.payment_status = recompute_status(
    customer.bill, [p.amount for p in customer.payments]
  )
  return customer


def _check_required(data: CustomerCreate) -> None:
  missing = [f for f in REQUIRED_FIELDS if not (getattr(data, f, None) or "").strip()]
  if missing:
    raise InvalidCustomer(f"Missing required field(s): {', '.join(missing)}")


class CustomerRepository:
  def __init__(self, session: Session, clock: Clock = system_clock, locks: Optional[RecordLocks] = None):
    self.session = session
    self.clock = clock
    self.locks = locks or RecordLocks()

  def _load(self, customer_id: str, for_update: bool = False) -> Customer:
    customer = self.session.get(
      Customer,
      customer_id,
      populate_existing=for_update,
      with_for_update=for_update or None,
    )
    if not customer:
      raise CustomerNotFound(customer_id)
    return customer

  def create(self, data: CustomerCreate) -> Customer:
    _check_required(data)
    customer = Customer(
      name=data.name.strip(),
      mobile=data.mobile.strip(),
      area=data.area.strip(),
      email=data.email.strip(),
      bill=data.bill,
      due=data.bill,
      status=data.status or "Active",
      created_at=self.clock(),
    )
    refresh_status(customer)
    self.session.add(customer)
    self.session.commit()
    self.session.refresh(customer)
    logger.info("Created customer %s (bill=%s)", customer.id, customer.bill)
    return customer

  def get(self, customer_id: str) -> Customer:
    return self._load(customer_id)

  def list_all(self) -> List[Customer]:
    return list(self.session.exec(select(Customer).order_by(Customer.created_at)).all())

  def search(self, query: Optional[str]) -> List[Customer]:
    q = (query or "").strip()
    if not q:
      raise InvalidQuery("Search query is required")
    clauses = [col(getattr(Customer, f)).icontains(q, autoescape=True) for f in SEARCH_FIELDS]
    stmt = select(Customer).where(or_(*clauses)).order_by(Customer.created_at)
    return list(self.session.exec(stmt).all())

  def update(self, customer_id: str, data: CustomerUpdate) -> Customer:
    _check_required(data)
    with self.locks.hold(customer_id):
      customer = self._load(customer_id, for_update=True)
      customer.name = data.name.strip()
      customer.mobile = data.mobile.strip()
      customer.area = data.area.strip()
      customer.email = data.email.strip()
      customer.bill = data.bill
      if data.status is not None:
        customer.status = data.status
      refresh_status(customer)
      self.session.add(customer)
      self.session.commit()
      self.session.refresh(customer)
    logger.info("Updated customer %s (due=%s, %s)", customer.id, customer.due, customer.payment_status)
    return customer

  def delete(self, customer_id: str) -> Customer:
    with self.locks.hold(customer_id):
      customer = self._load(customer_id, for_update=True)
      _ = list(customer.payments)  # keep them on the returned record
      self.session.delete(customer)
      self.session.commit()
    logger.info("Deleted customer %s", customer_id)
    return customer

  def append_payment(self, customer_id: str, amount: float, receiver: Optional[str] = None) -> Customer:
    if amount is None or amount <= 0:
      raise InvalidCustomer("Payment amount must be greater than 0")
    with self.locks.hold(customer_id):
      customer = self._load(customer_id, for_update=True)
      now = self.clock()
      customer.payments.append(Payment(amount=amount, paid_at=now, receiver=receiver))
      customer.last_pay_date = now
      refresh_status(customer)
      self.session.add(customer)
      try:
        self.session.commit()
      except Exception:
        self.session.rollback()
        raise
      self.session.refresh(customer)
    logger.info(
      "Payment of %s recorded for %s (due=%s, %s)",
      amount, customer_id, customer.due, customer.payment_status,
    )
    return customer

  def distinct_areas(self) -> List[str]:
    stmt = select(Customer.area).distinct().order_by(Customer.area)
    return list(self.session.exec(stmt).all())

  def clear_all(self) -> int:
    """Delete every customer with its payments; returns how many went."""
    ids = list(self.session.exec(select(Customer.id)).all())
    removed = 0
    for customer_id in ids:
      with self.locks.hold(customer_id):
        customer = self.session.get(Customer, customer_id, populate_existing=True)
        if not customer:
          continue
        self.session.delete(customer)
        self.session.commit()
        removed += 1
    logger.info("Cleared %d customer record(s)", removed)
    return removed
