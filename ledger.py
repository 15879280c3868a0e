# ledger.py
from typing import Iterable, Tuple


class PaymentStatus:
  PAID = "Paid"
  ADVANCED = "Advanced"
  UNPAID = "Unpaid"


def total_paid(amounts: Iterable[float]) -> float:
  return sum((a or 0 for a in amounts), 0)


def recompute_status(bill: float, amounts: Iterable[float]) -> Tuple[float, str]:
  """Derive (due, payment status) from the bill and the payment amounts.

  Overpayment is not carried in `due`; an advanced customer owes 0.
  """
  due = (bill or 0) - total_paid(amounts)
  if due == 0:
    return 0, PaymentStatus.PAID
  if due < 0:
    return 0, PaymentStatus.ADVANCED
  return due, PaymentStatus.UNPAID
