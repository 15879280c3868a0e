from __future__ import annotations

import pytest

from ledger import PaymentStatus, recompute_status, total_paid


@pytest.mark.parametrize(
  "bill,amounts,expected",
  [
    (100, [100], (0, PaymentStatus.PAID)),
    (100, [60, 40], (0, PaymentStatus.PAID)),
    (0, [], (0, PaymentStatus.PAID)),
    (100, [100, 50], (0, PaymentStatus.ADVANCED)),
    (0, [10], (0, PaymentStatus.ADVANCED)),
    (100, [], (100, PaymentStatus.UNPAID)),
    (100, [30], (70, PaymentStatus.UNPAID)),
    (250.5, [0.5, 50], (200, PaymentStatus.UNPAID)),
  ],
)
def test_recompute_status(bill, amounts, expected) -> None:
  assert recompute_status(bill, amounts) == expected


def test_overpayment_is_not_carried_in_due() -> None:
  due, status = recompute_status(10, [1000])
  assert due == 0
  assert status == PaymentStatus.ADVANCED


def test_total_paid_ignores_missing_amounts() -> None:
  assert total_paid([10, None, 5]) == 15
  assert total_paid([]) == 0
