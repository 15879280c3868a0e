# errors.py


class BillingError(Exception):
  """Base class for errors the service reports back to callers."""


class CustomerNotFound(BillingError, LookupError):
  def __init__(self, customer_id: str):
    super().__init__(f"Customer {customer_id} not found")
    self.customer_id = customer_id


class ReportNotFound(BillingError, LookupError):
  def __init__(self, year: int, month: int):
    super().__init__(f"No monthly report for {year}-{month:02d}")
    self.year = year
    self.month = month


class InvalidCustomer(BillingError, ValueError):
  pass


class InvalidQuery(BillingError, ValueError):
  pass
