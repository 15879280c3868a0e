# models.py
import secrets
from typing import Annotated, List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field as PydanticField, NaiveDatetime
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field, Relationship

from ledger import PaymentStatus

# stored without tzinfo; every window is cut on the local calendar
LocalDatetime = Annotated[datetime, NaiveDatetime]


def new_id() -> str:
  return secrets.token_hex(12)


class Customer(SQLModel, table=True):
  id: str = Field(default_factory=new_id, primary_key=True, index=True)
  name: str
  mobile: str
  area: str = Field(index=True)
  email: str
  bill: float = 0
  due: float = 0  # derived, see ledger.recompute_status
  payment_status: str = PaymentStatus.UNPAID  # Paid|Advanced|Unpaid
  status: str = "Active"
  last_pay_date: Optional[LocalDatetime] = None
  created_at: LocalDatetime = Field(default_factory=datetime.now)

  payments: List["Payment"] = Relationship(
    back_populates="customer",
    sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Payment.id"},
  )


class Payment(SQLModel, table=True):
  id: Optional[int] = Field(default=None, primary_key=True)
  customer_id: str = Field(foreign_key="customer.id", index=True)
  amount: float
  paid_at: LocalDatetime = Field(index=True)
  receiver: Optional[str] = None

  customer: Optional[Customer] = Relationship(back_populates="payments")


class MonthlyReport(SQLModel, table=True):
  id: Optional[int] = Field(default=None, primary_key=True)
  year: int = Field(index=True)
  month: int = Field(index=True)
  total_collections: float = 0
  total_dues: float = 0
  total_advanced: float = 0
  created_at: LocalDatetime = Field(default_factory=datetime.now)


# ---- wire schemas (camelCase on the wire) ----

class CamelModel(BaseModel):
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class CustomerCreate(CamelModel):
  name: str = PydanticField(min_length=1)
  mobile: str = PydanticField(min_length=1)
  area: str = PydanticField(min_length=1)
  email: str = PydanticField(min_length=1)
  bill: float = PydanticField(default=0, ge=0)
  status: Optional[str] = None


class CustomerUpdate(CustomerCreate):
  pass


class PaymentCreate(CamelModel):
  payment: float = PydanticField(gt=0)
  receiver: Optional[str] = None


class PaymentRead(CamelModel):
  amount: float
  date: datetime
  receiver: Optional[str] = None


class CustomerRead(CamelModel):
  id: str
  name: str
  mobile: str
  area: str
  email: str
  bill: float
  due: float
  payment_status: str
  status: str
  last_pay_date: Optional[LocalDatetime] = None
  payments: List[PaymentRead] = []

  @classmethod
  def of(cls, c: Customer) -> "CustomerRead":
    return cls(
      id=c.id,
      name=c.name,
      mobile=c.mobile,
      area=c.area,
      email=c.email,
      bill=c.bill,
      due=c.due,
      payment_status=c.payment_status,
      status=c.status,
      last_pay_date=c.last_pay_date,
      payments=[PaymentRead(amount=p.amount, date=p.paid_at, receiver=p.receiver) for p in c.payments],
    )


class MonthlyReportRead(CamelModel):
  id: int
  year: int
  month: int
  total_collections: float
  total_dues: float
  total_advanced: float
  created_at: datetime

  @classmethod
  def of(cls, r: MonthlyReport) -> "MonthlyReportRead":
    return cls(**r.model_dump())


class AreaCount(CamelModel):
  area: str
  count: int


class TopPayer(CamelModel):
  id: str
  name: str
  total_paid: float


class MonthRevenue(CamelModel):
  month: int
  total: float


class DashboardStats(CamelModel):
  total_customers: int
  total_collections: float
  total_dues: float
  total_advanced: float
  todays_collection: float
  this_months_collection: float
  customer_distribution: List[AreaCount]
  top_payers: List[TopPayer]
  monthly_revenue: List[MonthRevenue]


class ChartPoint(CamelModel):
  date: str  # YYYY-MM-DD
  total: float
  pay: float
  due: float
