# billing_route.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException

from deps import get_repository
from errors import CustomerNotFound, InvalidCustomer, InvalidQuery
from models import CustomerCreate, CustomerRead, CustomerUpdate, PaymentCreate
from repository import CustomerRepository

router = APIRouter(tags=["customers"])


def _not_found() -> HTTPException:
  return HTTPException(status_code=404, detail="Customer not found")


@router.post("/customers", response_model=CustomerRead, status_code=201)
def create_customer(body: CustomerCreate, repo: CustomerRepository = Depends(get_repository)):
  try:
    return CustomerRead.of(repo.create(body))
  except InvalidCustomer as e:
    raise HTTPException(status_code=400, detail=str(e))

@router.get("/customers", response_model=List[CustomerRead])
def list_customers(repo: CustomerRepository = Depends(get_repository)):
  return [CustomerRead.of(c) for c in repo.list_all()]

@router.get("/customers/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: str, repo: CustomerRepository = Depends(get_repository)):
  try:
    return CustomerRead.of(repo.get(customer_id))
  except CustomerNotFound:
    raise _not_found()

@router.put("/customers/{customer_id}", response_model=CustomerRead)
def update_customer(customer_id: str, body: CustomerUpdate, repo: CustomerRepository = Depends(get_repository)):
  try:
    return CustomerRead.of(repo.update(customer_id, body))
  except CustomerNotFound:
    raise _not_found()
  except InvalidCustomer as e:
    raise HTTPException(status_code=400, detail=str(e))

@router.delete("/customers/{customer_id}", response_model=CustomerRead)
def delete_customer(customer_id: str, repo: CustomerRepository = Depends(get_repository)):
  try:
    return CustomerRead.of(repo.delete(customer_id))
  except CustomerNotFound:
    raise _not_found()

@router.put("/billing/{customer_id}", response_model=CustomerRead)
def collect_payment(customer_id: str, body: PaymentCreate, repo: CustomerRepository = Depends(get_repository)):
  try:
    return CustomerRead.of(repo.append_payment(customer_id, body.payment, body.receiver))
  except CustomerNotFound:
    raise _not_found()
  except InvalidCustomer as e:
    raise HTTPException(status_code=400, detail=str(e))

@router.get("/search", response_model=List[CustomerRead])
def search_customers(query: Optional[str] = None, repo: CustomerRepository = Depends(get_repository)):
  try:
    return [CustomerRead.of(c) for c in repo.search(query)]
  except InvalidQuery as e:
    raise HTTPException(status_code=400, detail=str(e))

@router.get("/areas", response_model=List[str])
def list_areas(repo: CustomerRepository = Depends(get_repository)):
  return repo.distinct_areas()
