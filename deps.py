# deps.py
from fastapi import Depends, Request
from sqlmodel import Session

from archiver import MonthlyReportArchiver
from dashboard import DashboardAggregator
from db import get_session
from repository import CustomerRepository


def get_repository(request: Request, session: Session = Depends(get_session)) -> CustomerRepository:
  return CustomerRepository(session, request.app.state.clock, request.app.state.locks)


def get_aggregator(request: Request, session: Session = Depends(get_session)) -> DashboardAggregator:
  return DashboardAggregator(session, request.app.state.clock)


def get_archiver(request: Request, session: Session = Depends(get_session)) -> MonthlyReportArchiver:
  return MonthlyReportArchiver(session, request.app.state.clock)
