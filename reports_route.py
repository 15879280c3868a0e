# reports_route.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from archiver import MonthlyReportArchiver
from deps import get_archiver
from errors import ReportNotFound
from models import MonthlyReportRead

router = APIRouter(prefix="/monthly-reports", tags=["reports"])


@router.get("", response_model=List[MonthlyReportRead])
def list_reports(archiver: MonthlyReportArchiver = Depends(get_archiver)):
  return [MonthlyReportRead.of(r) for r in archiver.list_reports()]

@router.get("/{year}/{month}", response_model=MonthlyReportRead)
def get_report(year: int, month: int, archiver: MonthlyReportArchiver = Depends(get_archiver)):
  try:
    return MonthlyReportRead.of(archiver.get_report(year, month))
  except ReportNotFound:
    raise HTTPException(status_code=404, detail="Report not found")

@router.post("", response_model=MonthlyReportRead, status_code=201)
def archive_report(archiver: MonthlyReportArchiver = Depends(get_archiver)):
  return MonthlyReportRead.of(archiver.archive())
