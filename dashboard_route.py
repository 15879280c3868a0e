# dashboard_route.py
from typing import List
from fastapi import APIRouter, Depends

from dashboard import DashboardAggregator
from deps import get_aggregator
from models import ChartPoint, DashboardStats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardStats)
def dashboard(agg: DashboardAggregator = Depends(get_aggregator)):
  return agg.stats()

@router.get("/chart-data", response_model=List[ChartPoint])
def chart_data(agg: DashboardAggregator = Depends(get_aggregator)):
  return agg.chart_data()
