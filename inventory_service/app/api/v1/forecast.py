from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ...services.forecast_service import ForecastService, get_forecast_service
from ..routing import ErrorBoundaryRoute


router = APIRouter(route_class=ErrorBoundaryRoute)


@router.get("/createForecast", response_model=None, summary="판매 예측 실행")
async def create_forecast(
    service: ForecastService = Depends(get_forecast_service),
) -> Any:
    return await service.run_forecast()
