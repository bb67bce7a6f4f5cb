from fastapi import APIRouter

from ..routing import ErrorBoundaryRoute
from .auth import router as auth_router
from .forecast import router as forecast_router
from .products import router as products_router
from .transactions import router as transactions_router

api_router = APIRouter(route_class=ErrorBoundaryRoute)
api_router.include_router(products_router, tags=["products"])
api_router.include_router(transactions_router, tags=["transactions"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(forecast_router, tags=["forecast"])
