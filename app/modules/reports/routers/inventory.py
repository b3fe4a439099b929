"""
Inventory Reports Router

Productos más vendidos y stock bajo.
"""

from typing import Optional

from fastapi import APIRouter, Query

from app.dependencies.tenantDependencies import TenantStore
from ..services.inventory import InventoryReportService
from ..schemas import BestSellersResponse, LowStockResponse
from ..utils import create_csv_response, CSV_HEADERS
from app.core.config import settings


router = APIRouter(prefix="/reports/inventory", tags=["Reports"])


@router.get("/best-sellers", response_model=None)
def get_best_sellers(
    store: TenantStore,
    limit: int = Query(settings.BEST_SELLERS_LIMIT, ge=1, le=100, description="Number of products"),
    export: Optional[str] = Query(None, pattern="^(csv)$", description="Export format: csv"),
):
    items = InventoryReportService(store).best_sellers(limit)

    if export == "csv":
        return create_csv_response(items, "productos_mas_vendidos.csv", CSV_HEADERS["best_sellers"])
    return BestSellersResponse(items=items)


@router.get("/low-stock", response_model=None)
def get_low_stock(
    store: TenantStore,
    threshold: int = Query(settings.LOW_STOCK_THRESHOLD, ge=0, description="Stock máximo a incluir"),
    export: Optional[str] = Query(None, pattern="^(csv)$", description="Export format: csv"),
):
    """Productos con stock menor o igual al umbral."""
    items = InventoryReportService(store).low_stock(threshold)

    if export == "csv":
        return create_csv_response(items, "stock_bajo.csv", CSV_HEADERS["low_stock"])
    return LowStockResponse(threshold=threshold, items=items, total_low_stock_items=len(items))
