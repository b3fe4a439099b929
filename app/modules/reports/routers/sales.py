"""
Sales Reports Router
"""

from typing import Optional

from fastapi import APIRouter, Query

from app.dependencies.tenantDependencies import TenantStore
from ..services.sales import SalesReportService
from ..schemas import SalesTotalsResponse
from ..utils import create_csv_response, prepare_sales_totals_csv, CSV_HEADERS


router = APIRouter(prefix="/reports/sales", tags=["Reports"])


@router.get("/totals", response_model=None)
def get_sales_totals(
    store: TenantStore,
    export: Optional[str] = Query(None, pattern="^(csv)$", description="Export format: csv"),
):
    """Ventas de hoy, de la última semana y del último mes."""
    report_data = SalesReportService(store).get_sales_summary()

    if export == "csv":
        return create_csv_response(
            prepare_sales_totals_csv(report_data),
            f"ventas_{report_data['as_of_date']}.csv",
            CSV_HEADERS["sales_totals"]
        )
    return SalesTotalsResponse(**report_data)
