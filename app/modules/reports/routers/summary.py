"""
Panel de reportes

Reúne en una sola respuesta los datos de la pantalla de reportes.
"""

from fastapi import APIRouter

from app.dependencies.tenantDependencies import TenantStore
from ..services.inventory import InventoryReportService
from ..services.sales import SalesReportService
from ..schemas import ReportSummaryResponse


router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/summary", response_model=ReportSummaryResponse)
def get_report_summary(store: TenantStore):
    inventory = InventoryReportService(store)
    return ReportSummaryResponse(
        sales=SalesReportService(store).get_sales_summary(),
        best_sellers=inventory.best_sellers(),
        low_stock=inventory.low_stock(),
        total_products=inventory.total_products(),
    )
