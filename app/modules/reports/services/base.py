"""
Base service class for Reports module

Los reportes solo leen del almacén con el tenant activo; nunca escriben.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from app.common.validators import money
from app.database.datastore import TenantScopedStore


class BaseReportService:
    """Base service class for all report services"""

    def __init__(self, store: TenantScopedStore, today: Optional[date] = None):
        self.store = store
        self.today = today or date.today()

    @staticmethod
    def _sum_totals(rows: Iterable[Dict[str, Any]], field: str = "total") -> Decimal:
        return money(sum((Decimal(row[field]) for row in rows), Decimal("0")))
