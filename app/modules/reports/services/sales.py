"""
Sales Reports Service

Totales vendidos de hoy, de la última semana y del último mes.
"""

from datetime import timedelta
from decimal import Decimal
from typing import Dict

from app.modules.sales.recorders import SALES_TABLE
from .base import BaseReportService

WEEK_DAYS = 7
MONTH_DAYS = 30


class SalesReportService(BaseReportService):
    """Service for generating sales reports"""

    def sales_total_today(self) -> Decimal:
        return self._sum_totals(self.store.select(SALES_TABLE, {"fecha": self.today}))

    def sales_total_since(self, days: int) -> Decimal:
        """Suma de ventas con fecha entre hoy menos `days` días y hoy."""
        start = self.today - timedelta(days=days)
        return self._sum_totals(
            self.store.select(SALES_TABLE, {"fecha__gte": start, "fecha__lte": self.today})
        )

    def sales_total_week(self) -> Decimal:
        return self.sales_total_since(WEEK_DAYS)

    def sales_total_month(self) -> Decimal:
        return self.sales_total_since(MONTH_DAYS)

    def get_sales_summary(self) -> Dict:
        return {
            "as_of_date": self.today,
            "today": self.sales_total_today(),
            "week": self.sales_total_week(),
            "month": self.sales_total_month(),
        }
