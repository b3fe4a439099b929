"""
Services package for Reports module
"""

from .sales import SalesReportService
from .inventory import InventoryReportService

__all__ = [
    "SalesReportService",
    "InventoryReportService",
]
