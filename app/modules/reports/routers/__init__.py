"""
Routers package for Reports module
"""

from .sales import router as sales_router
from .inventory import router as inventory_router
from .summary import router as summary_router

__all__ = [
    "sales_router",
    "inventory_router",
    "summary_router",
]
