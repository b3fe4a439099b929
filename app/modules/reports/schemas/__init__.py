"""
Pydantic schemas for Reports module
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


# Sales Report Schemas
class SalesTotalsResponse(BaseModel):
    """Totales vendidos por período"""
    as_of_date: date
    today: Decimal = Field(description="Ventas con fecha de hoy")
    week: Decimal = Field(description="Ventas de los últimos 7 días")
    month: Decimal = Field(description="Ventas de los últimos 30 días")


# Inventory Report Schemas
class BestSellerItem(BaseModel):
    producto_id: UUID
    nombre: str
    precio: Decimal
    total_vendido: int


class BestSellersResponse(BaseModel):
    items: List[BestSellerItem]


class LowStockItem(BaseModel):
    id: UUID
    nombre: str
    precio: Decimal
    stock: int
    categoria_id: Optional[UUID] = None


class LowStockResponse(BaseModel):
    threshold: int
    items: List[LowStockItem]
    total_low_stock_items: int


class ReportSummaryResponse(BaseModel):
    """Panel de reportes: ventas, más vendidos y stock bajo"""
    sales: SalesTotalsResponse
    best_sellers: List[BestSellerItem]
    low_stock: List[LowStockItem]
    total_products: int
