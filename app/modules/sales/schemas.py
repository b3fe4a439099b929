"""
Esquemas Pydantic para el módulo de ventas
"""
from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime

from app.modules.alerts.schemas import Alert


# ===== ENTRADA =====

class SaleItemIn(BaseModel):
    """
    Línea propuesta para una venta.

    quantity y unit_price pueden faltar: esas líneas no cuentan para el
    total ni se guardan.
    """
    product_id: UUID
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None


class SaleLine(BaseModel):
    """Línea válida lista para guardar."""
    product_id: UUID
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class CartItemIn(BaseModel):
    product_id: UUID
    quantity: int = Field(1, description="Unidades en el carrito")


class SaleCreate(BaseModel):
    """Venta nueva desde el carrito; el precio se toma del producto."""
    items: List[CartItemIn]


class SaleUpdate(BaseModel):
    fecha: Optional[str] = Field(None, description="Fecha de la venta (YYYY-MM-DD)")
    items: List[SaleItemIn]

    @field_validator("fecha", mode="before")
    @classmethod
    def coerce_fecha(cls, v):
        if isinstance(v, date):
            return v.isoformat()
        return v


# ===== SALIDA =====

class SaleLineItemOut(BaseModel):
    id: UUID
    producto_id: UUID
    producto_nombre: Optional[str] = None
    cantidad: int
    precio_unitario: Decimal
    subtotal: Decimal


class SaleOut(BaseModel):
    id: UUID
    fecha: date
    total: Decimal
    created_at: Optional[datetime] = None
    detalle: List[SaleLineItemOut] = []


class SaleList(BaseModel):
    sales: List[SaleOut]
    total: int
    today_total: Decimal


class SaleMutationResponse(BaseModel):
    sale: Optional[SaleOut] = None
    alerts: List[Alert] = []
