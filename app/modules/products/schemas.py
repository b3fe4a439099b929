from pydantic import BaseModel, ConfigDict, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime


class ProductCreate(BaseModel):
    nombre: str = Field(..., max_length=100)
    descripcion: Optional[str] = Field(None, max_length=255)
    precio: Decimal = Field(..., ge=0, description="Precio de venta")
    stock: int = Field(0, ge=0, description="Unidades disponibles")
    categoria_id: Optional[UUID] = None


class ProductUpdate(BaseModel):
    nombre: Optional[str] = Field(None, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=255)
    precio: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    categoria_id: Optional[UUID] = None


class ProductOut(BaseModel):
    id: UUID
    nombre: str
    descripcion: Optional[str] = None
    precio: Decimal
    stock: int
    categoria_id: Optional[UUID] = None
    categoria_nombre: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductList(BaseModel):
    products: List[ProductOut]
    total: int
    limit: int
    offset: int
