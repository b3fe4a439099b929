from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from typing import Optional
from datetime import datetime

class CategoryCreate(BaseModel):
    nombre: str = Field(..., max_length=100)
    descripcion: Optional[str] = Field(None, max_length=255)

class CategoryUpdate(BaseModel):
    nombre: Optional[str] = Field(None, max_length=100)
    descripcion: Optional[str] = Field(None, max_length=255)

class CategoryOut(BaseModel):
    id: UUID
    nombre: str
    descripcion: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class CategoryList(BaseModel):
    categories: list[CategoryOut]
    total: int
    limit: int
    offset: int
