from fastapi import APIRouter, Query, status
from typing import Optional
from uuid import UUID

from app.core.config import settings
from app.dependencies.dbDependencies import db_dependency
from app.dependencies.tenantDependencies import TenantId
from app.modules.products.schemas import ProductCreate, ProductUpdate, ProductOut, ProductList
from app.modules.products.service import ProductService

product_router = APIRouter(prefix="/products", tags=["Products"])


@product_router.post("/", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, db: db_dependency, tenant_id: TenantId):
    return ProductService(db).create_product(data, tenant_id)


@product_router.get("/", response_model=ProductList)
def list_products(
    db: db_dependency,
    tenant_id: TenantId,
    search: Optional[str] = Query(None, description="Buscar por nombre"),
    in_stock_only: bool = Query(False, description="Solo productos con stock"),
    categoria_id: Optional[UUID] = Query(None),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    return ProductService(db).list_products(tenant_id, search, in_stock_only, categoria_id, limit, offset)


@product_router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: UUID, db: db_dependency, tenant_id: TenantId):
    return ProductService(db).get_product_out(product_id, tenant_id)


@product_router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: UUID, data: ProductUpdate, db: db_dependency, tenant_id: TenantId):
    return ProductService(db).update_product(product_id, data, tenant_id)


@product_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: UUID, db: db_dependency, tenant_id: TenantId):
    ProductService(db).delete_product(product_id, tenant_id)
