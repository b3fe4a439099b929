from fastapi import APIRouter, status, Query
from uuid import UUID

from app.core.config import settings
from app.dependencies.dbDependencies import db_dependency
from app.dependencies.tenantDependencies import TenantId
from app.modules.categories import service
from app.modules.categories.schemas import (
    CategoryCreate, CategoryUpdate, CategoryOut, CategoryList
)

categories_router = APIRouter(tags=["Categories"])

@categories_router.post("/", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(data: CategoryCreate, db: db_dependency, tenant_id: TenantId):
    category_service = service.CategoryService(db)
    return category_service.create_category(data, tenant_id)

@categories_router.get("/", response_model=CategoryList)
def list_categories(
    db: db_dependency,
    tenant_id: TenantId,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    category_service = service.CategoryService(db)
    return category_service.get_all_categories(tenant_id, limit, offset)

@categories_router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: UUID, db: db_dependency, tenant_id: TenantId):
    category_service = service.CategoryService(db)
    return category_service.get_category_by_id(category_id, tenant_id)

@categories_router.patch("/{category_id}", response_model=CategoryOut)
def update_category(category_id: UUID, data: CategoryUpdate, db: db_dependency, tenant_id: TenantId):
    category_service = service.CategoryService(db)
    return category_service.update_category(category_id, data, tenant_id)

@categories_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: UUID, db: db_dependency, tenant_id: TenantId):
    category_service = service.CategoryService(db)
    category_service.delete_category(category_id, tenant_id)
