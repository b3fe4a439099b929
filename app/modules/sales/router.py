from fastapi import APIRouter, Query
from typing import Optional
from uuid import UUID

from app.dependencies.tenantDependencies import RequestNotifier, TenantStore
from app.modules.sales.schemas import (
    SaleCreate, SaleUpdate, SaleOut, SaleList, SaleMutationResponse
)
from app.modules.sales.service import SaleQueryService, SaleTransactionService

sales_router = APIRouter(prefix="/sales", tags=["Sales"])


@sales_router.post("/", response_model=SaleMutationResponse, status_code=201)
def create_sale(data: SaleCreate, store: TenantStore, notifier: RequestNotifier):
    """Registrar una venta desde el carrito"""
    header = SaleTransactionService(store, notifier).checkout(data.items)
    sale = SaleQueryService(store).get_sale(header["id"])
    return SaleMutationResponse(sale=SaleOut(**sale), alerts=notifier.alerts)


@sales_router.get("/", response_model=SaleList)
def list_sales(
    store: TenantStore,
    search: Optional[str] = Query(None, description="Buscar por fecha (dd/mm/yyyy) o producto"),
):
    query_service = SaleQueryService(store)
    sales = query_service.list_sales(search)
    return SaleList(
        sales=[SaleOut(**sale) for sale in sales],
        total=len(sales),
        today_total=query_service.today_total()
    )


@sales_router.get("/{sale_id}", response_model=SaleOut)
def get_sale(sale_id: UUID, store: TenantStore):
    return SaleOut(**SaleQueryService(store).get_sale(sale_id))


@sales_router.put("/{sale_id}", response_model=SaleMutationResponse)
def update_sale(sale_id: UUID, data: SaleUpdate, store: TenantStore, notifier: RequestNotifier):
    """Editar fecha y líneas de una venta"""
    SaleTransactionService(store, notifier).edit_sale(sale_id, data.items, data.fecha)
    sale = SaleQueryService(store).get_sale(sale_id)
    return SaleMutationResponse(sale=SaleOut(**sale), alerts=notifier.alerts)


@sales_router.delete("/{sale_id}", response_model=SaleMutationResponse)
def delete_sale(sale_id: UUID, store: TenantStore, notifier: RequestNotifier):
    """Eliminar una venta devolviendo su stock"""
    SaleTransactionService(store, notifier).delete_sale(sale_id)
    return SaleMutationResponse(sale=None, alerts=notifier.alerts)
