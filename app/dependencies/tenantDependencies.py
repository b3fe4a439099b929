from typing import Annotated
from fastapi import Depends, Request
from uuid import UUID

from app.common.exceptions import NoActiveTenant
from app.database.database import SessionLocal
from app.database.datastore import DataStore, SQLAlchemyDataStore, TenantContext, TenantScopedStore
from app.modules.alerts.service import LoggingNotifier, RecordingNotifier


def get_tenant_context(request: Request) -> TenantContext:
    """Tenant context from request state set by TenantMiddleware"""
    return TenantContext(getattr(request.state, "tenant_id", None))


def get_tenant_id(context: Annotated[TenantContext, Depends(get_tenant_context)]) -> UUID:
    """Active tenant id; fails fast when the request carries none"""
    tenant_id = context.current_tenant_id()
    if tenant_id is None:
        raise NoActiveTenant("No hay tenant activo. Envíe el header X-Tenant-ID.")
    return tenant_id


def get_datastore() -> DataStore:
    """Record store shared by the sales protocol and reports"""
    return SQLAlchemyDataStore(SessionLocal)


def get_tenant_store(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    store: Annotated[DataStore, Depends(get_datastore)]
) -> TenantScopedStore:
    return TenantScopedStore(store, context)


def get_notifier() -> RecordingNotifier:
    """Per-request alert sink; alerts are logged and returned in the response"""
    return RecordingNotifier(forward_to=LoggingNotifier())


TenantId = Annotated[UUID, Depends(get_tenant_id)]
TenantStore = Annotated[TenantScopedStore, Depends(get_tenant_store)]
RequestNotifier = Annotated[RecordingNotifier, Depends(get_notifier)]
