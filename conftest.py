"""
Fixtures compartidas por los tests de todos los módulos.

Cada test recibe una base SQLite en memoria recién creada. Los servicios
ORM usan db_session; el protocolo de ventas y los reportes usan el almacén
de registros sobre la misma base.
"""

from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app as fastapi_app
from app.common.exceptions import DataStoreError
from app.database.database import Base, get_db
from app.database.datastore import DataStore, SQLAlchemyDataStore, TenantContext, TenantScopedStore
from app.dependencies.tenantDependencies import get_datastore
from app.modules.alerts.service import RecordingNotifier


class InstrumentedStore:
    """
    DataStore que registra cada llamada y permite inyectar fallos o
    ejecutar código justo antes de una operación.

    fail_on: {(operación, tabla): n} falla en la n-ésima llamada (1 = primera).
    before: {(operación, tabla): callable} se ejecuta una sola vez antes
    de delegar la primera llamada que coincida.
    """

    def __init__(
        self,
        store: DataStore,
        fail_on: Optional[Dict[Tuple[str, str], int]] = None,
        before: Optional[Dict[Tuple[str, str], Callable[[], None]]] = None
    ):
        self.store = store
        self.fail_on = dict(fail_on or {})
        self.before = dict(before or {})
        self.calls: List[Tuple[str, str]] = []

    @property
    def writes(self) -> List[Tuple[str, str]]:
        return [call for call in self.calls if call[0] != "select"]

    def _enter(self, operation: str, table: str) -> None:
        key = (operation, table)
        self.calls.append(key)
        if key in self.fail_on:
            self.fail_on[key] -= 1
            if self.fail_on[key] == 0:
                del self.fail_on[key]
                raise DataStoreError(f"Fallo simulado en {operation} '{table}'")
        hook = self.before.pop(key, None)
        if hook is not None:
            hook()

    def select(self, table: str, filters=None, order=None):
        self._enter("select", table)
        return self.store.select(table, filters, order)

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]):
        self._enter("insert", table)
        return self.store.insert(table, rows)

    def update(self, table: str, patch: Mapping[str, Any], filters):
        self._enter("update", table)
        return self.store.update(table, patch, filters)

    def delete(self, table: str, filters):
        self._enter("delete", table)
        return self.store.delete(table, filters)


# ===== FIXTURES =====

@pytest.fixture
def engine():
    """Base SQLite en memoria compartida por todas las sesiones del test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def datastore(session_factory):
    return SQLAlchemyDataStore(session_factory)


@pytest.fixture
def tenant_a() -> UUID:
    return uuid4()


@pytest.fixture
def tenant_b() -> UUID:
    return uuid4()


@pytest.fixture
def store(datastore, tenant_a):
    """Almacén limitado a la papelería A"""
    return TenantScopedStore(datastore, TenantContext(tenant_a))


@pytest.fixture
def store_b(datastore, tenant_b):
    """Almacén limitado a la papelería B"""
    return TenantScopedStore(datastore, TenantContext(tenant_b))


@pytest.fixture
def instrumented(datastore, tenant_a):
    """
    Devuelve (almacén instrumentado, almacén con tenant sobre él).

    Uso: raw, scoped = instrumented(fail_on={("insert", "sales"): 1})
    """

    def _make(fail_on=None, before=None, tenant_id: Optional[UUID] = None):
        raw = InstrumentedStore(datastore, fail_on=fail_on, before=before)
        return raw, TenantScopedStore(raw, TenantContext(tenant_id or tenant_a))

    return _make


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_product(datastore, tenant_a):
    """Crea productos directamente en el almacén; por defecto en la papelería A"""

    def _make(
        nombre: str = "Cuaderno",
        precio: str = "5.00",
        stock: int = 10,
        tenant_id: Optional[UUID] = None,
        categoria_id: Optional[UUID] = None
    ) -> Dict[str, Any]:
        return datastore.insert("products", [{
            "tenant_id": tenant_id or tenant_a,
            "nombre": nombre,
            "precio": Decimal(precio),
            "stock": stock,
            "categoria_id": categoria_id,
        }])[0]

    return _make


@pytest.fixture
def read_stock(datastore):
    def _read(product_id: UUID) -> int:
        return datastore.select("products", {"id": product_id})[0]["stock"]

    return _read


@pytest.fixture
def client(session_factory, datastore):
    """TestClient con la base del test en lugar de la configurada"""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_datastore] = lambda: datastore
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()
