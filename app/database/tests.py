"""
Tests para el almacén de registros y su envoltura por tenant
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from app.common.exceptions import DataStoreError, NoActiveTenant
from app.database.datastore import TenantContext, TenantScopedStore


class TestSQLAlchemyDataStore:

    def test_insert_returns_rows_with_defaults(self, datastore, tenant_a):
        rows = datastore.insert("sales", [
            {"tenant_id": tenant_a, "fecha": date(2024, 1, 1), "total": Decimal("3.50")},
            {"tenant_id": tenant_a, "fecha": date(2024, 1, 2), "total": Decimal("1.00")},
        ])

        assert len(rows) == 2
        assert rows[0]["id"] is not None
        assert rows[0]["created_at"] is not None
        assert rows[0]["total"] == Decimal("3.50")

    def test_select_with_operators_and_order(self, datastore, make_product):
        make_product(nombre="A", stock=1)
        make_product(nombre="B", stock=5)
        make_product(nombre="C", stock=9)

        rows = datastore.select("products", {"stock__gte": 5}, order=["-stock"])
        assert [row["nombre"] for row in rows] == ["C", "B"]

        rows = datastore.select("products", {"nombre__in": ["A", "C"]}, order=["nombre"])
        assert [row["nombre"] for row in rows] == ["A", "C"]

        rows = datastore.select("products", {"nombre__neq": "A", "stock__lt": 9})
        assert [row["nombre"] for row in rows] == ["B"]

    def test_update_and_delete_return_rowcount(self, datastore, make_product):
        product = make_product(stock=3)

        assert datastore.update("products", {"stock": 4}, {"id": product["id"]}) == 1
        assert datastore.update("products", {"stock": 4}, {"id": uuid4()}) == 0
        assert datastore.delete("products", {"id": product["id"]}) == 1
        assert datastore.select("products") == []

    def test_unknown_table_or_column(self, datastore):
        with pytest.raises(DataStoreError):
            datastore.select("ventas")
        with pytest.raises(DataStoreError):
            datastore.select("products", {"sku": "X"})
        with pytest.raises(DataStoreError):
            datastore.select("products", {"stock__like": 1})
        with pytest.raises(DataStoreError):
            datastore.select("products", order=["-sku"])

    def test_database_errors_are_wrapped(self, datastore, tenant_a):
        with pytest.raises(DataStoreError) as exc:
            datastore.insert("products", [{"tenant_id": tenant_a, "nombre": "X", "precio": Decimal("-1"), "stock": 0}])

        assert exc.value.status_code == 502
        assert datastore.select("products") == []


class TestTenantScopedStore:

    def test_insert_stamps_tenant(self, store, tenant_a):
        row = store.insert("sales", [{"fecha": date(2024, 1, 1), "total": Decimal("1")}])[0]
        assert row["tenant_id"] == tenant_a

    def test_rows_of_other_tenant_are_invisible(self, store, store_b):
        sale = store.insert("sales", [{"fecha": date(2024, 1, 1), "total": Decimal("1")}])[0]

        assert store_b.select("sales") == []
        assert store_b.update("sales", {"total": Decimal("9")}, {"id": sale["id"]}) == 0
        assert store_b.delete("sales", {"id": sale["id"]}) == 0
        assert store.select("sales", {"id": sale["id"]})[0]["total"] == Decimal("1")

    def test_update_cannot_move_rows_between_tenants(self, store, tenant_b):
        sale = store.insert("sales", [{"fecha": date(2024, 1, 1), "total": Decimal("1")}])[0]

        store.update("sales", {"tenant_id": tenant_b, "total": Decimal("2")}, {"id": sale["id"]})

        row = store.select("sales", {"id": sale["id"]})[0]
        assert row["total"] == Decimal("2")

    def test_no_active_tenant(self, instrumented):
        raw, _ = instrumented()
        scoped = TenantScopedStore(raw, TenantContext(None))

        with pytest.raises(NoActiveTenant):
            scoped.select("sales")
        with pytest.raises(NoActiveTenant):
            scoped.insert("sales", [{"fecha": date(2024, 1, 1), "total": Decimal("1")}])

        assert raw.calls == []
