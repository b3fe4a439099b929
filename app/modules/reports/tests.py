"""
Tests para el módulo de Reportes
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

from app.modules.reports.services import InventoryReportService, SalesReportService
from app.modules.reports.services.inventory import DELETED_PRODUCT


TODAY = date(2024, 3, 31)


# ===== FIXTURES =====

@pytest.fixture
def add_sale(store):
    def _add(days_ago: int, total: str):
        return store.insert("sales", [{"fecha": TODAY - timedelta(days=days_ago), "total": Decimal(total)}])[0]
    return _add


@pytest.fixture
def add_line(store, add_sale):
    sale = add_sale(0, "0")

    def _add(product_id, cantidad: int):
        store.insert("sale_line_items", [{
            "sale_id": sale["id"],
            "producto_id": product_id,
            "cantidad": cantidad,
            "precio_unitario": Decimal("1.00"),
        }])
    return _add


# ===== TESTS DE VENTAS =====

class TestSalesReport:

    def test_period_totals(self, store, add_sale):
        add_sale(0, "10.00")
        add_sale(3, "20.00")
        add_sale(7, "5.00")
        add_sale(8, "1.00")
        add_sale(30, "2.00")
        add_sale(31, "100.00")

        report = SalesReportService(store, today=TODAY)

        assert report.sales_total_today() == Decimal("10.00")
        assert report.sales_total_week() == Decimal("35.00")
        assert report.sales_total_month() == Decimal("38.00")

    def test_future_dated_sales_are_not_counted(self, store, add_sale):
        add_sale(0, "10.00")
        add_sale(-1, "50.00")

        report = SalesReportService(store, today=TODAY)

        assert report.sales_total_today() == Decimal("10.00")
        assert report.sales_total_week() == Decimal("10.00")
        assert report.sales_total_month() == Decimal("10.00")

    def test_totals_are_tenant_scoped(self, store_b, add_sale):
        add_sale(0, "10.00")

        assert SalesReportService(store_b, today=TODAY).sales_total_today() == Decimal("0.00")


# ===== TESTS DE INVENTARIO =====

class TestInventoryReport:

    def test_best_sellers_order_and_ties(self, store, make_product, add_line):
        borrador = make_product(nombre="Borrador")
        cuaderno = make_product(nombre="Cuaderno")
        lapiz = make_product(nombre="Lápiz")
        add_line(cuaderno["id"], 3)
        add_line(borrador["id"], 5)
        add_line(cuaderno["id"], 2)
        add_line(lapiz["id"], 7)

        ranking = InventoryReportService(store).best_sellers(limit=5)

        assert [row["nombre"] for row in ranking] == ["Lápiz", "Borrador", "Cuaderno"]
        assert [row["total_vendido"] for row in ranking] == [7, 5, 5]

    def test_best_sellers_limit(self, store, make_product, add_line):
        for index in range(7):
            add_line(make_product(nombre=f"Producto {index}")["id"], index + 1)

        ranking = InventoryReportService(store).best_sellers(limit=5)

        assert len(ranking) == 5
        assert ranking[0]["nombre"] == "Producto 6"

    def test_best_sellers_with_missing_product(self, store, add_line):
        add_line(uuid4(), 2)

        ranking = InventoryReportService(store).best_sellers()

        assert ranking[0]["nombre"] == DELETED_PRODUCT

    def test_low_stock(self, store, make_product):
        make_product(nombre="Regla", stock=10)
        make_product(nombre="Compás", stock=11)
        make_product(nombre="Tijeras", stock=0)
        make_product(nombre="Goma", stock=3)
        make_product(nombre="Cinta", stock=-2)
        make_product(nombre="Clips", stock=3)

        items = InventoryReportService(store).low_stock(threshold=10)

        assert [row["nombre"] for row in items] == ["Cinta", "Tijeras", "Clips", "Goma", "Regla"]

    def test_total_products_is_tenant_scoped(self, store, store_b, make_product, tenant_b):
        make_product(nombre="A")
        make_product(nombre="B")
        make_product(nombre="C", tenant_id=tenant_b)

        assert InventoryReportService(store).total_products() == 2
        assert InventoryReportService(store_b).total_products() == 1


# ===== TESTS DE ENDPOINTS =====

class TestReportsRouter:

    @pytest.fixture
    def headers(self, tenant_a):
        return {"X-Tenant-ID": str(tenant_a)}

    def test_summary(self, client, headers, make_product):
        make_product(nombre="Tijeras", stock=2)
        make_product(nombre="Resma", stock=50)

        response = client.get("/reports/summary", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_products"] == 2
        assert [row["nombre"] for row in data["low_stock"]] == ["Tijeras"]
        assert data["best_sellers"] == []
        assert Decimal(data["sales"]["today"]) == Decimal("0")

    def test_summary_requires_tenant(self, client):
        response = client.get("/reports/summary")
        assert response.status_code == 400

    def test_low_stock_csv(self, client, headers, make_product):
        make_product(nombre="Tijeras", precio="3.00", stock=2)

        response = client.get("/reports/inventory/low-stock?export=csv", headers=headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0] == "Producto,Precio,Stock"
        assert lines[1] == "Tijeras,3.00,2"

    def test_sales_totals(self, client, headers):
        response = client.get("/reports/sales/totals", headers=headers)

        assert response.status_code == 200
        assert set(response.json()) == {"as_of_date", "today", "week", "month"}
