"""
Tests para el módulo de Productos
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from app.common.exceptions import Conflict, NotFound, ValidationError
from app.core.config import settings
from app.modules.categories.schemas import CategoryCreate
from app.modules.categories.service import CategoryService
from app.modules.products.schemas import ProductCreate, ProductUpdate
from app.modules.products.service import ProductService


# ===== FIXTURES =====

@pytest.fixture
def service(db_session):
    return ProductService(db_session)


@pytest.fixture
def category(db_session, tenant_a):
    return CategoryService(db_session).create_category(CategoryCreate(nombre="Escritura"), tenant_a)


# ===== TESTS DE SERVICIO =====

class TestProductService:

    def test_create_with_category(self, service, tenant_a, category):
        product = service.create_product(
            ProductCreate(nombre="Bolígrafo", precio=Decimal("1.255"), stock=20, categoria_id=category.id),
            tenant_a
        )

        assert product.precio == Decimal("1.26")
        assert product.categoria_nombre == "Escritura"

    def test_category_must_belong_to_tenant(self, service, tenant_b, category):
        with pytest.raises(NotFound):
            service.create_product(
                ProductCreate(nombre="Bolígrafo", precio=Decimal("1"), categoria_id=category.id),
                tenant_b
            )

    def test_name_is_required(self, service, tenant_a):
        with pytest.raises(ValidationError):
            service.create_product(ProductCreate(nombre=" ", precio=Decimal("1")), tenant_a)

    def test_list_search_and_in_stock_only(self, service, tenant_a, tenant_b, make_product):
        make_product(nombre="Lápiz rojo", stock=0)
        make_product(nombre="Lápiz azul", stock=5)
        make_product(nombre="Cuaderno", stock=5)
        make_product(nombre="Lápiz verde", stock=5, tenant_id=tenant_b)

        result = service.list_products(tenant_a, search="lápiz")
        assert [p.nombre for p in result["products"]] == ["Lápiz azul", "Lápiz rojo"]

        result = service.list_products(tenant_a, in_stock_only=True)
        assert [p.nombre for p in result["products"]] == ["Cuaderno", "Lápiz azul"]

    def test_update(self, service, tenant_a, make_product):
        product = make_product(nombre="Regla", precio="2.00", stock=1)

        updated = service.update_product(product["id"], ProductUpdate(precio=Decimal("2.5"), stock=8), tenant_a)

        assert updated.precio == Decimal("2.50")
        assert updated.stock == 8

    def test_delete_blocked_when_sold(self, service, store, tenant_a, make_product):
        product = make_product(nombre="Regla")
        sale = store.insert("sales", [{"fecha": date(2024, 1, 1), "total": Decimal("5")}])[0]
        store.insert("sale_line_items", [{
            "sale_id": sale["id"], "producto_id": product["id"], "cantidad": 1, "precio_unitario": Decimal("5")
        }])

        with pytest.raises(Conflict):
            service.delete_product(product["id"], tenant_a)

    def test_delete(self, service, tenant_a, make_product):
        product = make_product(nombre="Regla")

        service.delete_product(product["id"], tenant_a)

        with pytest.raises(NotFound):
            service.get_product(product["id"], tenant_a)


# ===== TESTS DE ENDPOINTS =====

class TestProductsRouter:

    @pytest.fixture
    def headers(self, tenant_a):
        return {"X-Tenant-ID": str(tenant_a)}

    def test_crud(self, client, headers):
        response = client.post(
            "/products/",
            json={"nombre": "Carpeta", "precio": "3.40", "stock": 6},
            headers=headers
        )
        assert response.status_code == 201
        product_id = response.json()["id"]

        response = client.patch(f"/products/{product_id}", json={"stock": 2}, headers=headers)
        assert response.json()["stock"] == 2

        response = client.get("/products/?in_stock_only=true", headers=headers)
        assert response.json()["total"] == 1

        assert client.delete(f"/products/{product_id}", headers=headers).status_code == 204
        assert client.get(f"/products/{product_id}", headers=headers).status_code == 404

    def test_negative_price_is_rejected(self, client, headers):
        response = client.post("/products/", json={"nombre": "Carpeta", "precio": "-1"}, headers=headers)
        assert response.status_code == 422

    def test_unknown_product(self, client, headers):
        assert client.get(f"/products/{uuid4()}", headers=headers).status_code == 404

    def test_page_size_defaults_and_bounds(self, client, headers):
        response = client.get("/products/", headers=headers)
        assert response.json()["limit"] == settings.DEFAULT_PAGE_SIZE

        response = client.get(f"/products/?limit={settings.MAX_PAGE_SIZE + 1}", headers=headers)
        assert response.status_code == 422
