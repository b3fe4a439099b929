"""
Tests para el módulo de Categorías

CRUD por papelería, unicidad del nombre y bloqueo del borrado mientras
existan productos en la categoría.
"""

import pytest
from uuid import uuid4

from app.common.exceptions import Conflict, NotFound, ValidationError
from app.core.config import settings
from app.modules.categories.schemas import CategoryCreate, CategoryUpdate
from app.modules.categories.service import CategoryService


@pytest.fixture
def service(db_session):
    return CategoryService(db_session)


class TestCategoryService:

    def test_create_and_list_ordered_by_name(self, service, tenant_a):
        service.create_category(CategoryCreate(nombre="Papel"), tenant_a)
        service.create_category(CategoryCreate(nombre="  Arte  ", descripcion="Pinturas"), tenant_a)

        result = service.get_all_categories(tenant_a)

        assert result["total"] == 2
        assert [c.nombre for c in result["categories"]] == ["Arte", "Papel"]

    def test_name_is_required(self, service, tenant_a):
        with pytest.raises(ValidationError):
            service.create_category(CategoryCreate(nombre="   "), tenant_a)

    def test_duplicate_name_in_same_tenant(self, service, tenant_a, tenant_b):
        service.create_category(CategoryCreate(nombre="Papel"), tenant_a)

        with pytest.raises(Conflict):
            service.create_category(CategoryCreate(nombre="Papel"), tenant_a)

        # Otra papelería puede usar el mismo nombre
        assert service.create_category(CategoryCreate(nombre="Papel"), tenant_b).nombre == "Papel"

    def test_update(self, service, tenant_a):
        category = service.create_category(CategoryCreate(nombre="Papel"), tenant_a)
        service.create_category(CategoryCreate(nombre="Arte"), tenant_a)

        updated = service.update_category(category.id, CategoryUpdate(descripcion="Resmas"), tenant_a)
        assert updated.descripcion == "Resmas"

        with pytest.raises(Conflict):
            service.update_category(category.id, CategoryUpdate(nombre="Arte"), tenant_a)

    def test_other_tenant_cannot_read(self, service, tenant_a, tenant_b):
        category = service.create_category(CategoryCreate(nombre="Papel"), tenant_a)

        with pytest.raises(NotFound):
            service.get_category_by_id(category.id, tenant_b)

    def test_delete_blocked_while_products_reference_it(self, service, tenant_a, make_product):
        category = service.create_category(CategoryCreate(nombre="Papel"), tenant_a)
        make_product(nombre="Resma", categoria_id=category.id)

        with pytest.raises(Conflict):
            service.delete_category(category.id, tenant_a)

    def test_delete(self, service, tenant_a):
        category = service.create_category(CategoryCreate(nombre="Papel"), tenant_a)

        service.delete_category(category.id, tenant_a)

        with pytest.raises(NotFound):
            service.get_category_by_id(category.id, tenant_a)


class TestCategoriesRouter:

    @pytest.fixture
    def headers(self, tenant_a):
        return {"X-Tenant-ID": str(tenant_a)}

    def test_crud(self, client, headers):
        response = client.post("/categories/", json={"nombre": "Papel"}, headers=headers)
        assert response.status_code == 201
        category_id = response.json()["id"]

        response = client.patch(f"/categories/{category_id}", json={"descripcion": "Resmas"}, headers=headers)
        assert response.json()["descripcion"] == "Resmas"

        assert client.get("/categories/", headers=headers).json()["total"] == 1

        assert client.delete(f"/categories/{category_id}", headers=headers).status_code == 204
        assert client.get(f"/categories/{category_id}", headers=headers).status_code == 404

    def test_requires_tenant(self, client):
        response = client.get("/categories/")

        assert response.status_code == 400
        assert "X-Tenant-ID" in response.json()["detail"]

    def test_unknown_category(self, client, headers):
        assert client.get(f"/categories/{uuid4()}", headers=headers).status_code == 404

    def test_page_size_defaults_and_bounds(self, client, headers):
        response = client.get("/categories/", headers=headers)
        assert response.json()["limit"] == settings.DEFAULT_PAGE_SIZE

        response = client.get(f"/categories/?limit={settings.MAX_PAGE_SIZE + 1}", headers=headers)
        assert response.status_code == 422
