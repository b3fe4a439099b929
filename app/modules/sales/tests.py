"""
Tests para el módulo de Ventas

Cubren:
- Crear, editar y eliminar ventas con ajuste de stock
- Verificación de stock al editar y reversión de la restauración
- Creación sin verificación de stock (configurable)
- Fallos parciales del almacén sin compensación
- Carrito, listado de ventas y endpoints
- Aislamiento por tenant
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from app.common.exceptions import (
    DataStoreError, InsufficientStock, NoActiveTenant, NotFound, ValidationError
)
from app.database.datastore import TenantContext, TenantScopedStore
from app.modules.alerts.schemas import AlertKind
from app.modules.sales.cart import Cart
from app.modules.sales.schemas import CartItemIn, SaleItemIn
from app.modules.sales.service import (
    SaleQueryService, SaleTransactionService, compute_total, valid_lines
)


SALE_DAY = date(2024, 3, 15)


def item(product, quantity, price=None) -> SaleItemIn:
    unit_price = Decimal(price) if price is not None else product["precio"]
    return SaleItemIn(product_id=product["id"], quantity=quantity, unit_price=unit_price)


# ===== FIXTURES =====

@pytest.fixture
def service(store, notifier):
    return SaleTransactionService(store, notifier, verify_stock_on_create=False, today=lambda: SALE_DAY)


@pytest.fixture
def checking_service(store, notifier):
    """Orquestador que verifica stock también al crear"""
    return SaleTransactionService(store, notifier, verify_stock_on_create=True, today=lambda: SALE_DAY)


@pytest.fixture
def queries(store):
    return SaleQueryService(store)


@pytest.fixture
def cuaderno(make_product):
    return make_product(nombre="Cuaderno", precio="5.00", stock=10)


@pytest.fixture
def lapiz(make_product):
    return make_product(nombre="Lápiz", precio="1.25", stock=4)


# ===== TESTS DE LÍNEAS Y TOTALES =====

class TestValidLines:

    def test_skips_lines_without_quantity_or_price(self):
        product_id = uuid4()
        lines = valid_lines([
            SaleItemIn(product_id=uuid4(), quantity=None, unit_price=Decimal("5")),
            SaleItemIn(product_id=uuid4(), quantity=0, unit_price=Decimal("5")),
            SaleItemIn(product_id=uuid4(), quantity=2, unit_price=None),
            SaleItemIn(product_id=product_id, quantity=2, unit_price=Decimal("1.5")),
        ])

        assert len(lines) == 1
        assert lines[0].product_id == product_id
        assert lines[0].unit_price == Decimal("1.50")

    def test_no_valid_lines_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc:
            valid_lines([SaleItemIn(product_id=uuid4())])
        assert exc.value.detail == "Agrega al menos un producto a la venta"

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            valid_lines([SaleItemIn(product_id=uuid4(), quantity=1, unit_price=Decimal("-1"))])

    def test_repeated_product_is_merged(self):
        product_id, other_id = uuid4(), uuid4()
        lines = valid_lines([
            SaleItemIn(product_id=product_id, quantity=2, unit_price=Decimal("1.50")),
            SaleItemIn(product_id=other_id, quantity=1, unit_price=Decimal("3")),
            SaleItemIn(product_id=product_id, quantity=4, unit_price=Decimal("1.5")),
        ])

        assert [(line.product_id, line.quantity) for line in lines] == [(product_id, 6), (other_id, 1)]
        assert compute_total(lines) == Decimal("12.00")

    def test_repeated_product_with_different_prices(self):
        product_id = uuid4()
        with pytest.raises(ValidationError):
            valid_lines([
                SaleItemIn(product_id=product_id, quantity=1, unit_price=Decimal("1.50")),
                SaleItemIn(product_id=product_id, quantity=1, unit_price=Decimal("2.00")),
            ])

    def test_total_is_exact_to_the_cent(self):
        lines = valid_lines([
            SaleItemIn(product_id=uuid4(), quantity=3, unit_price=Decimal("0.10")),
            SaleItemIn(product_id=uuid4(), quantity=1, unit_price=Decimal("0.20")),
        ])
        assert compute_total(lines) == Decimal("0.50")


# ===== TESTS DE CREACIÓN =====

class TestCreateSale:

    def test_create_decrements_stock_and_stores_total(self, service, queries, cuaderno, read_stock, notifier):
        header = service.create_sale([item(cuaderno, 3)])

        assert header["total"] == Decimal("15.00")
        assert header["fecha"] == SALE_DAY
        assert read_stock(cuaderno["id"]) == 7

        sale = queries.get_sale(header["id"])
        assert len(sale["detalle"]) == 1
        assert sale["detalle"][0]["cantidad"] == 3
        assert notifier.last.kind == AlertKind.SUCCESS
        assert notifier.last.message == "Venta registrada correctamente"

    def test_total_matches_line_items(self, service, queries, cuaderno, lapiz):
        header = service.create_sale([item(cuaderno, 2, "4.99"), item(lapiz, 3)])

        sale = queries.get_sale(header["id"])
        line_sum = sum(Decimal(line["precio_unitario"]) * line["cantidad"] for line in sale["detalle"])
        assert Decimal(sale["total"]) == line_sum == Decimal("13.73")

    def test_unit_price_is_a_snapshot(self, service, queries, datastore, cuaderno):
        header = service.create_sale([item(cuaderno, 1)])
        datastore.update("products", {"precio": Decimal("9.99")}, {"id": cuaderno["id"]})

        sale = queries.get_sale(header["id"])
        assert sale["detalle"][0]["precio_unitario"] == Decimal("5.00")

    def test_create_without_stock_check_allows_negative_stock(self, service, make_product, read_stock):
        """Por defecto la creación no verifica stock: 2 - 5 = -3"""
        borrador = make_product(nombre="Borrador", precio="0.50", stock=2)

        service.create_sale([item(borrador, 5)])

        assert read_stock(borrador["id"]) == -3

    def test_create_with_stock_check_rejects_before_writing(
        self, checking_service, store, make_product, read_stock, notifier
    ):
        borrador = make_product(nombre="Borrador", precio="0.50", stock=2)

        with pytest.raises(InsufficientStock) as exc:
            checking_service.create_sale([item(borrador, 5)])

        assert exc.value.product_name == "Borrador"
        assert exc.value.available == 2
        assert exc.value.requested == 5
        assert read_stock(borrador["id"]) == 2
        assert store.select("sales") == []
        assert notifier.last.kind == AlertKind.WARNING
        assert notifier.last.title == "Stock insuficiente"

    def test_stock_check_sums_repeated_product(self, checking_service, store, cuaderno, read_stock):
        with pytest.raises(InsufficientStock) as exc:
            checking_service.create_sale([item(cuaderno, 6), item(cuaderno, 6)])

        assert exc.value.requested == 12
        assert read_stock(cuaderno["id"]) == 10
        assert store.select("sales") == []

    def test_empty_sale_performs_no_writes(self, instrumented, notifier):
        raw, scoped = instrumented()
        service = SaleTransactionService(scoped, notifier, today=lambda: SALE_DAY)

        with pytest.raises(ValidationError):
            service.create_sale([])

        assert raw.calls == []
        assert notifier.last.kind == AlertKind.ERROR

    def test_without_tenant_fails_before_touching_store(self, datastore, notifier, cuaderno, instrumented):
        raw, _ = instrumented()
        service = SaleTransactionService(TenantScopedStore(raw, TenantContext(None)), notifier)

        with pytest.raises(NoActiveTenant):
            service.create_sale([item(cuaderno, 1)])

        assert raw.calls == []

    def test_line_item_failure_leaves_header_without_lines(
        self, instrumented, notifier, store, cuaderno, read_stock
    ):
        _, scoped = instrumented(fail_on={("insert", "sale_line_items"): 1})
        service = SaleTransactionService(scoped, notifier, today=lambda: SALE_DAY)

        with pytest.raises(DataStoreError):
            service.create_sale([item(cuaderno, 3)])

        assert len(store.select("sales")) == 1
        assert store.select("sale_line_items") == []
        assert read_stock(cuaderno["id"]) == 10
        assert notifier.last.kind == AlertKind.ERROR
        assert notifier.last.message.startswith("No se pudo procesar la venta")

    def test_stock_failure_midway_keeps_earlier_adjustments(
        self, instrumented, notifier, store, cuaderno, lapiz, read_stock
    ):
        _, scoped = instrumented(fail_on={("update", "products"): 2})
        service = SaleTransactionService(scoped, notifier, today=lambda: SALE_DAY)

        with pytest.raises(DataStoreError):
            service.create_sale([item(cuaderno, 3), item(lapiz, 1)])

        assert read_stock(cuaderno["id"]) == 7
        assert read_stock(lapiz["id"]) == 4
        assert len(store.select("sale_line_items")) == 2


# ===== TESTS DE EDICIÓN =====

class TestEditSale:

    def test_create_edit_delete_scenario(self, service, cuaderno, read_stock):
        """Stock 10 -> venta de 3 -> 7 -> editar a 5 -> 5 -> eliminar -> 10"""
        header = service.create_sale([item(cuaderno, 3)])
        assert header["total"] == Decimal("15.00")
        assert read_stock(cuaderno["id"]) == 7

        edited = service.edit_sale(header["id"], [item(cuaderno, 5)])
        assert edited["total"] == Decimal("25.00")
        assert read_stock(cuaderno["id"]) == 5

        service.delete_sale(header["id"])
        assert read_stock(cuaderno["id"]) == 10

    def test_noop_edit_keeps_stock_and_total(self, service, queries, cuaderno, lapiz, read_stock):
        items = [item(cuaderno, 3), item(lapiz, 2)]
        header = service.create_sale(items)

        service.edit_sale(header["id"], items)

        assert read_stock(cuaderno["id"]) == 7
        assert read_stock(lapiz["id"]) == 2
        assert Decimal(queries.get_sale(header["id"])["total"]) == Decimal("17.50")

    def test_insufficient_stock_reverts_restoration(self, service, queries, cuaderno, read_stock, notifier):
        header = service.create_sale([item(cuaderno, 3)])

        with pytest.raises(InsufficientStock) as exc:
            service.edit_sale(header["id"], [item(cuaderno, 20)])

        assert exc.value.product_id == cuaderno["id"]
        assert exc.value.product_name == "Cuaderno"
        assert exc.value.available == 10
        assert exc.value.requested == 20
        assert read_stock(cuaderno["id"]) == 7

        sale = queries.get_sale(header["id"])
        assert Decimal(sale["total"]) == Decimal("15.00")
        assert [line["cantidad"] for line in sale["detalle"]] == [3]
        assert notifier.last.kind == AlertKind.WARNING

    def test_insufficient_stock_names_the_short_product(self, service, cuaderno, lapiz, read_stock):
        header = service.create_sale([item(cuaderno, 3), item(lapiz, 2)])

        with pytest.raises(InsufficientStock) as exc:
            service.edit_sale(header["id"], [item(cuaderno, 3), item(lapiz, 9)])

        assert exc.value.product_name == "Lápiz"
        assert exc.value.available == 4
        assert exc.value.requested == 9
        assert read_stock(cuaderno["id"]) == 7
        assert read_stock(lapiz["id"]) == 2

    def test_unknown_product_reverts_restoration(self, service, cuaderno, read_stock):
        header = service.create_sale([item(cuaderno, 3)])
        ghost = SaleItemIn(product_id=uuid4(), quantity=1, unit_price=Decimal("1"))

        with pytest.raises(NotFound):
            service.edit_sale(header["id"], [item(cuaderno, 3), ghost])

        assert read_stock(cuaderno["id"]) == 7

    def test_repeated_product_is_checked_by_total_quantity(self, service, queries, cuaderno, read_stock, notifier):
        """10 - 3 = 7; al restaurar hay 10, y 6 + 6 = 12 no alcanza"""
        header = service.create_sale([item(cuaderno, 3)])

        with pytest.raises(InsufficientStock) as exc:
            service.edit_sale(header["id"], [item(cuaderno, 6), item(cuaderno, 6)])

        assert exc.value.available == 10
        assert exc.value.requested == 12
        assert read_stock(cuaderno["id"]) == 7
        assert [line["cantidad"] for line in queries.get_sale(header["id"])["detalle"]] == [3]
        assert notifier.last.kind == AlertKind.WARNING

    def test_repeated_product_within_stock_is_stored_once(self, service, queries, cuaderno, read_stock):
        header = service.create_sale([item(cuaderno, 3)])

        edited = service.edit_sale(header["id"], [item(cuaderno, 4), item(cuaderno, 4)])

        assert edited["total"] == Decimal("40.00")
        assert read_stock(cuaderno["id"]) == 2
        assert [line["cantidad"] for line in queries.get_sale(header["id"])["detalle"]] == [8]

    def test_edit_updates_date(self, service, queries, cuaderno):
        header = service.create_sale([item(cuaderno, 1)])

        edited = service.edit_sale(header["id"], [item(cuaderno, 1)], fecha="2024-01-02")

        assert edited["fecha"] == date(2024, 1, 2)
        assert queries.get_sale(header["id"])["fecha"] == date(2024, 1, 2)

    def test_edit_keeps_date_when_not_given(self, service, queries, cuaderno):
        header = service.create_sale([item(cuaderno, 1)])

        service.edit_sale(header["id"], [item(cuaderno, 2)])

        assert queries.get_sale(header["id"])["fecha"] == SALE_DAY

    @pytest.mark.parametrize("fecha", ["", "   ", "15/03/2024", "2024-13-01"])
    def test_invalid_date_is_rejected(self, service, cuaderno, read_stock, fecha):
        header = service.create_sale([item(cuaderno, 3)])

        with pytest.raises(ValidationError):
            service.edit_sale(header["id"], [item(cuaderno, 1)], fecha=fecha)

        assert read_stock(cuaderno["id"]) == 7

    def test_edit_to_empty_performs_no_writes(self, service, instrumented, notifier, cuaderno):
        header = service.create_sale([item(cuaderno, 3)])
        raw, scoped = instrumented()
        editor = SaleTransactionService(scoped, notifier)

        with pytest.raises(ValidationError):
            editor.edit_sale(header["id"], [SaleItemIn(product_id=cuaderno["id"], quantity=0)])

        assert raw.writes == []

    def test_edit_unknown_sale(self, service, cuaderno, read_stock, notifier):
        with pytest.raises(NotFound):
            service.edit_sale(uuid4(), [item(cuaderno, 1)])

        assert read_stock(cuaderno["id"]) == 10
        assert notifier.last.kind == AlertKind.ERROR

    def test_edit_with_new_unit_price(self, service, queries, cuaderno):
        header = service.create_sale([item(cuaderno, 1)])

        edited = service.edit_sale(header["id"], [item(cuaderno, 2, "4.50")])

        assert edited["total"] == Decimal("9.00")
        assert queries.get_sale(header["id"])["detalle"][0]["precio_unitario"] == Decimal("4.50")

    def test_replace_failure_leaves_sale_without_lines(
        self, service, instrumented, notifier, store, cuaderno, read_stock
    ):
        header = service.create_sale([item(cuaderno, 3)])
        _, scoped = instrumented(fail_on={("insert", "sale_line_items"): 1})
        editor = SaleTransactionService(scoped, notifier)

        with pytest.raises(DataStoreError):
            editor.edit_sale(header["id"], [item(cuaderno, 5)])

        # Stock original restaurado, el nuevo nunca se descontó
        assert read_stock(cuaderno["id"]) == 10
        assert store.select("sale_line_items") == []
        assert Decimal(store.select("sales")[0]["total"]) == Decimal("25.00")
        assert notifier.last.message.startswith("No se pudo actualizar la venta")


# ===== TESTS DE ELIMINACIÓN =====

class TestDeleteSale:

    def test_delete_restores_stock_of_every_line(self, service, store, cuaderno, lapiz, read_stock, notifier):
        header = service.create_sale([item(cuaderno, 4), item(lapiz, 3)])

        service.delete_sale(header["id"])

        assert read_stock(cuaderno["id"]) == 10
        assert read_stock(lapiz["id"]) == 4
        assert store.select("sales") == []
        assert store.select("sale_line_items") == []
        assert notifier.last.message == "Venta eliminada correctamente"

    def test_delete_unknown_sale(self, service, notifier):
        with pytest.raises(NotFound):
            service.delete_sale(uuid4())
        assert notifier.last.kind == AlertKind.ERROR

    def test_line_delete_failure_keeps_restored_stock(
        self, service, instrumented, notifier, store, cuaderno, read_stock
    ):
        header = service.create_sale([item(cuaderno, 3)])
        _, scoped = instrumented(fail_on={("delete", "sale_line_items"): 1})
        deleter = SaleTransactionService(scoped, notifier)

        with pytest.raises(DataStoreError):
            deleter.delete_sale(header["id"])

        assert read_stock(cuaderno["id"]) == 10
        assert len(store.select("sales")) == 1
        assert len(store.select("sale_line_items")) == 1


# ===== TESTS MULTI-TENANT =====

class TestTenantIsolation:

    def test_other_tenant_cannot_edit_or_delete(self, service, store_b, notifier, cuaderno, read_stock):
        header = service.create_sale([item(cuaderno, 3)])
        intruder = SaleTransactionService(store_b, notifier)

        with pytest.raises(NotFound):
            intruder.edit_sale(header["id"], [item(cuaderno, 1)])
        with pytest.raises(NotFound):
            intruder.delete_sale(header["id"])

        assert read_stock(cuaderno["id"]) == 7

    def test_other_tenant_product_is_not_found(self, store_b, notifier, cuaderno):
        intruder = SaleTransactionService(store_b, notifier)

        with pytest.raises(NotFound):
            intruder.checkout([CartItemIn(product_id=cuaderno["id"], quantity=1)])

    def test_listing_is_scoped(self, service, store_b, cuaderno):
        service.create_sale([item(cuaderno, 1)])

        assert SaleQueryService(store_b).list_sales() == []


# ===== TESTS DE CARRITO =====

class TestCart:

    @pytest.fixture
    def product(self):
        return {"id": uuid4(), "nombre": "Regla", "precio": Decimal("2.50"), "stock": 3}

    def test_add_merges_same_product(self, product):
        cart = Cart()
        cart.add(product)
        cart.add(product, 2)

        assert len(cart) == 1
        assert cart.quantity_of(product["id"]) == 3
        assert cart.total() == Decimal("7.50")

    def test_add_beyond_stock_is_refused(self, product):
        cart = Cart()
        cart.add(product, 3)

        with pytest.raises(InsufficientStock) as exc:
            cart.add(product)

        assert exc.value.requested == 4
        assert cart.quantity_of(product["id"]) == 3

    def test_set_quantity(self, product):
        cart = Cart()
        cart.add(product)

        cart.set_quantity(product["id"], 2)
        assert cart.quantity_of(product["id"]) == 2

        with pytest.raises(InsufficientStock):
            cart.set_quantity(product["id"], 5)

        cart.set_quantity(product["id"], 0)
        assert product["id"] not in cart

    def test_set_quantity_of_missing_product(self, product):
        with pytest.raises(NotFound):
            Cart().set_quantity(product["id"], 1)

    def test_line_items_snapshot_price(self, product):
        cart = Cart()
        cart.add(product, 2)
        product["precio"] = Decimal("99")

        lines = cart.to_line_items()

        assert lines[0].unit_price == Decimal("2.50")
        assert lines[0].quantity == 2


class TestCheckout:

    def test_checkout_uses_current_price(self, service, cuaderno, read_stock):
        header = service.checkout([
            CartItemIn(product_id=cuaderno["id"], quantity=2),
            CartItemIn(product_id=cuaderno["id"], quantity=1),
        ])

        assert header["total"] == Decimal("15.00")
        assert read_stock(cuaderno["id"]) == 7

    def test_checkout_beyond_stock_writes_nothing(self, service, store, lapiz, read_stock, notifier):
        with pytest.raises(InsufficientStock):
            service.checkout([CartItemIn(product_id=lapiz["id"], quantity=5)])

        assert read_stock(lapiz["id"]) == 4
        assert store.select("sales") == []
        assert notifier.last.kind == AlertKind.WARNING

    def test_checkout_with_only_zero_quantities(self, service, cuaderno):
        with pytest.raises(ValidationError):
            service.checkout([CartItemIn(product_id=cuaderno["id"], quantity=0)])


# ===== TESTS DE CONSULTAS =====

class TestSaleQueries:

    def test_list_newest_first(self, service, queries, cuaderno, lapiz):
        first = service.create_sale([item(cuaderno, 1)])
        second = service.create_sale([item(lapiz, 1)])

        assert [sale["id"] for sale in queries.list_sales()] == [second["id"], first["id"]]

    def test_search_by_date_and_product(self, service, queries, cuaderno, lapiz):
        service.create_sale([item(cuaderno, 1)])
        service.create_sale([item(lapiz, 1)])

        assert len(queries.list_sales("15/03/2024")) == 2
        assert queries.list_sales("16/03/2024") == []
        found = queries.list_sales("CUADER")
        assert len(found) == 1
        assert found[0]["detalle"][0]["producto_nombre"] == "Cuaderno"

    def test_detail_has_subtotals(self, service, queries, cuaderno):
        header = service.create_sale([item(cuaderno, 3, "1.10")])

        line = queries.get_sale(header["id"])["detalle"][0]
        assert line["subtotal"] == Decimal("3.30")

    def test_get_unknown_sale(self, queries):
        with pytest.raises(NotFound):
            queries.get_sale(uuid4())

    def test_today_total(self, service, queries, cuaderno, lapiz):
        service.create_sale([item(cuaderno, 1)])
        service.create_sale([item(lapiz, 2)])

        assert queries.today_total(SALE_DAY) == Decimal("7.50")
        assert queries.today_total(date(2024, 3, 16)) == Decimal("0.00")


# ===== TESTS DE ENDPOINTS =====

class TestSalesRouter:

    @pytest.fixture
    def headers(self, tenant_a):
        return {"X-Tenant-ID": str(tenant_a)}

    def test_create_sale(self, client, headers, cuaderno, read_stock):
        response = client.post(
            "/sales/",
            json={"items": [{"product_id": str(cuaderno["id"]), "quantity": 3}]},
            headers=headers
        )

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["sale"]["total"]) == Decimal("15")
        assert data["sale"]["detalle"][0]["producto_nombre"] == "Cuaderno"
        assert data["alerts"][0]["kind"] == "success"
        assert read_stock(cuaderno["id"]) == 7

    def test_create_without_tenant(self, client, cuaderno):
        response = client.post(
            "/sales/",
            json={"items": [{"product_id": str(cuaderno["id"]), "quantity": 1}]}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "No hay tenant activo"

    def test_invalid_tenant_header(self, client):
        response = client.get("/sales/", headers={"X-Tenant-ID": "no-es-uuid"})
        assert response.status_code == 400

    def test_create_beyond_stock(self, client, headers, lapiz):
        response = client.post(
            "/sales/",
            json={"items": [{"product_id": str(lapiz["id"]), "quantity": 5}]},
            headers=headers
        )

        assert response.status_code == 409
        assert "Lápiz" in response.json()["detail"]

    def test_update_and_delete(self, client, headers, cuaderno, read_stock):
        created = client.post(
            "/sales/",
            json={"items": [{"product_id": str(cuaderno["id"]), "quantity": 3}]},
            headers=headers
        ).json()
        sale_id = created["sale"]["id"]

        response = client.put(
            f"/sales/{sale_id}",
            json={
                "fecha": "2024-01-02",
                "items": [{"product_id": str(cuaderno["id"]), "quantity": 5, "unit_price": "5.00"}]
            },
            headers=headers
        )
        assert response.status_code == 200
        assert response.json()["sale"]["fecha"] == "2024-01-02"
        assert read_stock(cuaderno["id"]) == 5

        response = client.delete(f"/sales/{sale_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["sale"] is None
        assert read_stock(cuaderno["id"]) == 10

    def test_update_beyond_stock(self, client, headers, cuaderno, read_stock):
        created = client.post(
            "/sales/",
            json={"items": [{"product_id": str(cuaderno["id"]), "quantity": 3}]},
            headers=headers
        ).json()

        response = client.put(
            f"/sales/{created['sale']['id']}",
            json={"items": [{"product_id": str(cuaderno["id"]), "quantity": 11, "unit_price": "5.00"}]},
            headers=headers
        )

        assert response.status_code == 409
        assert read_stock(cuaderno["id"]) == 7

    def test_update_with_repeated_product_beyond_stock(self, client, headers, cuaderno, read_stock):
        created = client.post(
            "/sales/",
            json={"items": [{"product_id": str(cuaderno["id"]), "quantity": 3}]},
            headers=headers
        ).json()
        line = {"product_id": str(cuaderno["id"]), "quantity": 6, "unit_price": "5.00"}

        response = client.put(f"/sales/{created['sale']['id']}", json={"items": [line, line]}, headers=headers)

        assert response.status_code == 409
        assert read_stock(cuaderno["id"]) == 7

    def test_list_sales(self, client, headers, cuaderno):
        client.post(
            "/sales/",
            json={"items": [{"product_id": str(cuaderno["id"]), "quantity": 2}]},
            headers=headers
        )

        data = client.get("/sales/", headers=headers).json()
        assert data["total"] == 1
        assert Decimal(data["today_total"]) == Decimal("10")

    def test_get_unknown_sale(self, client, headers):
        response = client.get(f"/sales/{uuid4()}", headers=headers)
        assert response.status_code == 404
