"""
Tests para validadores, errores de dominio y middleware
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from app.common.exceptions import InsufficientStock, NoActiveTenant, ValidationError
from app.common.validators import money, parse_sale_date, validate_required_name


class TestMoney:

    @pytest.mark.parametrize("value, expected", [
        ("2.675", Decimal("2.68")),
        ("2.665", Decimal("2.67")),
        (0.1, Decimal("0.10")),
        (3, Decimal("3.00")),
        (Decimal("1.005"), Decimal("1.01")),
    ])
    def test_rounds_half_up_to_cents(self, value, expected):
        assert money(value) == expected

    def test_invalid_amount(self):
        with pytest.raises(ValidationError):
            money("cinco")


class TestParseSaleDate:

    def test_missing_date(self):
        assert parse_sale_date(None) is None

    def test_iso_date(self):
        assert parse_sale_date(" 2024-02-29 ") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["", "  ", "2023-02-29", "29/02/2024"])
    def test_invalid_dates(self, value):
        with pytest.raises(ValidationError):
            parse_sale_date(value)


def test_required_name():
    assert validate_required_name("  Papel ", "falta") == "Papel"
    with pytest.raises(ValidationError) as exc:
        validate_required_name(None, "El nombre es obligatorio")
    assert exc.value.detail == "El nombre es obligatorio"


class TestDomainErrors:

    def test_insufficient_stock_message(self):
        exc = InsufficientStock(product_name="Cuaderno", available=2, requested=5)

        assert exc.status_code == 409
        assert exc.detail == "Stock insuficiente para 'Cuaderno'. Disponible: 2, Solicitado: 5"

    def test_no_active_tenant_default(self):
        assert NoActiveTenant().status_code == 400
        assert NoActiveTenant().detail == "No hay tenant activo"


class TestMiddleware:

    def test_health_does_not_need_tenant(self, client):
        response = client.get("/health", headers={"X-Tenant-ID": "basura"})

        assert response.status_code == 200
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_tenant_header_is_echoed(self, client):
        tenant_id = str(uuid4())

        response = client.get("/products/", headers={"X-Tenant-ID": tenant_id})

        assert response.status_code == 200
        assert response.headers["X-Tenant-ID"] == tenant_id

    def test_malformed_tenant_header(self, client):
        response = client.get("/products/", headers={"X-Tenant-ID": "123"})

        assert response.status_code == 400
        assert "X-Tenant-ID" in response.json()["detail"]
