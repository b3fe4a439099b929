"""
Tests para el acceso al stock de productos

Incluye la carrera de actualización perdida del modo read_write y su
corrección con compare_and_swap.
"""

import logging

import pytest
from uuid import uuid4

from app.common.exceptions import NotFound, StockConflict
from app.core.config import settings
from app.database.datastore import TenantContext, TenantScopedStore
from app.modules.inventory.service import COMPARE_AND_SWAP, READ_WRITE, StockLedger


class TestStockLedger:

    def test_read_and_adjust(self, store, make_product, read_stock):
        product = make_product(stock=10)
        ledger = StockLedger(store, mode=READ_WRITE)

        assert ledger.read_stock(product["id"]) == 10
        assert ledger.adjust_stock(product["id"], -4) == 6
        assert ledger.adjust_stock(product["id"], 2) == 8
        assert read_stock(product["id"]) == 8

    def test_adjust_does_not_reject_negative_results(self, store, make_product):
        product = make_product(stock=1)

        assert StockLedger(store).adjust_stock(product["id"], -3) == -2

    def test_unknown_product(self, store):
        ledger = StockLedger(store)

        with pytest.raises(NotFound):
            ledger.read_stock(uuid4())
        with pytest.raises(NotFound):
            ledger.adjust_stock(uuid4(), 1)

    def test_product_of_other_tenant_is_not_visible(self, store_b, make_product, read_stock):
        product = make_product(stock=5)

        with pytest.raises(NotFound):
            StockLedger(store_b).adjust_stock(product["id"], -1)
        assert read_stock(product["id"]) == 5

    def test_unknown_mode(self, store):
        with pytest.raises(ValueError):
            StockLedger(store, mode="optimista")

    def test_zero_attempts_is_rejected(self, store):
        with pytest.raises(ValueError):
            StockLedger(store, mode=COMPARE_AND_SWAP, cas_attempts=0)

    def test_attempts_default_to_settings(self, store):
        assert StockLedger(store).cas_attempts == settings.STOCK_CAS_ATTEMPTS


class TestConcurrentAdjustments:
    """
    Otra sesión ajusta el mismo producto entre la lectura y la escritura
    de este ledger.
    """

    @pytest.fixture
    def product(self, make_product):
        return make_product(stock=10)

    @pytest.fixture
    def other_session(self, datastore, tenant_a):
        return StockLedger(TenantScopedStore(datastore, TenantContext(tenant_a)), mode=READ_WRITE)

    def test_read_write_loses_an_update(self, instrumented, other_session, product, read_stock):
        _, scoped = instrumented(
            before={("update", "products"): lambda: other_session.adjust_stock(product["id"], -2)}
        )
        ledger = StockLedger(scoped, mode=READ_WRITE)

        assert ledger.adjust_stock(product["id"], -3) == 7

        # 10 - 3 - 2 debería ser 5; el -2 se pierde
        assert read_stock(product["id"]) == 7

    def test_compare_and_swap_retries(self, instrumented, other_session, product, read_stock, caplog):
        _, scoped = instrumented(
            before={("update", "products"): lambda: other_session.adjust_stock(product["id"], -2)}
        )
        ledger = StockLedger(scoped, mode=COMPARE_AND_SWAP, cas_attempts=3)

        with caplog.at_level(logging.WARNING, logger="app.modules.inventory.service"):
            assert ledger.adjust_stock(product["id"], -3) == 5

        assert read_stock(product["id"]) == 5
        assert "intento 1/3" in caplog.text

    def test_compare_and_swap_gives_up(self, instrumented, other_session, product, read_stock):
        _, scoped = instrumented(
            before={("update", "products"): lambda: other_session.adjust_stock(product["id"], -2)}
        )
        ledger = StockLedger(scoped, mode=COMPARE_AND_SWAP, cas_attempts=1)

        with pytest.raises(StockConflict):
            ledger.adjust_stock(product["id"], -3)

        assert read_stock(product["id"]) == 8
