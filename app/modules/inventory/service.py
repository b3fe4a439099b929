"""
Acceso al contador de stock de productos.

adjust_stock es una lectura seguida de una escritura, dos llamadas
independientes al almacén. En modo read_write dos sesiones que ajustan el
mismo producto a la vez pueden pisarse (gana la última escritura). El modo
compare_and_swap condiciona la escritura al valor leído y reintenta.
"""
from typing import Any, Dict, Optional
from uuid import UUID
import logging

from app.common.exceptions import NotFound, StockConflict
from app.core.config import settings
from app.database.datastore import TenantScopedStore

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"

READ_WRITE = "read_write"
COMPARE_AND_SWAP = "compare_and_swap"


class StockLedger:
    """Lectura y ajuste del stock de un producto dentro del tenant activo."""

    def __init__(
        self,
        store: TenantScopedStore,
        mode: Optional[str] = None,
        cas_attempts: Optional[int] = None
    ):
        self.store = store
        self.mode = mode or settings.STOCK_ADJUST_MODE
        self.cas_attempts = settings.STOCK_CAS_ATTEMPTS if cas_attempts is None else cas_attempts
        if self.mode not in (READ_WRITE, COMPARE_AND_SWAP):
            raise ValueError(f"Modo de ajuste de stock desconocido: {self.mode}")
        if self.cas_attempts < 1:
            raise ValueError("cas_attempts debe ser al menos 1")

    def get_product(self, product_id: UUID) -> Dict[str, Any]:
        rows = self.store.select(PRODUCTS_TABLE, {"id": product_id})
        if not rows:
            raise NotFound(f"Producto {product_id} no encontrado")
        return rows[0]

    def read_stock(self, product_id: UUID) -> int:
        return int(self.get_product(product_id)["stock"])

    def adjust_stock(self, product_id: UUID, delta: int) -> int:
        """
        Suma delta al stock actual y devuelve el nuevo valor.

        No rechaza resultados negativos; verificar suficiencia es
        responsabilidad de quien llama.
        """
        if self.mode == COMPARE_AND_SWAP:
            return self._adjust_compare_and_swap(product_id, delta)

        current = self.read_stock(product_id)
        new_stock = current + delta
        updated = self.store.update(PRODUCTS_TABLE, {"stock": new_stock}, {"id": product_id})
        if not updated:
            raise NotFound(f"Producto {product_id} no encontrado")

        logger.debug(f"Stock de {product_id}: {current} -> {new_stock} ({delta:+d})")
        return new_stock

    def _adjust_compare_and_swap(self, product_id: UUID, delta: int) -> int:
        for attempt in range(1, self.cas_attempts + 1):
            current = self.read_stock(product_id)
            new_stock = current + delta
            updated = self.store.update(
                PRODUCTS_TABLE,
                {"stock": new_stock},
                {"id": product_id, "stock": current}
            )
            if updated:
                logger.debug(f"Stock de {product_id}: {current} -> {new_stock} ({delta:+d}, intento {attempt})")
                return new_stock
            logger.warning(
                f"Stock de {product_id} cambió durante el ajuste (intento {attempt}/{self.cas_attempts})"
            )

        raise StockConflict(
            f"No se pudo ajustar el stock del producto {product_id}: "
            f"modificado concurrentemente {self.cas_attempts} veces"
        )
