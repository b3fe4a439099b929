"""
Inventory Reports Service

Productos más vendidos, productos con stock bajo y conteo de productos.
"""

from typing import Dict, List, Optional
from uuid import UUID

from app.core.config import settings
from app.common.validators import money
from app.modules.inventory.service import PRODUCTS_TABLE
from app.modules.sales.recorders import LINE_ITEMS_TABLE
from .base import BaseReportService

DELETED_PRODUCT = "Producto eliminado"


class InventoryReportService(BaseReportService):
    """Service for generating inventory reports"""

    def best_sellers(self, limit: Optional[int] = None) -> List[Dict]:
        """
        Productos ordenados por unidades vendidas, de mayor a menor.

        Los empates se resuelven por nombre y luego por id para que el
        orden sea estable entre llamadas.
        """
        limit = settings.BEST_SELLERS_LIMIT if limit is None else limit
        products = {row["id"]: row for row in self.store.select(PRODUCTS_TABLE)}

        sold: Dict[UUID, int] = {}
        for item in self.store.select(LINE_ITEMS_TABLE):
            sold[item["producto_id"]] = sold.get(item["producto_id"], 0) + int(item["cantidad"])

        ranking = []
        for product_id, quantity in sold.items():
            product = products.get(product_id)
            ranking.append({
                "producto_id": product_id,
                "nombre": product["nombre"] if product else DELETED_PRODUCT,
                "precio": money(product["precio"]) if product else money(0),
                "total_vendido": quantity,
            })

        ranking.sort(key=lambda row: (-row["total_vendido"], row["nombre"], str(row["producto_id"])))
        return ranking[:limit]

    def low_stock(self, threshold: Optional[int] = None) -> List[Dict]:
        """Productos con stock menor o igual al umbral, el más escaso primero."""
        threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
        rows = self.store.select(PRODUCTS_TABLE, {"stock__lte": threshold}, order=["stock", "nombre"])
        return [
            {
                "id": row["id"],
                "nombre": row["nombre"],
                "precio": money(row["precio"]),
                "stock": row["stock"],
                "categoria_id": row.get("categoria_id"),
            }
            for row in rows
        ]

    def total_products(self) -> int:
        return len(self.store.select(PRODUCTS_TABLE))
