"""
Persistencia de cabeceras y líneas de venta sobre el almacén de registros.

Cada método es una o dos llamadas independientes al almacén, sin
transacción común.
"""
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Sequence
from uuid import UUID
import logging

from app.common.exceptions import NotFound
from app.database.datastore import TenantScopedStore
from app.modules.sales.schemas import SaleLine

logger = logging.getLogger(__name__)

SALES_TABLE = "sales"
LINE_ITEMS_TABLE = "sale_line_items"


class SaleHeaderRecorder:
    """Cabecera de la venta: fecha y total."""

    def __init__(self, store: TenantScopedStore):
        self.store = store

    def insert_header(self, fecha: date, total: Decimal) -> Dict[str, Any]:
        rows = self.store.insert(SALES_TABLE, [{"fecha": fecha, "total": total}])
        logger.debug(f"Cabecera de venta {rows[0]['id']} creada (total {total})")
        return rows[0]

    def get_header(self, sale_id: UUID) -> Dict[str, Any]:
        rows = self.store.select(SALES_TABLE, {"id": sale_id})
        if not rows:
            raise NotFound("Venta no encontrada o no pertenece al tenant actual")
        return rows[0]

    def update_header(self, sale_id: UUID, fecha: date, total: Decimal) -> None:
        updated = self.store.update(SALES_TABLE, {"fecha": fecha, "total": total}, {"id": sale_id})
        if not updated:
            raise NotFound("Venta no encontrada o no pertenece al tenant actual")

    def delete_header(self, sale_id: UUID) -> None:
        self.store.delete(SALES_TABLE, {"id": sale_id})


class LineItemRecorder:
    """Conjunto de líneas de una venta; siempre se reemplaza completo."""

    def __init__(self, store: TenantScopedStore):
        self.store = store

    def list_line_items(self, sale_id: UUID) -> List[Dict[str, Any]]:
        return self.store.select(LINE_ITEMS_TABLE, {"sale_id": sale_id})

    def insert_line_items(self, sale_id: UUID, lines: Sequence[SaleLine]) -> List[Dict[str, Any]]:
        if not lines:
            return []
        return self.store.insert(LINE_ITEMS_TABLE, [
            {
                "sale_id": sale_id,
                "producto_id": line.product_id,
                "cantidad": line.quantity,
                "precio_unitario": line.unit_price,
            }
            for line in lines
        ])

    def delete_line_items(self, sale_id: UUID) -> int:
        return self.store.delete(LINE_ITEMS_TABLE, {"sale_id": sale_id})

    def replace_line_items(self, sale_id: UUID, lines: Sequence[SaleLine]) -> List[Dict[str, Any]]:
        """
        Borra todas las líneas de la venta y luego inserta las nuevas.

        No es atómico: si la inserción falla, la venta queda sin líneas.
        """
        removed = self.delete_line_items(sale_id)
        logger.debug(f"Venta {sale_id}: {removed} líneas eliminadas para reemplazo")
        return self.insert_line_items(sale_id, lines)
