"""
Servicios de negocio para el módulo de ventas

SaleTransactionService orquesta cabecera, líneas y stock para crear,
editar y eliminar ventas. El almacén no ofrece transacciones de varias
sentencias, así que cada paso es una llamada independiente:

- Crear: cabecera -> líneas -> descontar stock por línea. Sin compensación.
- Editar: restaurar stock original -> verificar stock nuevo (si falta,
  revertir la restauración) -> actualizar cabecera -> reemplazar líneas ->
  descontar stock nuevo. Solo la verificación tiene compensación.
- Eliminar: leer líneas -> restaurar stock -> borrar líneas -> borrar
  cabecera. Sin compensación.

Un fallo a mitad de secuencia deja el estado parcial tal cual y se informa
con el mensaje del almacén.

SaleQueryService arma el listado de ventas con su detalle.
"""
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import UUID
import logging

from fastapi import HTTPException

from app.common.exceptions import InsufficientStock, NotFound, ValidationError
from app.common.validators import money, parse_sale_date
from app.core.config import settings
from app.database.datastore import TenantScopedStore
from app.modules.alerts.schemas import AlertKind
from app.modules.alerts.service import Notifier
from app.modules.inventory.service import StockLedger
from app.modules.sales.recorders import LINE_ITEMS_TABLE, SALES_TABLE, LineItemRecorder, SaleHeaderRecorder
from app.modules.sales.cart import Cart
from app.modules.sales.schemas import CartItemIn, SaleItemIn, SaleLine

logger = logging.getLogger(__name__)

UNNAMED_PRODUCT = "Producto sin nombre"


def valid_lines(items: Sequence[SaleItemIn]) -> List[SaleLine]:
    """
    Descarta las líneas sin cantidad o sin precio unitario.

    Una cantidad cero o negativa cuenta como ausente. Las líneas de un mismo
    producto se agrupan en una sola sumando cantidades, así la verificación
    de stock ve el total pedido; si traen precios distintos se rechazan.
    Lanza ValidationError si no queda ninguna línea válida.
    """
    lines: Dict[UUID, SaleLine] = {}
    for item in items:
        if item.quantity is None or item.quantity <= 0 or item.unit_price is None:
            continue
        unit_price = money(item.unit_price)
        if unit_price < 0:
            raise ValidationError(f"Precio unitario inválido para el producto {item.product_id}")

        existing = lines.get(item.product_id)
        if existing is None:
            lines[item.product_id] = SaleLine(
                product_id=item.product_id, quantity=item.quantity, unit_price=unit_price
            )
        elif existing.unit_price != unit_price:
            raise ValidationError(f"El producto {item.product_id} aparece con precios distintos en la venta")
        else:
            existing.quantity += item.quantity

    if not lines:
        raise ValidationError("Agrega al menos un producto a la venta")
    return list(lines.values())


def compute_total(lines: Sequence[SaleLine]) -> Decimal:
    return money(sum((line.subtotal for line in lines), Decimal("0")))


class SaleTransactionService:
    """Orquestador de ventas: crear, editar y eliminar con ajuste de stock."""

    def __init__(
        self,
        store: TenantScopedStore,
        notifier: Notifier,
        ledger: Optional[StockLedger] = None,
        verify_stock_on_create: Optional[bool] = None,
        today: Callable[[], date] = date.today
    ):
        self.store = store
        self.notifier = notifier
        self.headers = SaleHeaderRecorder(store)
        self.line_items = LineItemRecorder(store)
        self.ledger = ledger or StockLedger(store)
        self.verify_stock_on_create = (
            settings.VERIFY_STOCK_ON_CREATE if verify_stock_on_create is None else verify_stock_on_create
        )
        self.today = today

    # ===== CREAR =====

    def checkout(self, items: Sequence[CartItemIn]) -> Dict[str, Any]:
        """
        Armar el carrito con los productos actuales y registrar la venta.

        El carrito rechaza cantidades mayores al stock del producto; las
        líneas toman el precio vigente del producto.
        """
        try:
            cart = Cart()
            for item in items:
                if item.quantity > 0:
                    cart.add(self.ledger.get_product(item.product_id), item.quantity)
        except HTTPException as exc:
            self._notify_failure("No se pudo procesar la venta", exc)
            raise
        return self.create_sale(cart.to_line_items())

    def create_sale(self, items: Sequence[SaleItemIn]) -> Dict[str, Any]:
        """Registrar una venta nueva con fecha de hoy y descontar su stock."""
        try:
            tenant_id = self.store.tenant_id
            lines = valid_lines(items)
            total = compute_total(lines)

            if self.verify_stock_on_create:
                for line in lines:
                    self._ensure_available(line)

            logger.debug(f"[tenant {tenant_id}] Creando venta: {len(lines)} líneas, total {total}")
            header = self.headers.insert_header(self.today(), total)

            try:
                self.line_items.insert_line_items(header["id"], lines)
            except HTTPException:
                logger.error(f"Venta {header['id']} creada sin líneas de detalle")
                raise

            for position, line in enumerate(lines, start=1):
                try:
                    self.ledger.adjust_stock(line.product_id, -line.quantity)
                except HTTPException:
                    logger.error(
                        f"Venta {header['id']}: stock descontado en {position - 1} de {len(lines)} líneas"
                    )
                    raise

        except HTTPException as exc:
            self._notify_failure("No se pudo procesar la venta", exc)
            raise

        logger.info(f"Venta {header['id']} registrada (total {total})")
        self.notifier.notify(AlertKind.SUCCESS, "Éxito", "Venta registrada correctamente")
        return header

    # ===== EDITAR =====

    def edit_sale(self, sale_id: UUID, items: Sequence[SaleItemIn], fecha: Optional[str] = None) -> Dict[str, Any]:
        """
        Reemplazar las líneas de una venta y reconciliar el stock.

        Si alguna línea nueva pide más de lo disponible, el stock restaurado
        se vuelve a descontar y se lanza InsufficientStock.
        """
        try:
            self.store.tenant_id
            lines = valid_lines(items)
            sale_date = parse_sale_date(fecha)
            total = compute_total(lines)

            header = self.headers.get_header(sale_id)
            if sale_date is None:
                sale_date = header["fecha"]

            original = self.line_items.list_line_items(sale_id)

            logger.debug(f"Venta {sale_id}: restaurando stock de {len(original)} líneas originales")
            for item in original:
                self.ledger.adjust_stock(item["producto_id"], item["cantidad"])

            logger.debug(f"Venta {sale_id}: verificando stock de {len(lines)} líneas nuevas")
            try:
                for line in lines:
                    self._ensure_available(line)
            except (InsufficientStock, NotFound):
                self._revert_restore(sale_id, original)
                raise

            self.headers.update_header(sale_id, sale_date, total)

            try:
                self.line_items.replace_line_items(sale_id, lines)
                for line in lines:
                    self.ledger.adjust_stock(line.product_id, -line.quantity)
            except HTTPException:
                logger.error(
                    f"Venta {sale_id}: fallo tras restaurar el stock original; "
                    f"el stock nuevo puede no haberse descontado"
                )
                raise

        except HTTPException as exc:
            self._notify_failure("No se pudo actualizar la venta", exc)
            raise

        logger.info(f"Venta {sale_id} actualizada (total {total})")
        self.notifier.notify(AlertKind.SUCCESS, "Éxito", "Venta actualizada correctamente")
        return {**header, "fecha": sale_date, "total": total}

    def _revert_restore(self, sale_id: UUID, original: Sequence[Dict[str, Any]]) -> None:
        logger.warning(f"Venta {sale_id}: revirtiendo restauración de stock de {len(original)} líneas")
        for item in reversed(original):
            self.ledger.adjust_stock(item["producto_id"], -item["cantidad"])

    # ===== ELIMINAR =====

    def delete_sale(self, sale_id: UUID) -> None:
        """Eliminar una venta devolviendo su stock."""
        try:
            self.store.tenant_id
            self.headers.get_header(sale_id)

            items = self.line_items.list_line_items(sale_id)
            for item in items:
                self.ledger.adjust_stock(item["producto_id"], item["cantidad"])

            try:
                self.line_items.delete_line_items(sale_id)
                self.headers.delete_header(sale_id)
            except HTTPException:
                logger.error(f"Venta {sale_id}: stock restaurado pero la venta no se eliminó por completo")
                raise

        except HTTPException as exc:
            self._notify_failure("No se pudo eliminar la venta", exc)
            raise

        logger.info(f"Venta {sale_id} eliminada")
        self.notifier.notify(AlertKind.SUCCESS, "Éxito", "Venta eliminada correctamente")

    # ===== AUXILIARES =====

    def _ensure_available(self, line: SaleLine) -> None:
        product = self.ledger.get_product(line.product_id)
        available = int(product["stock"])
        if available < line.quantity:
            raise InsufficientStock(
                product_name=product.get("nombre") or UNNAMED_PRODUCT,
                available=available,
                requested=line.quantity,
                product_id=line.product_id,
            )

    def _notify_failure(self, title: str, exc: HTTPException) -> None:
        if isinstance(exc, InsufficientStock):
            self.notifier.notify(AlertKind.WARNING, "Stock insuficiente", exc.detail)
        else:
            self.notifier.notify(AlertKind.ERROR, "Error", f"{title}: {exc.detail}")


class SaleQueryService:
    """Listado de ventas con detalle y nombres de producto."""

    def __init__(self, store: TenantScopedStore):
        self.store = store

    def _product_names(self) -> Dict[UUID, str]:
        return {row["id"]: row["nombre"] for row in self.store.select("products")}

    def _attach_detail(self, sales: List[Dict[str, Any]], line_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        names = self._product_names()
        by_sale: Dict[UUID, List[Dict[str, Any]]] = {}
        for item in line_items:
            by_sale.setdefault(item["sale_id"], []).append({
                "id": item["id"],
                "producto_id": item["producto_id"],
                "producto_nombre": names.get(item["producto_id"], UNNAMED_PRODUCT),
                "cantidad": item["cantidad"],
                "precio_unitario": money(item["precio_unitario"]),
                "subtotal": money(Decimal(item["precio_unitario"]) * item["cantidad"]),
            })
        return [{**sale, "detalle": by_sale.get(sale["id"], [])} for sale in sales]

    def get_sale(self, sale_id: UUID) -> Dict[str, Any]:
        sales = self.store.select(SALES_TABLE, {"id": sale_id})
        if not sales:
            raise NotFound("Venta no encontrada")
        items = self.store.select(LINE_ITEMS_TABLE, {"sale_id": sale_id})
        return self._attach_detail(sales, items)[0]

    def list_sales(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Ventas más recientes primero.

        search filtra por fecha con formato dd/mm/yyyy o por nombre de
        producto, sin distinguir mayúsculas.
        """
        sales = self.store.select(SALES_TABLE, order=["-created_at", "-fecha"])
        items = self.store.select(LINE_ITEMS_TABLE)
        result = self._attach_detail(sales, items)

        if search:
            needle = search.strip().lower()
            result = [
                sale for sale in result
                if needle in format_sale_date(sale["fecha"])
                or any(needle in line["producto_nombre"].lower() for line in sale["detalle"])
            ]
        return result

    def today_total(self, today: Optional[date] = None) -> Decimal:
        today = today or date.today()
        rows = self.store.select(SALES_TABLE, {"fecha": today})
        return money(sum((Decimal(row["total"]) for row in rows), Decimal("0")))


def format_sale_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")
