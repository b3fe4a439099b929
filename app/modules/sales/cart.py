"""
Carrito de venta.

Acumula productos antes de registrar la venta. Nunca deja una cantidad
mayor que el stock mostrado del producto; el precio de cada línea es el
precio del producto al momento de agregarlo.
"""
from decimal import Decimal
from typing import Any, Dict, List, Mapping
from uuid import UUID

from app.common.exceptions import InsufficientStock, NotFound
from app.common.validators import money
from app.modules.sales.schemas import SaleItemIn


class Cart:

    def __init__(self):
        self._items: Dict[UUID, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: UUID) -> bool:
        return product_id in self._items

    def quantity_of(self, product_id: UUID) -> int:
        item = self._items.get(product_id)
        return item["cantidad"] if item else 0

    def add(self, product: Mapping[str, Any], quantity: int = 1) -> int:
        """Agregar unidades de un producto; devuelve la cantidad resultante."""
        product_id = product["id"]
        current = self.quantity_of(product_id)
        new_quantity = current + quantity
        stock = int(product["stock"])

        if new_quantity > stock:
            raise InsufficientStock(
                product_name=product["nombre"],
                available=stock,
                requested=new_quantity,
                product_id=product_id,
            )

        if product_id in self._items:
            self._items[product_id]["cantidad"] = new_quantity
        else:
            self._items[product_id] = {
                "producto_id": product_id,
                "nombre": product["nombre"],
                "precio": money(product["precio"]),
                "stock": stock,
                "cantidad": new_quantity,
            }
        return new_quantity

    def set_quantity(self, product_id: UUID, quantity: int) -> None:
        """Cambiar la cantidad; cero o menos quita el producto del carrito."""
        if product_id not in self._items:
            raise NotFound("El producto no está en el carrito")

        if quantity <= 0:
            self.remove(product_id)
            return

        item = self._items[product_id]
        if quantity > item["stock"]:
            raise InsufficientStock(
                product_name=item["nombre"],
                available=item["stock"],
                requested=quantity,
                product_id=product_id,
            )
        item["cantidad"] = quantity

    def remove(self, product_id: UUID) -> None:
        self._items.pop(product_id, None)

    def total(self) -> Decimal:
        return money(sum((item["precio"] * item["cantidad"] for item in self._items.values()), Decimal("0")))

    def to_line_items(self) -> List[SaleItemIn]:
        return [
            SaleItemIn(product_id=item["producto_id"], quantity=item["cantidad"], unit_price=item["precio"])
            for item in self._items.values()
        ]
