"""
Servicio de productos de la papelería.

El stock se edita aquí solo como dato del producto; los movimientos por
ventas pasan por StockLedger.
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from fastapi import HTTPException
from typing import Any, Dict, Optional
from uuid import UUID
import logging

from app.common.exceptions import Conflict, DataStoreError, NotFound
from app.common.validators import money, validate_required_name
from app.modules.categories.models import Category
from app.modules.products.models import Product
from app.modules.products.schemas import ProductCreate, ProductUpdate, ProductOut
from app.modules.sales.models import SaleLineItem

logger = logging.getLogger(__name__)


class ProductService:
    """Servicio para gestión de productos"""

    def __init__(self, db: Session):
        self.db = db

    def _validate_category(self, categoria_id: Optional[UUID], tenant_id: UUID) -> None:
        if categoria_id is None:
            return
        category = self.db.query(Category).filter(
            Category.id == categoria_id,
            Category.tenant_id == tenant_id
        ).first()
        if not category:
            raise NotFound("La categoría especificada no existe o no pertenece a esta papelería")

    def _to_out(self, product: Product) -> ProductOut:
        out = ProductOut.model_validate(product)
        out.categoria_nombre = product.categoria.nombre if product.categoria else None
        return out

    def create_product(self, data: ProductCreate, tenant_id: UUID) -> ProductOut:
        """Crear producto"""
        nombre = validate_required_name(data.nombre, "El nombre del producto es obligatorio")
        self._validate_category(data.categoria_id, tenant_id)
        try:
            product = Product(
                tenant_id=tenant_id,
                nombre=nombre,
                descripcion=data.descripcion,
                precio=money(data.precio),
                stock=data.stock,
                categoria_id=data.categoria_id
            )
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
            return self._to_out(product)

        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataStoreError(f"Error creando producto: {str(e)}")

    def get_product(self, product_id: UUID, tenant_id: UUID) -> Product:
        product = self.db.query(Product).filter(
            Product.id == product_id,
            Product.tenant_id == tenant_id
        ).first()
        if not product:
            raise NotFound("Producto no encontrado")
        return product

    def get_product_out(self, product_id: UUID, tenant_id: UUID) -> ProductOut:
        return self._to_out(self.get_product(product_id, tenant_id))

    def list_products(
        self,
        tenant_id: UUID,
        search: Optional[str] = None,
        in_stock_only: bool = False,
        categoria_id: Optional[UUID] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Dict[str, Any]:
        """
        Listar productos ordenados por nombre.

        in_stock_only deja solo los productos con stock > 0, que son los
        que se pueden agregar a una venta.
        """
        query = self.db.query(Product).filter(Product.tenant_id == tenant_id)

        if search:
            query = query.filter(Product.nombre.ilike(f"%{search.strip()}%"))
        if in_stock_only:
            query = query.filter(Product.stock > 0)
        if categoria_id:
            query = query.filter(Product.categoria_id == categoria_id)

        total = query.count()
        products = query.order_by(Product.nombre).offset(offset).limit(limit).all()

        return {
            "products": [self._to_out(p) for p in products],
            "total": total,
            "limit": limit,
            "offset": offset
        }

    def update_product(self, product_id: UUID, data: ProductUpdate, tenant_id: UUID) -> ProductOut:
        """Actualizar producto"""
        try:
            product = self.get_product(product_id, tenant_id)
            update_dict = data.model_dump(exclude_unset=True)

            if "nombre" in update_dict:
                update_dict["nombre"] = validate_required_name(
                    update_dict["nombre"], "El nombre del producto es obligatorio"
                )
            if update_dict.get("precio") is not None:
                update_dict["precio"] = money(update_dict["precio"])
            if "categoria_id" in update_dict:
                self._validate_category(update_dict["categoria_id"], tenant_id)

            for field, value in update_dict.items():
                setattr(product, field, value)

            self.db.commit()
            self.db.refresh(product)
            return self._to_out(product)

        except HTTPException:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataStoreError(f"Error actualizando producto: {str(e)}")

    def delete_product(self, product_id: UUID, tenant_id: UUID) -> Dict[str, str]:
        """Eliminar producto; no se permite si aparece en alguna venta"""
        try:
            product = self.get_product(product_id, tenant_id)

            sold = self.db.query(SaleLineItem).filter(
                SaleLineItem.producto_id == product_id,
                SaleLineItem.tenant_id == tenant_id
            ).count()
            if sold:
                raise Conflict(
                    f"No se puede eliminar el producto '{product.nombre}': aparece en {sold} línea(s) de venta"
                )

            self.db.delete(product)
            self.db.commit()
            logger.info(f"Producto {product_id} eliminado (tenant {tenant_id})")
            return {"message": "Producto eliminado exitosamente"}

        except HTTPException:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataStoreError(f"Error eliminando producto: {str(e)}")
