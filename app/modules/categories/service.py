from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from fastapi import HTTPException
from uuid import UUID
from typing import Dict, Any
import logging

from app.common.exceptions import Conflict, DataStoreError, NotFound
from app.common.validators import validate_required_name
from app.modules.categories.models import Category
from app.modules.categories.schemas import CategoryCreate, CategoryUpdate
from app.modules.products.models import Product

logger = logging.getLogger(__name__)


class CategoryService:
    """Servicio para gestión de categorías"""

    def __init__(self, db: Session):
        self.db = db

    def create_category(self, data: CategoryCreate, tenant_id: UUID) -> Category:
        """
        Crear nueva categoría

        Args:
            data: Datos de la categoría
            tenant_id: ID de la papelería

        Returns:
            Category: Categoría creada
        """
        nombre = validate_required_name(data.nombre, "El nombre de la categoría es obligatorio")
        try:
            # Verificar unicidad por tenant
            existing = self.db.query(Category).filter(
                Category.nombre == nombre,
                Category.tenant_id == tenant_id
            ).first()

            if existing:
                raise Conflict(f"Ya existe una categoría con el nombre '{nombre}'")

            category = Category(
                nombre=nombre,
                descripcion=data.descripcion,
                tenant_id=tenant_id
            )

            self.db.add(category)
            self.db.commit()
            self.db.refresh(category)
            return category

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Ya existe una categoría con ese nombre")
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataStoreError(f"Error creando categoría: {str(e)}")

    def get_all_categories(self, tenant_id: UUID, limit: int = 100, offset: int = 0) -> Dict[str, Any]:
        """Listar categorías con paginación"""
        query = self.db.query(Category).filter(Category.tenant_id == tenant_id).order_by(Category.nombre)
        total = query.count()
        categories = query.offset(offset).limit(limit).all()

        return {
            "categories": categories,
            "total": total,
            "limit": limit,
            "offset": offset
        }

    def get_category_by_id(self, category_id: UUID, tenant_id: UUID) -> Category:
        """Obtener categoría por ID"""
        category = self.db.query(Category).filter(
            Category.id == category_id,
            Category.tenant_id == tenant_id
        ).first()

        if not category:
            raise NotFound("Categoría no encontrada")
        return category

    def update_category(self, category_id: UUID, data: CategoryUpdate, tenant_id: UUID) -> Category:
        """Actualizar categoría"""
        try:
            category = self.get_category_by_id(category_id, tenant_id)
            update_dict = data.model_dump(exclude_unset=True)

            if "nombre" in update_dict:
                update_dict["nombre"] = validate_required_name(
                    update_dict["nombre"], "El nombre de la categoría es obligatorio"
                )
                # Verificar unicidad del nombre si se actualiza
                if update_dict["nombre"] != category.nombre:
                    existing = self.db.query(Category).filter(
                        Category.nombre == update_dict["nombre"],
                        Category.tenant_id == tenant_id,
                        Category.id != category_id
                    ).first()

                    if existing:
                        raise Conflict(f"Ya existe otra categoría con el nombre '{update_dict['nombre']}'")

            for field, value in update_dict.items():
                setattr(category, field, value)

            self.db.commit()
            self.db.refresh(category)
            return category

        except HTTPException:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataStoreError(f"Error actualizando categoría: {str(e)}")

    def delete_category(self, category_id: UUID, tenant_id: UUID) -> Dict[str, str]:
        """Eliminar categoría; no se permite mientras tenga productos"""
        try:
            category = self.get_category_by_id(category_id, tenant_id)

            products_count = self.db.query(Product).filter(
                Product.categoria_id == category_id,
                Product.tenant_id == tenant_id
            ).count()

            if products_count:
                raise Conflict(
                    f"No se puede eliminar la categoría '{category.nombre}': "
                    f"tiene {products_count} producto(s) asociado(s)"
                )

            self.db.delete(category)
            self.db.commit()
            logger.info(f"Categoría {category_id} eliminada (tenant {tenant_id})")
            return {"message": "Categoría eliminada exitosamente"}

        except HTTPException:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataStoreError(f"Error eliminando categoría: {str(e)}")
