from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import datetime, timezone
from uuid import uuid4

from app.database.database import Base
from app.common.mixins import TenantMixin


class Sale(Base, TenantMixin):
    """Cabecera de venta: fecha y total."""
    __tablename__ = "sales"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    fecha = Column(Date, nullable=False, index=True)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False
    )

    # Relationships
    detalle = relationship("SaleLineItem", back_populates="venta", cascade="all, delete-orphan", passive_deletes=True)


class SaleLineItem(Base, TenantMixin):
    """Línea de venta; precio_unitario es una copia del precio al momento de vender."""
    __tablename__ = "sale_line_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    sale_id = Column(Uuid(as_uuid=True), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    producto_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)
    cantidad = Column(Integer, nullable=False)
    precio_unitario = Column(Numeric(10, 2), nullable=False)

    # Relationships
    venta = relationship("Sale", back_populates="detalle")
    producto = relationship("Product")

    __table_args__ = (
        CheckConstraint("cantidad > 0", name="ck_sale_line_cantidad_positive"),
    )
