from app.database.database import Base
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from uuid import uuid4
from app.common.mixins import TenantMixin, TimestampMixin

class Product(Base, TenantMixin, TimestampMixin):
    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    nombre = Column(String(100), nullable=False)
    descripcion = Column(String(255), nullable=True)
    precio = Column(Numeric(10, 2), nullable=False, default=0)  # Precio de venta actual
    # Puede quedar negativo (ver VERIFY_STOCK_ON_CREATE)
    stock = Column(Integer, nullable=False, default=0)

    categoria_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=True)

    # Relationships
    categoria = relationship("Category", back_populates="productos", lazy="joined")

    __table_args__ = (
        CheckConstraint("precio >= 0", name="ck_product_precio_positive"),
    )
