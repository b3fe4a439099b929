from sqlalchemy import Column, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from uuid import uuid4

from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin

class Category(Base, TenantMixin, TimestampMixin):
    __tablename__ = "categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    nombre = Column(String(100), nullable=False)
    descripcion = Column(String(255), nullable=True)

    # Relationships
    productos = relationship("Product", back_populates="categoria")

    __table_args__ = (
        UniqueConstraint("tenant_id", "nombre", name="uq_category_tenant_nombre"),
    )
