"""
Errores de dominio del protocolo de ventas.

Todos heredan de HTTPException para que los routers los devuelvan tal cual,
igual que el resto de servicios del proyecto.
"""
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Error base con código HTTP fijo por tipo."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(status_code=type(self).status_code, detail=detail)


class ValidationError(DomainError):
    """Datos inválidos; se rechazan antes de cualquier escritura."""

    status_code = status.HTTP_400_BAD_REQUEST


class NoActiveTenant(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str = "No hay tenant activo"):
        super().__init__(detail)


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class InsufficientStock(DomainError):
    """Stock disponible menor que la cantidad solicitada."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        product_name: str,
        available: int,
        requested: int,
        product_id: Optional[UUID] = None,
    ):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Stock insuficiente para '{product_name}'. "
            f"Disponible: {available}, Solicitado: {requested}"
        )


class StockConflict(DomainError):
    """La escritura condicional de stock agotó sus reintentos."""

    status_code = status.HTTP_409_CONFLICT


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT


class DataStoreError(DomainError):
    """Fallo del almacén de datos subyacente."""

    status_code = status.HTTP_502_BAD_GATEWAY
