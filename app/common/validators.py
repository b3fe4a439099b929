"""
Validadores y normalizadores compartidos
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional

from app.common.exceptions import ValidationError

CENT = Decimal("0.01")


def money(value) -> Decimal:
    """
    Normaliza un importe a la unidad mínima de la moneda (dos decimales).

    Acepta Decimal, int o str. Los float se convierten vía str para no
    arrastrar errores de representación binaria.
    """
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Importe inválido: {value!r}")


def parse_sale_date(value: Optional[str]) -> Optional[date]:
    """
    Valida el campo fecha de una venta.

    - None -> None (el campo no se envió)
    - "" o solo espacios -> ValidationError
    - "YYYY-MM-DD" -> date
    """
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError("La fecha es obligatoria")
    try:
        return date.fromisoformat(cleaned)
    except ValueError:
        raise ValidationError(f"Fecha inválida '{value}'. Formato esperado: YYYY-MM-DD")


def validate_required_name(name: Optional[str], message: str) -> str:
    """El nombre no puede estar vacío; se devuelve sin espacios extremos."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(message)
    return cleaned
