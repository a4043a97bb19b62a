# ==============================================================================
# VALIDACIÓN DE ENTRADAS
# ==============================================================================
# Lectura de campos de un payload JSON (dict) con errores por campo.
# Cada función devuelve el valor convertido, o registra el error en
# FieldErrors y devuelve None.
# ==============================================================================

import re
from decimal import Decimal
from typing import Any, Dict, Optional

from app_pdv.errors import FieldErrors, ValidationError
from app_pdv.models.money import in_range, quantize, to_decimal

# Solo dígitos ASCII, con signo opcional
_INT_RE = re.compile(r'^-?[0-9]+$')


def require_payload(data: Any) -> Dict[str, Any]:
    """El cuerpo de la petición debe ser un objeto JSON."""
    if not isinstance(data, dict):
        raise ValidationError('El cuerpo debe ser un objeto JSON')
    return data


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def required_str(data: Dict[str, Any], key: str, errors: FieldErrors, label: str) -> Optional[str]:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        errors.add(key, f'{label} es obligatorio')
        return None
    return value.strip()


def optional_str(data: Dict[str, Any], key: str, errors: FieldErrors) -> Optional[str]:
    value = data.get(key)
    if is_blank(value):
        return None
    if not isinstance(value, str):
        errors.add(key, 'Debe ser texto')
        return None
    return value.strip()


def parse_int(value: Any) -> Optional[int]:
    """Entero JSON o string de dígitos; bool no es entero."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.match(value.strip()):
        try:
            return int(value.strip())
        except ValueError:
            # Más dígitos de los que int() acepta desde texto
            return None
    return None


def required_int(data: Dict[str, Any], key: str, errors: FieldErrors, label: str) -> Optional[int]:
    value = parse_int(data.get(key))
    if value is None:
        errors.add(key, f'{label} debe ser un número entero')
    return value


def money_field(
    data: Dict[str, Any],
    key: str,
    errors: FieldErrors,
    label: str,
    required: bool = True,
    allow_negative: bool = False
) -> Optional[Decimal]:
    """
    Lee un monto (2 decimales).

    Args:
        data: Payload
        key: Campo a leer
        errors: Acumulador de errores
        label: Nombre legible del campo para el mensaje
        required: Si False, un valor ausente/nulo devuelve None sin error
        allow_negative: Aceptar montos negativos

    Returns:
        Decimal redondeado o None
    """
    raw = data.get(key)
    if raw is None:
        if required:
            errors.add(key, f'{label} es obligatorio')
        return None
    value = to_decimal(raw)
    if value is None:
        errors.add(key, f'{label} debe ser un monto válido')
        return None
    if not in_range(value):
        errors.add(key, f'{label} está fuera de rango')
        return None
    value = quantize(value)
    if value < 0 and not allow_negative:
        errors.add(key, f'{label} no puede ser negativo')
        return None
    return value


def quantity_field(data: Dict[str, Any], key: str, errors: FieldErrors) -> Optional[Decimal]:
    """Cantidad > 0; se admiten fracciones (productos por peso)."""
    value = to_decimal(data.get(key))
    if value is None or value <= 0:
        errors.add(key, 'La cantidad debe ser mayor a 0')
        return None
    if not in_range(value):
        errors.add(key, 'La cantidad está fuera de rango')
        return None
    return value
