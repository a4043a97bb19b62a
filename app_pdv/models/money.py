# ==============================================================================
# DINERO Y FECHAS - Conversión y redondeo de montos
# ==============================================================================
# Todo monto del sistema es Decimal con 2 decimales. Nunca float.
# Los montos se redondean SOLO al guardar una cifra (total, vuelto, saldo),
# las sumas intermedias se acumulan sin redondear.
# ==============================================================================

import math
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Optional


CENTS = Decimal('0.01')
ZERO = Decimal('0.00')

# Tolerancia de redondeo: diferencias de hasta 1 centavo se consideran iguales
TOLERANCE = Decimal('0.01')

# Montos y cantidades aceptados en la entrada: |valor| < 1e12
MAX_MAGNITUDE = Decimal('1e12')


def quantize(value: Decimal) -> Decimal:
    """Redondea a 2 decimales (ROUND_HALF_UP)."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convierte un valor de entrada (número JSON o string numérico) a Decimal.

    Args:
        value: Valor recibido en la petición

    Returns:
        Decimal finito, o None si el valor no es un número válido
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float, Decimal)):
        # str() evita arrastrar la representación binaria del float
        raw = str(value)
    elif isinstance(value, str):
        raw = value.strip().replace(',', '.')
        if not raw:
            return None
    else:
        return None
    try:
        result = Decimal(raw)
    except InvalidOperation:
        return None
    if not result.is_finite():
        return None
    return result


def in_range(value: Decimal) -> bool:
    """True si el valor entra en MAX_MAGNITUDE (se puede redondear sin desbordar)."""
    return abs(value) < MAX_MAGNITUDE


def to_money(value: Any) -> Optional[Decimal]:
    """Como to_decimal, pero redondeado a centavos. None si está fuera de rango."""
    result = to_decimal(value)
    if result is None or not in_range(result):
        return None
    return quantize(result)


def money_sum(values: Iterable[Decimal]) -> Decimal:
    """Suma montos y redondea el resultado (0.00 si no hay montos)."""
    return quantize(sum(values, ZERO))


def within_tolerance(a: Decimal, b: Decimal) -> bool:
    """True si |a - b| <= 1 centavo."""
    return abs(a - b) <= TOLERANCE


def format_money(value: Optional[Decimal]) -> Optional[str]:
    """Serializa un monto como string de 2 decimales ("9.00")."""
    if value is None:
        return None
    return str(quantize(value))


def format_quantity(value: Decimal):
    """Cantidades como número JSON: entero si no tiene fracción."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# ==============================================================================
# FECHAS
# ==============================================================================

def utc_now() -> datetime:
    """Timestamp del servidor (UTC, con zona)."""
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def parse_timestamp(raw: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Parsea una fecha ISO-8601 (con o sin hora).

    Una fecha sin hora ("2024-01-31") cubre el día completo: se interpreta
    como 00:00 o, con end_of_day=True, como el último instante del día.
    Fechas sin zona horaria se asumen UTC.

    Args:
        raw: Texto recibido en la query string
        end_of_day: Usar el final del día para fechas sin hora

    Returns:
        datetime con zona, o None si raw está vacío

    Raises:
        ValueError: Si el texto no es una fecha válida
    """
    if raw is None or not raw.strip():
        return None
    text = raw.strip()
    if len(text) == 10:
        day = date.fromisoformat(text)
        parsed = datetime.combine(day, time.max if end_of_day else time.min)
    else:
        parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
