# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Los montos son Decimal (ver money.py), nunca float.
# ==============================================================================

from .entities import (
    # Usuarios
    User,

    # Catálogo
    Category,
    Product,

    # Carrito y ventas
    CartItem,
    Sale,
    PaymentMethod,
    PAYMENT_LABELS,

    # Caja
    CashTransaction,
    CashReason,
    DailyRegister,
    RegisterSummary,
)

__all__ = [
    'User',
    'Category',
    'Product',
    'CartItem',
    'Sale',
    'PaymentMethod',
    'PAYMENT_LABELS',
    'CashTransaction',
    'CashReason',
    'DailyRegister',
    'RegisterSummary',
]
