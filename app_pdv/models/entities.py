# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio del punto de venta.
# Son inmutables (frozen): el historial es de solo-agregar, nada se edita.
# to_dict() produce el formato JSON de la API (camelCase, montos string).
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any
from enum import Enum
from datetime import datetime
from decimal import Decimal

from app_pdv.models.money import (
    format_money,
    format_quantity,
    format_timestamp,
)


# ==============================================================================
# ENUMERACIONES - Métodos de pago y motivos de caja
# ==============================================================================

class PaymentMethod(str, Enum):
    """Métodos de pago aceptados en el checkout."""
    CASH = "cash"
    CREDIT = "credit"
    DEBIT = "debit"
    PIX = "pix"

    @property
    def label(self) -> str:
        """Etiqueta que se guarda en la venta."""
        return PAYMENT_LABELS[self]

    @property
    def is_cash(self) -> bool:
        return self is PaymentMethod.CASH

    @property
    def is_card(self) -> bool:
        """Crédito y débito se agrupan como 'tarjeta' en el resumen de caja."""
        return self in (PaymentMethod.CREDIT, PaymentMethod.DEBIT)

    @property
    def summary_group(self) -> str:
        """Grupo del resumen de caja: 'cash', 'card' o 'pix'."""
        if self.is_card:
            return 'card'
        return self.value

    @classmethod
    def parse(cls, value: Any) -> Optional['PaymentMethod']:
        """
        Acepta el id ("cash") o la etiqueta ("Dinheiro").

        Returns:
            PaymentMethod o None si no se reconoce
        """
        if not isinstance(value, str):
            return None
        text = value.strip()
        for method in cls:
            if text.lower() == method.value or text == method.label:
                return method
        return None


PAYMENT_LABELS = {
    PaymentMethod.CASH: "Dinheiro",
    PaymentMethod.CREDIT: "Cartão de Crédito",
    PaymentMethod.DEBIT: "Cartão de Débito",
    PaymentMethod.PIX: "PIX",
}


class CashReason(str, Enum):
    """Motivos de un movimiento manual de caja."""
    OPENING = "opening"        # Abertura de Caixa
    ADJUSTMENT = "adjustment"  # Ajuste de Saldo
    OTHER = "other"            # Outro


# ==============================================================================
# USUARIOS
# ==============================================================================

@dataclass(frozen=True)
class User:
    """
    Operador del sistema.

    Attributes:
        id: Identificador asignado por el store
        username: Nombre de acceso (único)
        password_hash: Hash werkzeug (nunca texto plano)
        name: Nombre para mostrar
        is_admin: Permisos de administrador
    """
    username: str
    password_hash: str
    name: str
    is_admin: bool = False
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Formato público: sin el hash de la contraseña."""
        return {
            'id': self.id,
            'username': self.username,
            'name': self.name,
            'isAdmin': self.is_admin,
        }


# ==============================================================================
# CATÁLOGO
# ==============================================================================

@dataclass(frozen=True)
class Category:
    name: str
    icon: str
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'icon': self.icon}


@dataclass(frozen=True)
class Product:
    """
    Producto del catálogo.

    Attributes:
        name: Nombre del producto
        price: Precio unitario (Decimal, 2 decimales)
        category_id: Categoría a la que pertenece
        description: Descripción opcional
        image_url: URL de imagen opcional
        in_stock: Disponible para la venta
    """
    name: str
    price: Decimal
    category_id: int
    description: Optional[str] = None
    image_url: Optional[str] = None
    in_stock: bool = True
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': format_money(self.price),
            'imageUrl': self.image_url,
            'categoryId': self.category_id,
            'inStock': self.in_stock,
        }


# ==============================================================================
# CARRITO Y VENTAS
# ==============================================================================

@dataclass(frozen=True)
class CartItem:
    """
    Línea de carrito o de venta.
    Guarda una copia del precio y nombre: los recibos históricos no cambian
    aunque el producto se modifique después.
    """
    product_id: int
    name: str
    price: Decimal
    quantity: Decimal
    image_url: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        """Precio x cantidad, sin redondear."""
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'productId': self.product_id,
            'name': self.name,
            'price': format_money(self.price),
            'quantity': format_quantity(self.quantity),
        }
        if self.image_url is not None:
            d['imageUrl'] = self.image_url
        return d


@dataclass(frozen=True)
class Sale:
    """
    Venta finalizada.

    Attributes:
        total: Total cobrado
        payment_method: Método de pago
        operator_id: Usuario que registró la venta
        items: Copia de las líneas del carrito
        amount_received: Monto entregado por el cliente (solo efectivo)
        change_given: Vuelto entregado (solo efectivo)
        created_at: Timestamp del servidor
    """
    total: Decimal
    payment_method: PaymentMethod
    operator_id: int
    items: Tuple[CartItem, ...] = field(default_factory=tuple)
    amount_received: Optional[Decimal] = None
    change_given: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'total': format_money(self.total),
            'paymentMethod': self.payment_method.label,
            'amountReceived': format_money(self.amount_received),
            'change': format_money(self.change_given),
            'operatorId': self.operator_id,
            'createdAt': format_timestamp(self.created_at),
            'items': [item.to_dict() for item in self.items],
        }


# ==============================================================================
# CAJA
# ==============================================================================

@dataclass(frozen=True)
class CashTransaction:
    """Movimiento manual de caja. Monto positivo = entra dinero."""
    amount: Decimal
    reason: CashReason
    operator_id: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'amount': format_money(self.amount),
            'reason': self.reason.value,
            'notes': self.notes,
            'operatorId': self.operator_id,
            'createdAt': format_timestamp(self.created_at),
        }


@dataclass(frozen=True)
class RegisterSummary:
    """
    Foto del estado de la caja, recalculada en cada consulta.

    Attributes:
        system_balance: Efectivo esperado en caja
        cash_sales: Total de ventas en efectivo
        card_sales: Total de ventas con tarjeta (crédito + débito)
        pix_sales: Total de ventas PIX
        sales_count: Cantidad de ventas (todos los métodos)
    """
    system_balance: Decimal
    cash_sales: Decimal
    card_sales: Decimal
    pix_sales: Decimal
    sales_count: int

    @property
    def total_sales(self) -> Decimal:
        return self.cash_sales + self.card_sales + self.pix_sales

    def to_dict(self) -> Dict[str, Any]:
        return {
            'systemBalance': format_money(self.system_balance),
            'cashSales': format_money(self.cash_sales),
            'cardSales': format_money(self.card_sales),
            'pixSales': format_money(self.pix_sales),
            'salesCount': self.sales_count,
            'totalSales': format_money(self.total_sales),
        }


@dataclass(frozen=True)
class DailyRegister:
    """
    Cierre de caja diario.
    difference solo existe si el conteo manual difiere del sistema en más
    de 1 centavo, y en ese caso difference_reason es obligatorio.
    """
    opening_balance: Decimal
    closing_balance: Decimal
    system_balance: Decimal
    cash_sales: Decimal
    card_sales: Decimal
    pix_sales: Decimal
    operator_id: int
    difference: Optional[Decimal] = None
    difference_reason: Optional[str] = None
    notes: Optional[str] = None
    closed_at: Optional[datetime] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'openingBalance': format_money(self.opening_balance),
            'closingBalance': format_money(self.closing_balance),
            'systemBalance': format_money(self.system_balance),
            'cashSales': format_money(self.cash_sales),
            'cardSales': format_money(self.card_sales),
            'pixSales': format_money(self.pix_sales),
            'difference': format_money(self.difference),
            'differenceReason': self.difference_reason,
            'notes': self.notes,
            'operatorId': self.operator_id,
            'closedAt': format_timestamp(self.closed_at),
        }
