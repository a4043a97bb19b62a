# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Registra ventas finalizadas (checkout) y consulta el historial.
#
# REGLA: el total y el vuelto SIEMPRE se recalculan en el servidor a partir
# de los items. Si el cliente envía total/change y no coinciden (±0.01),
# la venta se rechaza.
# ==============================================================================

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app_pdv.errors import FieldErrors, NotFoundError
from app_pdv.models import CartItem, PaymentMethod, Sale
from app_pdv.models.money import ZERO, in_range, money_sum, quantize, within_tolerance
from app_pdv.performance_logger import profile_function
from app_pdv.repositories.interfaces import ISalesRepository
from app_pdv.services.user_service import UserService
from app_pdv.services.validation import (
    money_field,
    optional_str,
    parse_int,
    quantity_field,
    require_payload,
    required_int,
    required_str,
)

logger = logging.getLogger(__name__)


def calculate_total(items: Sequence[CartItem]) -> Decimal:
    """Suma de precio x cantidad, redondeada al final."""
    return money_sum(item.subtotal for item in items)


def calculate_change(amount_received: Decimal, total: Decimal) -> Decimal:
    """Vuelto = max(0, recibido - total)."""
    return quantize(max(ZERO, amount_received - total))


class SalesService:
    """
    Servicio para gestión de ventas.

    Responsabilidades:
    - Validar y registrar ventas (desde la API o desde el carrito)
    - Recalcular total y vuelto
    - Consultar ventas por ID o por rango de fechas
    """

    def __init__(self, sales_repo: ISalesRepository, user_service: UserService):
        """
        Args:
            sales_repo: Repositorio de ventas
            user_service: Para validar que el operador exista
        """
        self.sales_repo = sales_repo
        self.user_service = user_service

    # =========================================================================
    # CREACIÓN DE VENTAS
    # =========================================================================

    def record_sale(self, data: Dict[str, Any]) -> Sale:
        """
        Registra una venta a partir del payload de POST /api/sales.

        Args:
            data: {items, paymentMethod, operatorId, total?, amountReceived?, change?}

        Returns:
            Venta guardada (con id y createdAt)

        Raises:
            ValidationError: Datos inválidos o cifras que no cuadran
        """
        data = require_payload(data)
        errors = FieldErrors()

        items = self._parse_items(data.get('items'), errors)
        method = self._parse_method(data.get('paymentMethod'), errors)
        operator_id = required_int(data, 'operatorId', errors, 'El operador')
        total = money_field(data, 'total', errors, 'El total', required=False)
        amount_received = money_field(
            data, 'amountReceived', errors, 'El monto recibido', required=False
        )
        change = money_field(data, 'change', errors, 'El vuelto', required=False)
        errors.raise_if_any('Datos de venta inválidos')

        return self.create_sale(
            items,
            method,
            operator_id,
            amount_received=amount_received,
            total=total,
            change=change,
        )

    @profile_function(name="Registrar venta")
    def create_sale(
        self,
        items: Sequence[CartItem],
        method: PaymentMethod,
        operator_id: int,
        amount_received: Optional[Decimal] = None,
        total: Optional[Decimal] = None,
        change: Optional[Decimal] = None
    ) -> Sale:
        """
        Crea la venta ya parseada. Es la ÚNICA función que guarda ventas.

        Args:
            items: Líneas de la venta
            method: Método de pago
            operator_id: Usuario que cobra
            amount_received: Monto entregado (solo efectivo)
            total: Total informado por el cliente (se verifica)
            change: Vuelto informado por el cliente (se verifica)

        Returns:
            Venta guardada
        """
        errors = FieldErrors()
        if not items:
            errors.add('items', 'La venta debe tener al menos un item')
        if not self.user_service.operator_exists(operator_id):
            errors.add('operatorId', 'El operador no existe')
        errors.raise_if_any('Datos de venta inválidos')

        computed_total, computed_change = self._compute_figures(
            items, method, amount_received, total, change
        )

        sale = self.sales_repo.create(Sale(
            total=computed_total,
            payment_method=method,
            operator_id=operator_id,
            items=tuple(items),
            amount_received=amount_received if method.is_cash else None,
            change_given=computed_change,
        ))

        logger.info(
            'Venta #%s registrada: total=%s método=%s operador=%s items=%d',
            sale.id, sale.total, method.label, operator_id, len(sale.items)
        )
        return sale

    def _compute_figures(
        self,
        items: Sequence[CartItem],
        method: PaymentMethod,
        amount_received: Optional[Decimal],
        total: Optional[Decimal],
        change: Optional[Decimal]
    ) -> Tuple[Decimal, Optional[Decimal]]:
        """
        Recalcula total y vuelto y los compara con lo informado.

        Returns:
            Tupla (total, vuelto); vuelto es None si no es efectivo
        """
        errors = FieldErrors()
        computed_total = calculate_total(items)
        if not in_range(computed_total):
            errors.add('total', 'El total de la venta está fuera de rango')
            errors.raise_if_any('Las cifras de la venta no cuadran')

        if total is not None and not within_tolerance(total, computed_total):
            errors.add('total', f'El total no coincide con los items ({computed_total})')

        computed_change = None
        if method.is_cash:
            if amount_received is None:
                errors.add('amountReceived', 'El monto recibido es obligatorio en efectivo')
            elif amount_received < computed_total:
                errors.add('amountReceived', 'El monto recibido es menor que el total')
            else:
                computed_change = calculate_change(amount_received, computed_total)
                if change is not None and not within_tolerance(change, computed_change):
                    errors.add('change', f'El vuelto no coincide ({computed_change})')
        else:
            if amount_received is not None:
                errors.add('amountReceived', 'Solo se informa en pagos en efectivo')
            if change is not None:
                errors.add('change', 'Solo se informa en pagos en efectivo')

        errors.raise_if_any('Las cifras de la venta no cuadran')
        return computed_total, computed_change

    # =========================================================================
    # PARSEO
    # =========================================================================

    def _parse_method(self, raw: Any, errors: FieldErrors) -> Optional[PaymentMethod]:
        method = PaymentMethod.parse(raw)
        if method is None:
            errors.add('paymentMethod', 'Método de pago inválido (cash, credit, debit, pix)')
        return method

    def _parse_items(self, raw: Any, errors: FieldErrors) -> List[CartItem]:
        """
        Convierte la lista JSON de items en CartItem.
        Los errores se reportan como 'items[0].price', etc.
        """
        if not isinstance(raw, list) or not raw:
            errors.add('items', 'La venta debe tener al menos un item')
            return []

        items = []
        for index, entry in enumerate(raw):
            prefix = f'items[{index}]'
            if not isinstance(entry, dict):
                errors.add(prefix, 'Cada item debe ser un objeto')
                continue
            item_errors = FieldErrors()
            product_id = parse_int(entry.get('productId'))
            if product_id is None:
                item_errors.add('productId', 'El producto debe ser un número entero')
            name = required_str(entry, 'name', item_errors, 'El nombre')
            price = money_field(entry, 'price', item_errors, 'El precio')
            quantity = quantity_field(entry, 'quantity', item_errors)
            image_url = optional_str(entry, 'imageUrl', item_errors)
            if item_errors:
                errors.extend(item_errors, prefix=prefix)
                continue
            items.append(CartItem(
                product_id=product_id,
                name=name,
                price=price,
                quantity=quantity,
                image_url=image_url,
            ))
        return items

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_sale(self, sale_id: int) -> Sale:
        sale = self.sales_repo.get_by_id(sale_id)
        if sale is None:
            raise NotFoundError('Venta no encontrada')
        return sale

    def list_sales(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[Sale]:
        """
        Lista ventas; con fechas, solo las de [start, end] (inclusive).
        """
        if start is None and end is None:
            return self.sales_repo.get_all()
        return self.sales_repo.get_by_date_range(start, end)
