# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Centraliza la lógica del carrito de compras y del checkout.
# El carrito se almacena en la sesión de Flask (uno por navegador) y solo
# existe mientras dura la compra: nunca se guarda en el store.
# ==============================================================================

from decimal import Decimal
from typing import Any, Dict, List, Optional

from flask import session

from app_pdv.errors import FieldErrors, NotFoundError, ValidationError
from app_pdv.models import CartItem, PaymentMethod, Sale
from app_pdv.models.money import format_money, format_quantity, in_range, to_decimal
from app_pdv.services.catalog_service import CatalogService
from app_pdv.services.sales_service import SalesService, calculate_total
from app_pdv.services.validation import (
    money_field,
    require_payload,
    required_int,
)

SESSION_KEY = 'carrito'


class CartService:
    """
    Servicio para gestión del carrito de compras.

    Responsabilidades:
    - Agregar/quitar items y cambiar cantidades
    - Copiar nombre, precio e imagen del producto al agregarlo
    - Calcular cantidad total y monto total
    - Finalizar la compra a través de SalesService

    El carrito se almacena en session['carrito'] como lista de dicts
    (montos y cantidades como string para que la sesión sea JSON).
    """

    def __init__(self, catalog_service: CatalogService, sales_service: SalesService):
        self.catalog_service = catalog_service
        self.sales_service = sales_service

    # =========================================================================
    # SESIÓN
    # =========================================================================

    def _get_items(self) -> List[CartItem]:
        """Lee el carrito de la sesión."""
        items = []
        for raw in session.get(SESSION_KEY, []):
            items.append(CartItem(
                product_id=raw['productId'],
                name=raw['name'],
                price=Decimal(raw['price']),
                quantity=Decimal(raw['quantity']),
                image_url=raw.get('imageUrl'),
            ))
        return items

    def _save_items(self, items: List[CartItem]) -> None:
        session[SESSION_KEY] = [
            {
                'productId': item.product_id,
                'name': item.name,
                'price': str(item.price),
                'quantity': str(item.quantity),
                'imageUrl': item.image_url,
            }
            for item in items
        ]
        session.modified = True

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_cart(self) -> Dict[str, Any]:
        """
        Obtiene el carrito con totales calculados.

        Returns:
            Dict con items, count (suma de cantidades) y total
        """
        items = self._get_items()
        count = sum((item.quantity for item in items), Decimal('0'))
        return {
            'items': [item.to_dict() for item in items],
            'count': format_quantity(count),
            'total': format_money(calculate_total(items)),
        }

    # =========================================================================
    # MODIFICACIÓN
    # =========================================================================

    def add_item(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Agrega un producto al carrito (suma cantidades si ya estaba).

        Args:
            data: {productId, quantity=1}

        Raises:
            ValidationError: Cantidad inválida o producto sin stock
            NotFoundError: Producto inexistente
        """
        data = require_payload(data)
        errors = FieldErrors()
        product_id = required_int(data, 'productId', errors, 'El producto')
        quantity = self._parse_quantity(data.get('quantity', 1), errors)
        errors.raise_if_any('Datos de carrito inválidos')

        product = self.catalog_service.get_product(product_id)
        if not product.in_stock:
            raise ValidationError(
                'Producto sin stock',
                {'productId': f'{product.name} no está disponible'}
            )

        items = self._get_items()
        for index, item in enumerate(items):
            if item.product_id == product_id:
                items[index] = CartItem(
                    product_id=item.product_id,
                    name=item.name,
                    price=item.price,
                    quantity=self._check_range(item.quantity + quantity),
                    image_url=item.image_url,
                )
                break
        else:
            items.append(CartItem(
                product_id=product.id,
                name=product.name,
                price=product.price,
                quantity=quantity,
                image_url=product.image_url,
            ))

        self._save_items(items)
        return self.get_cart()

    def update_quantity(self, product_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Cambia la cantidad de una línea. Cantidad <= 0 la elimina.

        Raises:
            NotFoundError: Si el producto no está en el carrito
        """
        data = require_payload(data)
        quantity = to_decimal(data.get('quantity'))
        if quantity is None:
            raise ValidationError(
                'Datos de carrito inválidos',
                {'quantity': 'La cantidad debe ser un número'}
            )
        if quantity <= 0:
            return self.remove_item(product_id)
        self._check_range(quantity)

        items = self._get_items()
        for index, item in enumerate(items):
            if item.product_id == product_id:
                items[index] = CartItem(
                    product_id=item.product_id,
                    name=item.name,
                    price=item.price,
                    quantity=quantity,
                    image_url=item.image_url,
                )
                self._save_items(items)
                return self.get_cart()
        raise NotFoundError('El producto no está en el carrito')

    def remove_item(self, product_id: int) -> Dict[str, Any]:
        items = self._get_items()
        remaining = [item for item in items if item.product_id != product_id]
        if len(remaining) == len(items):
            raise NotFoundError('El producto no está en el carrito')
        self._save_items(remaining)
        return self.get_cart()

    def clear(self) -> Dict[str, Any]:
        self._save_items([])
        return self.get_cart()

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    def checkout(self, data: Dict[str, Any]) -> Sale:
        """
        Finaliza la compra: registra la venta y vacía el carrito.
        El carrito solo se vacía si la venta se registró.

        Args:
            data: {paymentMethod, operatorId, amountReceived?}

        Returns:
            Venta registrada
        """
        data = require_payload(data)
        items = self._get_items()
        if not items:
            raise ValidationError('El carrito está vacío')

        errors = FieldErrors()
        method = PaymentMethod.parse(data.get('paymentMethod'))
        if method is None:
            errors.add('paymentMethod', 'Método de pago inválido (cash, credit, debit, pix)')
        operator_id = required_int(data, 'operatorId', errors, 'El operador')
        amount_received = money_field(
            data, 'amountReceived', errors, 'El monto recibido', required=False
        )
        errors.raise_if_any('Datos de pago inválidos')

        sale = self.sales_service.create_sale(
            items,
            method,
            operator_id,
            amount_received=amount_received if method.is_cash else None,
        )
        self._save_items([])
        return sale

    # =========================================================================
    # AUXILIARES
    # =========================================================================

    def _parse_quantity(self, raw: Any, errors: FieldErrors) -> Optional[Decimal]:
        quantity = to_decimal(raw)
        if quantity is None or quantity <= 0:
            errors.add('quantity', 'La cantidad debe ser mayor a 0')
            return None
        if not in_range(quantity):
            errors.add('quantity', 'La cantidad está fuera de rango')
            return None
        return quantity

    def _check_range(self, quantity: Decimal) -> Decimal:
        if not in_range(quantity):
            raise ValidationError(
                'Datos de carrito inválidos',
                {'quantity': 'La cantidad está fuera de rango'}
            )
        return quantity
