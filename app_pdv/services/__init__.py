# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Los servicios reciben repositorios (interfaces) y nunca tocan Flask,
# salvo CartService que guarda el carrito en la sesión.
#
# ESTRUCTURA:
# ├── validation.py        → Lectura de campos del payload JSON
# ├── user_service.py      → Login y alta de usuarios
# ├── catalog_service.py   → Categorías y productos
# ├── sales_service.py     → Registro y consulta de ventas
# ├── cart_service.py      → Carrito en sesión y checkout
# ├── cash_service.py      → Movimientos manuales de caja
# └── register_service.py  → Resumen de caja y cierre diario
# ==============================================================================

from .user_service import UserService
from .catalog_service import CatalogService, parse_category_filter
from .sales_service import SalesService, calculate_change, calculate_total
from .cart_service import CartService
from .cash_service import CashService
from .register_service import RegisterService

__all__ = [
    'UserService',
    'CatalogService',
    'parse_category_filter',
    'SalesService',
    'calculate_total',
    'calculate_change',
    'CartService',
    'CashService',
    'RegisterService',
]
