# ==============================================================================
# CAPA DE REPOSITORIOS - Entity Store en memoria
# ==============================================================================
# Esta capa encapsula todo el acceso a los datos (hoy: diccionarios en
# memoria, sin persistencia entre reinicios).
#
# ESTRUCTURA:
# ├── interfaces.py          → Protocolos (contratos para otra persistencia)
# ├── base.py                → MemoryRepository (IDs, lock, filtros)
# ├── user_repository.py     → Usuarios
# ├── catalog_repository.py  → Categorías y productos
# ├── sales_repository.py    → Ventas
# └── cash_repository.py     → Movimientos de caja y cierres diarios
# ==============================================================================

from .interfaces import (
    IUserRepository,
    ICategoryRepository,
    IProductRepository,
    ISalesRepository,
    ICashTransactionRepository,
    IDailyRegisterRepository,
)

from .base import MemoryRepository
from .user_repository import UserRepository
from .catalog_repository import CategoryRepository, ProductRepository
from .sales_repository import SalesRepository
from .cash_repository import CashTransactionRepository, DailyRegisterRepository

__all__ = [
    # Interfaces
    'IUserRepository',
    'ICategoryRepository',
    'IProductRepository',
    'ISalesRepository',
    'ICashTransactionRepository',
    'IDailyRegisterRepository',

    # Implementaciones en memoria
    'MemoryRepository',
    'UserRepository',
    'CategoryRepository',
    'ProductRepository',
    'SalesRepository',
    'CashTransactionRepository',
    'DailyRegisterRepository',
]
