# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Protocolos que deben cumplir los repositorios del Entity Store.
# Los servicios dependen de estos contratos, no de MemoryRepository:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Hoy todo vive en memoria; una versión SQL solo necesita implementar
#      estos protocolos y cambiar la construcción en app_container.py
#
# 2. TESTING
#    - Fácil crear dobles que implementen estas interfaces
#
# ==============================================================================

import threading
from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from app_pdv.models import (
    CashTransaction,
    Category,
    DailyRegister,
    PaymentMethod,
    Product,
    Sale,
    User,
)


# ==============================================================================
# INTERFACES POR ENTIDAD
# ==============================================================================

@runtime_checkable
class IUserRepository(Protocol):

    @property
    def lock(self) -> threading.RLock:
        """Lock del store (alta atómica de username único)."""
        ...

    def create(self, record: User) -> User:
        ...

    def get_by_id(self, record_id: int) -> Optional[User]:
        ...

    def get_all(self) -> List[User]:
        ...

    def get_by_username(self, username: str) -> Optional[User]:
        """Primer usuario con ese nombre exacto."""
        ...


@runtime_checkable
class ICategoryRepository(Protocol):

    def create(self, record: Category) -> Category:
        ...

    def get_by_id(self, record_id: int) -> Optional[Category]:
        ...

    def get_all(self) -> List[Category]:
        ...


@runtime_checkable
class IProductRepository(Protocol):

    def create(self, record: Product) -> Product:
        ...

    def get_by_id(self, record_id: int) -> Optional[Product]:
        ...

    def get_all(self) -> List[Product]:
        ...

    def get_by_category(self, category_id: int) -> List[Product]:
        ...


@runtime_checkable
class ISalesRepository(Protocol):

    def create(self, record: Sale) -> Sale:
        ...

    def get_by_id(self, record_id: int) -> Optional[Sale]:
        ...

    def get_all(self) -> List[Sale]:
        ...

    def get_by_date_range(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[Sale]:
        ...

    def get_sales_by_method(self, *methods: PaymentMethod) -> List[Sale]:
        ...


@runtime_checkable
class ICashTransactionRepository(Protocol):

    def create(self, record: CashTransaction) -> CashTransaction:
        ...

    def get_all(self) -> List[CashTransaction]:
        ...

    def get_by_date_range(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[CashTransaction]:
        ...


@runtime_checkable
class IDailyRegisterRepository(Protocol):

    def create(self, record: DailyRegister) -> DailyRegister:
        ...

    def get_all(self) -> List[DailyRegister]:
        ...

    def get_by_date_range(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[DailyRegister]:
        ...
