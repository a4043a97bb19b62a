# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (cada app de test tiene su propio store)
#
# create_app() crea UN contenedor por app y lo guarda en
# app.extensions['pdv_container']; las rutas lo obtienen con
# get_container(). No hay estado global: dos apps no comparten datos.
#
# Todos los repositorios comparten el mismo RLock, así el cierre de caja
# lee ventas y movimientos y guarda el cierre sin que nada se intercale.
# ==============================================================================

import threading
from typing import Optional

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia (memoria)
# ═══════════════════════════════════════════════════════════════════════════════
from app_pdv.repositories import (
    CashTransactionRepository,
    CategoryRepository,
    DailyRegisterRepository,
    ProductRepository,
    SalesRepository,
    UserRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from app_pdv.services import (
    CartService,
    CashService,
    CatalogService,
    RegisterService,
    SalesService,
    UserService,
)

EXTENSION_KEY = 'pdv_container'


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Cada repositorio y servicio se crea una sola vez (lazy loading) y se
    reutiliza mientras viva el contenedor. La creación ocurre bajo el
    lock del store: dos hilos nunca crean dos copias del mismo repositorio.

    Uso:
        container = AppContainer()
        sales_service = container.sales_service
        summary = container.register_service.compute_summary()
    """

    def __init__(self, lock: Optional[threading.RLock] = None):
        """
        Inicializa el contenedor.

        Args:
            lock: Lock compartido del store (si no se pasa, se crea uno)
        """
        self._lock = lock or threading.RLock()

        # Inicializar repositorios (lazy loading)
        self._user_repo: Optional[UserRepository] = None
        self._category_repo: Optional[CategoryRepository] = None
        self._product_repo: Optional[ProductRepository] = None
        self._sales_repo: Optional[SalesRepository] = None
        self._cash_repo: Optional[CashTransactionRepository] = None
        self._register_repo: Optional[DailyRegisterRepository] = None

        # Inicializar servicios (lazy loading)
        self._user_service: Optional[UserService] = None
        self._catalog_service: Optional[CatalogService] = None
        self._sales_service: Optional[SalesService] = None
        self._cart_service: Optional[CartService] = None
        self._cash_service: Optional[CashService] = None
        self._register_service: Optional[RegisterService] = None

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def user_repo(self) -> UserRepository:
        """Repositorio de usuarios."""
        with self._lock:
            if self._user_repo is None:
                self._user_repo = UserRepository(self._lock)
            return self._user_repo

    @property
    def category_repo(self) -> CategoryRepository:
        with self._lock:
            if self._category_repo is None:
                self._category_repo = CategoryRepository(self._lock)
            return self._category_repo

    @property
    def product_repo(self) -> ProductRepository:
        with self._lock:
            if self._product_repo is None:
                self._product_repo = ProductRepository(self._lock)
            return self._product_repo

    @property
    def sales_repo(self) -> SalesRepository:
        """Repositorio de ventas."""
        with self._lock:
            if self._sales_repo is None:
                self._sales_repo = SalesRepository(self._lock)
            return self._sales_repo

    @property
    def cash_repo(self) -> CashTransactionRepository:
        """Repositorio de movimientos de caja."""
        with self._lock:
            if self._cash_repo is None:
                self._cash_repo = CashTransactionRepository(self._lock)
            return self._cash_repo

    @property
    def register_repo(self) -> DailyRegisterRepository:
        """Repositorio de cierres diarios."""
        with self._lock:
            if self._register_repo is None:
                self._register_repo = DailyRegisterRepository(self._lock)
            return self._register_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def user_service(self) -> UserService:
        """Servicio de usuarios."""
        with self._lock:
            if self._user_service is None:
                self._user_service = UserService(self.user_repo)
            return self._user_service

    @property
    def catalog_service(self) -> CatalogService:
        """Servicio de catálogo."""
        with self._lock:
            if self._catalog_service is None:
                self._catalog_service = CatalogService(self.category_repo, self.product_repo)
            return self._catalog_service

    @property
    def sales_service(self) -> SalesService:
        """Servicio de ventas."""
        with self._lock:
            if self._sales_service is None:
                self._sales_service = SalesService(self.sales_repo, self.user_service)
            return self._sales_service

    @property
    def cart_service(self) -> CartService:
        """Servicio de carrito."""
        with self._lock:
            if self._cart_service is None:
                self._cart_service = CartService(self.catalog_service, self.sales_service)
            return self._cart_service

    @property
    def cash_service(self) -> CashService:
        """Servicio de movimientos de caja."""
        with self._lock:
            if self._cash_service is None:
                self._cash_service = CashService(self.cash_repo, self.user_service)
            return self._cash_service

    @property
    def register_service(self) -> RegisterService:
        """Servicio de resumen y cierre de caja."""
        with self._lock:
            if self._register_service is None:
                self._register_service = RegisterService(
                    self.sales_repo,
                    self.cash_repo,
                    self.register_repo,
                    self.user_service,
                    lock=self._lock
                )
            return self._register_service


def get_container(app=None) -> AppContainer:
    """
    Obtiene el contenedor de la app Flask (la actual si no se pasa).

    Returns:
        Instancia del contenedor creada por create_app
    """
    if app is None:
        from flask import current_app
        app = current_app
    return app.extensions[EXTENSION_KEY]
