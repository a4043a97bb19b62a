# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Las ventas se guardan como {id: Sale} con el timestamp del servidor en
# created_at. Una venta nunca cambia después de creada.
# ==============================================================================

from typing import List

from app_pdv.models import PaymentMethod, Sale
from app_pdv.repositories.base import MemoryRepository


class SalesRepository(MemoryRepository[Sale]):
    """Repositorio de ventas finalizadas."""

    timestamp_field = 'created_at'

    def get_sales_by_method(self, *methods: PaymentMethod) -> List[Sale]:
        """
        Ventas pagadas con alguno de los métodos indicados.

        Args:
            methods: Uno o más métodos de pago

        Returns:
            Lista de ventas que coinciden
        """
        wanted = frozenset(methods)
        return self.find_all_by(lambda s: s.payment_method in wanted)
