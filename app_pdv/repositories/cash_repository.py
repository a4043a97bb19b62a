# ==============================================================================
# REPOSITORIOS DE CAJA - Movimientos manuales y cierres diarios
# ==============================================================================

from app_pdv.models import CashTransaction, DailyRegister
from app_pdv.repositories.base import MemoryRepository


class CashTransactionRepository(MemoryRepository[CashTransaction]):
    """Movimientos manuales de caja (apertura, ajustes, otros)."""

    timestamp_field = 'created_at'


class DailyRegisterRepository(MemoryRepository[DailyRegister]):
    """
    Cierres de caja.
    Un cierre no reinicia ni archiva ventas o movimientos anteriores.
    """

    timestamp_field = 'closed_at'
