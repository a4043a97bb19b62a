# ==============================================================================
# SERVICIO DE CAJA - Resumen y cierre diario
# ==============================================================================
# Calcula el saldo esperado de la caja y cierra el día contra el conteo
# manual del operador.
#
# REGLAS:
# - El saldo del sistema abarca TODO el historial:
#       saldo = Σ movimientos de caja + Σ ventas en efectivo
#   Un cierre NO reinicia ni archiva nada; el saldo del día siguiente sigue
#   incluyendo los días anteriores.
# - Ventas con tarjeta (crédito + débito) y PIX no entran al efectivo.
# - El resumen se recalcula en cada llamada, sin caché.
# - Diferencia > 0.01 entre conteo y sistema → se guarda la diferencia y
#   el operador DEBE explicar el motivo.
# ==============================================================================

import logging
import threading
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app_pdv.errors import FieldErrors, InternalError
from app_pdv.models import DailyRegister, PaymentMethod, RegisterSummary
from app_pdv.models.money import money_sum, quantize, to_money, within_tolerance
from app_pdv.performance_logger import profile_function
from app_pdv.repositories.interfaces import (
    ICashTransactionRepository,
    IDailyRegisterRepository,
    ISalesRepository,
)
from app_pdv.services.user_service import UserService
from app_pdv.services.validation import (
    is_blank,
    money_field,
    optional_str,
    require_payload,
    required_int,
)

logger = logging.getLogger(__name__)


class RegisterService:
    """
    Servicio de resumen y cierre de caja.

    El lock debe ser el mismo que usan los repositorios de ventas, caja y
    cierres: el cierre lee el resumen y guarda el registro sin que otra
    venta o cierre se intercale.
    """

    def __init__(
        self,
        sales_repo: ISalesRepository,
        cash_repo: ICashTransactionRepository,
        register_repo: IDailyRegisterRepository,
        user_service: UserService,
        lock: Optional[threading.RLock] = None
    ):
        self.sales_repo = sales_repo
        self.cash_repo = cash_repo
        self.register_repo = register_repo
        self.user_service = user_service
        self._lock = lock or threading.RLock()

    # =========================================================================
    # TOTALES POR MÉTODO
    # =========================================================================

    def get_cash_sales_total(self) -> Decimal:
        return money_sum(s.total for s in self.sales_repo.get_sales_by_method(PaymentMethod.CASH))

    def get_card_sales_total(self) -> Decimal:
        """Crédito y débito juntos."""
        sales = self.sales_repo.get_sales_by_method(PaymentMethod.CREDIT, PaymentMethod.DEBIT)
        return money_sum(s.total for s in sales)

    def get_pix_sales_total(self) -> Decimal:
        """0.00 si no hay ventas PIX."""
        return money_sum(s.total for s in self.sales_repo.get_sales_by_method(PaymentMethod.PIX))

    def get_current_system_balance(self) -> Decimal:
        """Σ movimientos de caja + Σ ventas en efectivo, sobre todo el historial."""
        with self._lock:
            transactions = money_sum(t.amount for t in self.cash_repo.get_all())
            return quantize(transactions + self.get_cash_sales_total())

    # =========================================================================
    # RESUMEN
    # =========================================================================

    @profile_function(name="Calcular resumen de caja")
    def compute_summary(self) -> RegisterSummary:
        """
        Foto del estado de la caja.

        Todas las cifras salen de una sola lectura consistente del store.

        Raises:
            InternalError: Si el historial no se puede agregar
        """
        with self._lock:
            sales = self.sales_repo.get_all()
            transactions = self.cash_repo.get_all()

        totals = {'cash': [], 'card': [], 'pix': []}
        try:
            for sale in sales:
                totals[sale.payment_method.summary_group].append(sale.total)
            cash_sales = money_sum(totals['cash'])
            balance = quantize(money_sum(t.amount for t in transactions) + cash_sales)
        except (ArithmeticError, AttributeError, KeyError, TypeError) as exc:
            logger.exception('No se pudo calcular el resumen de caja')
            raise InternalError('No se pudo calcular el resumen de caja') from exc

        return RegisterSummary(
            system_balance=balance,
            cash_sales=cash_sales,
            card_sales=money_sum(totals['card']),
            pix_sales=money_sum(totals['pix']),
            sales_count=len(sales),
        )

    # =========================================================================
    # CIERRE
    # =========================================================================

    def close_register_from_payload(self, data: Dict[str, Any]) -> DailyRegister:
        """
        Cierre desde POST /api/daily-registers.

        El conteo manual llega como closingBalance (o manualCashCount).
        Las cifras calculadas que envíe el cliente se ignoran.
        """
        data = require_payload(data)
        errors = FieldErrors()
        key = 'closingBalance'
        if key not in data and 'manualCashCount' in data:
            key = 'manualCashCount'
        count = money_field(data, key, errors, 'El conteo de caja')
        operator_id = required_int(data, 'operatorId', errors, 'El operador')
        notes = optional_str(data, 'notes', errors)
        reason = optional_str(data, 'differenceReason', errors)
        errors.raise_if_any('Datos de cierre inválidos')

        return self.close_register(count, operator_id, notes=notes, difference_reason=reason)

    @profile_function(name="Cerrar caja")
    def close_register(
        self,
        manual_cash_count: Decimal,
        operator_id: int,
        notes: Optional[str] = None,
        difference_reason: Optional[str] = None
    ) -> DailyRegister:
        """
        Cierra la caja contra el conteo manual.

        Args:
            manual_cash_count: Efectivo contado por el operador (>= 0)
            operator_id: Usuario que cierra
            notes: Observaciones
            difference_reason: Obligatorio si hay diferencia

        Returns:
            Registro de cierre guardado

        Raises:
            ValidationError: Conteo inválido, operador inexistente o
                diferencia sin motivo
        """
        errors = FieldErrors()
        manual_cash_count = to_money(manual_cash_count)
        if manual_cash_count is None or manual_cash_count < 0:
            errors.add('closingBalance', 'El conteo de caja debe ser mayor o igual a 0')
        if not self.user_service.operator_exists(operator_id):
            errors.add('operatorId', 'El operador no existe')
        errors.raise_if_any('Datos de cierre inválidos')

        # Resumen y alta bajo el mismo lock (lectura consistente)
        with self._lock:
            summary = self.compute_summary()
            difference = quantize(manual_cash_count - summary.system_balance)
            has_difference = not within_tolerance(manual_cash_count, summary.system_balance)

            if has_difference and is_blank(difference_reason):
                errors.add(
                    'differenceReason',
                    f'Hay una diferencia de {difference}: indique el motivo'
                )
                errors.raise_if_any('Diferencia de caja sin motivo')

            register = self.register_repo.create(DailyRegister(
                # Aproximación: saldo antes de las ventas en efectivo
                opening_balance=quantize(summary.system_balance - summary.cash_sales),
                closing_balance=manual_cash_count,
                system_balance=summary.system_balance,
                cash_sales=summary.cash_sales,
                card_sales=summary.card_sales,
                pix_sales=summary.pix_sales,
                difference=difference if has_difference else None,
                difference_reason=difference_reason if has_difference else None,
                notes=notes,
                operator_id=operator_id,
            ))

        if has_difference:
            logger.warning(
                'Cierre #%s con diferencia %s (sistema=%s, contado=%s): %s',
                register.id, difference, summary.system_balance,
                manual_cash_count, difference_reason
            )
        else:
            logger.info(
                'Cierre #%s sin diferencia (saldo=%s)', register.id, summary.system_balance
            )
        return register

    def list_registers(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[DailyRegister]:
        if start is None and end is None:
            return self.register_repo.get_all()
        return self.register_repo.get_by_date_range(start, end)
