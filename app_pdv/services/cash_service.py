# ==============================================================================
# SERVICIO DE MOVIMIENTOS DE CAJA
# ==============================================================================
# Registra dinero que entra (o sale) de la caja fuera de una venta:
# apertura, ajustes y otros.
# REGLA: si entra dinero, siempre queda registrado en el log.
# ==============================================================================

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from app_pdv.errors import FieldErrors
from app_pdv.models import CashReason, CashTransaction
from app_pdv.repositories.interfaces import ICashTransactionRepository
from app_pdv.services.user_service import UserService
from app_pdv.services.validation import (
    money_field,
    optional_str,
    require_payload,
    required_int,
)

logger = logging.getLogger(__name__)


class CashService:
    """
    Servicio para movimientos manuales de caja.

    Responsabilidades:
    - Validar monto, motivo y operador
    - Registrar el movimiento con timestamp del servidor
    - Consultar movimientos por rango de fechas
    """

    # La apertura solo puede sumar dinero; ajustes y otros pueden retirar
    WITHDRAWAL_REASONS = frozenset([CashReason.ADJUSTMENT, CashReason.OTHER])

    def __init__(self, cash_repo: ICashTransactionRepository, user_service: UserService):
        self.cash_repo = cash_repo
        self.user_service = user_service

    def record_transaction(self, data: Dict[str, Any]) -> CashTransaction:
        """
        Registra un movimiento de caja.

        Args:
            data: {amount, reason, operatorId, notes?}

        Returns:
            Movimiento guardado

        Raises:
            ValidationError: Monto cero, motivo desconocido u operador inexistente
        """
        data = require_payload(data)
        errors = FieldErrors()

        amount = money_field(data, 'amount', errors, 'El monto', allow_negative=True)
        operator_id = required_int(data, 'operatorId', errors, 'El operador')
        notes = optional_str(data, 'notes', errors)

        reason = None
        try:
            reason = CashReason(data.get('reason'))
        except ValueError:
            errors.add('reason', 'Motivo inválido (opening, adjustment, other)')

        if amount is not None:
            if amount == 0:
                errors.add('amount', 'El monto no puede ser cero')
            elif amount < 0 and reason is not None and reason not in self.WITHDRAWAL_REASONS:
                errors.add('amount', 'La apertura de caja debe ser positiva')

        if 'operatorId' not in errors and not self.user_service.operator_exists(operator_id):
            errors.add('operatorId', 'El operador no existe')
        errors.raise_if_any('Datos de movimiento de caja inválidos')

        transaction = self.cash_repo.create(CashTransaction(
            amount=amount,
            reason=reason,
            operator_id=operator_id,
            notes=notes,
        ))
        logger.info(
            'Movimiento de caja #%s: %s (%s) operador=%s',
            transaction.id, transaction.amount, reason.value, operator_id
        )
        return transaction

    def list_transactions(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[CashTransaction]:
        if start is None and end is None:
            return self.cash_repo.get_all()
        return self.cash_repo.get_by_date_range(start, end)
