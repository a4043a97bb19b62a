from decimal import Decimal

import pytest

from app_pdv.errors import InternalError, ValidationError
from app_pdv.models import PaymentMethod


def _open_till(container, operator, amount='100.00'):
    return container.cash_service.record_transaction({
        'amount': amount, 'reason': 'opening', 'operatorId': operator.id,
    })


def _sell(container, operator, method='cash', price='2.50', quantity=2, **extra):
    data = {
        'items': [{'productId': 1, 'name': 'Água', 'price': price, 'quantity': quantity}],
        'paymentMethod': method,
        'operatorId': operator.id,
    }
    data.update(extra)
    return container.sales_service.record_sale(data)


@pytest.fixture
def till_109(container, operator):
    """100.00 de apertura + venta en efectivo de 9.00."""
    _open_till(container, operator)
    container.sales_service.record_sale({
        'items': [
            {'productId': 1, 'name': 'Água', 'price': '2.50', 'quantity': 2},
            {'productId': 2, 'name': 'Cola', 'price': '4.00', 'quantity': 1},
        ],
        'paymentMethod': 'cash',
        'operatorId': operator.id,
        'amountReceived': '20.00',
    })
    return container.register_service


def test_empty_store_summary(container):
    summary = container.register_service.compute_summary()
    assert summary.system_balance == Decimal('0.00')
    assert summary.sales_count == 0
    assert summary.to_dict() == {
        'systemBalance': '0.00',
        'cashSales': '0.00',
        'cardSales': '0.00',
        'pixSales': '0.00',
        'salesCount': 0,
        'totalSales': '0.00',
    }


def test_pix_total_zero_without_pix_sales(container, operator):
    _sell(container, operator, 'credit')
    assert container.register_service.get_pix_sales_total() == Decimal('0.00')


def test_summary_groups_methods(container, operator):
    _open_till(container, operator)
    _sell(container, operator, 'cash', amountReceived=5)                      # 5.00
    _sell(container, operator, 'credit', price='10.00', quantity=1)           # 10.00
    _sell(container, operator, 'debit', price='3.33', quantity=3)             # 9.99
    _sell(container, operator, 'pix', price='7.50', quantity=1)               # 7.50

    service = container.register_service
    summary = service.compute_summary()

    assert summary.cash_sales == Decimal('5.00')
    assert summary.card_sales == Decimal('19.99')
    assert summary.pix_sales == Decimal('7.50')
    assert summary.sales_count == 4
    assert summary.system_balance == Decimal('105.00')
    assert summary.cash_sales + summary.card_sales + summary.pix_sales == summary.total_sales

    assert service.get_cash_sales_total() == summary.cash_sales
    assert service.get_card_sales_total() == summary.card_sales
    assert service.get_current_system_balance() == summary.system_balance


def test_summary_is_recomputed_each_call(container, operator):
    service = container.register_service
    assert service.compute_summary().system_balance == Decimal('0.00')
    _open_till(container, operator, '50.00')
    assert service.compute_summary().system_balance == Decimal('50.00')


def test_withdrawals_reduce_balance(container, operator):
    _open_till(container, operator)
    container.cash_service.record_transaction({
        'amount': '-30.00', 'reason': 'adjustment', 'operatorId': operator.id,
    })
    assert container.register_service.compute_summary().system_balance == Decimal('70.00')


def test_close_without_difference(till_109, operator):
    assert till_109.compute_summary().system_balance == Decimal('109.00')

    register = till_109.close_register(Decimal('109.00'), operator.id)

    assert register.difference is None
    assert register.difference_reason is None
    assert register.system_balance == Decimal('109.00')
    assert register.closing_balance == Decimal('109.00')
    assert register.opening_balance == Decimal('100.00')
    assert register.cash_sales == Decimal('9.00')
    assert register.closed_at is not None


def test_close_with_difference_requires_reason(till_109, container, operator):
    with pytest.raises(ValidationError) as exc:
        till_109.close_register(Decimal('100.00'), operator.id)
    assert 'differenceReason' in exc.value.errors
    assert container.register_repo.count() == 0

    register = till_109.close_register(
        Decimal('100.00'), operator.id, difference_reason='Troco errado'
    )
    assert register.difference == Decimal('-9.00')
    assert register.difference_reason == 'Troco errado'
    assert register.to_dict()['difference'] == '-9.00'


def test_blank_reason_is_missing(till_109, operator):
    with pytest.raises(ValidationError):
        till_109.close_register(Decimal('120.00'), operator.id, difference_reason='   ')


def test_one_cent_is_within_tolerance(till_109, operator):
    register = till_109.close_register(Decimal('109.01'), operator.id)
    assert register.difference is None

    register = till_109.close_register(Decimal('108.99'), operator.id)
    assert register.difference is None


def test_reason_ignored_without_difference(till_109, operator):
    register = till_109.close_register(Decimal('109.00'), operator.id, difference_reason='nada')
    assert register.difference_reason is None


def test_close_does_not_reset_ledger(till_109, container, operator):
    till_109.close_register(Decimal('109.00'), operator.id)
    _sell(container, operator, 'cash', amountReceived=5)

    # El saldo sigue incluyendo todo el historial
    summary = till_109.compute_summary()
    assert summary.system_balance == Decimal('114.00')
    assert summary.sales_count == 2


def test_close_rejects_invalid_count(till_109, operator):
    with pytest.raises(ValidationError) as exc:
        till_109.close_register(Decimal('-1'), operator.id)
    assert 'closingBalance' in exc.value.errors

    with pytest.raises(ValidationError):
        till_109.close_register(None, operator.id)

    with pytest.raises(ValidationError) as exc:
        till_109.close_register(Decimal('1e30'), operator.id)
    assert 'closingBalance' in exc.value.errors


def test_close_rejects_unknown_operator(till_109):
    with pytest.raises(ValidationError) as exc:
        till_109.close_register(Decimal('109.00'), 999)
    assert 'operatorId' in exc.value.errors


def test_close_from_payload(till_109, operator):
    register = till_109.close_register_from_payload({
        'closingBalance': '100,00',
        'operatorId': operator.id,
        'differenceReason': 'Sangria não registrada',
        'notes': 'Fechamento',
        # Cifras calculadas por el cliente: se ignoran
        'systemBalance': '1.00',
        'difference': '0',
    })
    assert register.system_balance == Decimal('109.00')
    assert register.difference == Decimal('-9.00')
    assert register.notes == 'Fechamento'

    register = till_109.close_register_from_payload({
        'manualCashCount': 109, 'operatorId': operator.id,
    })
    assert register.difference is None


def test_close_from_payload_requires_count(till_109, operator):
    with pytest.raises(ValidationError) as exc:
        till_109.close_register_from_payload({'operatorId': operator.id})
    assert 'closingBalance' in exc.value.errors

    with pytest.raises(ValidationError) as exc:
        till_109.close_register_from_payload({'closingBalance': '1e30', 'operatorId': operator.id})
    assert exc.value.errors == {'closingBalance': 'El conteo de caja está fuera de rango'}
    assert till_109.list_registers() == []


def test_list_registers_by_date(till_109, operator):
    first = till_109.close_register(Decimal('109.00'), operator.id)
    assert till_109.list_registers() == [first]
    assert till_109.list_registers(first.closed_at, first.closed_at) == [first]


class _BrokenSale:
    payment_method = 'cash'
    total = Decimal('1.00')


def test_summary_failure_is_internal_error(container, operator, monkeypatch):
    monkeypatch.setattr(container.sales_repo, 'get_all', lambda: [_BrokenSale()])
    with pytest.raises(InternalError):
        container.register_service.compute_summary()


def test_card_labels_grouped_as_card(container, operator):
    _sell(container, operator, 'Cartão de Débito')
    _sell(container, operator, PaymentMethod.CREDIT.label)
    assert container.register_service.compute_summary().card_sales == Decimal('10.00')
