from datetime import timedelta
from decimal import Decimal

import pytest

from app_pdv.models import CashReason, CashTransaction, Category, PaymentMethod, Product, Sale, User
from app_pdv.models.money import utc_now
from app_pdv.repositories import (
    CashTransactionRepository,
    CategoryRepository,
    ISalesRepository,
    ProductRepository,
    SalesRepository,
    UserRepository,
)


def _sale(total='9.00', method=PaymentMethod.CASH):
    return Sale(total=Decimal(total), payment_method=method, operator_id=1)


def test_ids_are_monotonic_per_kind():
    sales = SalesRepository()
    categories = CategoryRepository()

    first = sales.create(_sale())
    second = sales.create(_sale())
    category = categories.create(Category(name='Bebidas', icon='local_bar'))

    assert first.id == 1
    assert second.id == 2
    # Cada tipo de entidad tiene su propio contador
    assert category.id == 1


def test_create_stamps_server_timestamp():
    before = utc_now()
    sale = SalesRepository().create(_sale())
    assert sale.created_at is not None
    assert before <= sale.created_at <= utc_now()


def test_create_does_not_stamp_entities_without_timestamp():
    repo = CategoryRepository()
    category = repo.create(Category(name='Limpeza', icon='cleaning_services'))
    assert category == Category(name='Limpeza', icon='cleaning_services', id=1)


def test_get_by_id_and_missing():
    repo = SalesRepository()
    sale = repo.create(_sale())
    assert repo.get_by_id(sale.id) == sale
    assert repo.get_by_id(999) is None


def test_get_all_insertion_order_and_copy():
    repo = SalesRepository()
    for total in ('1.00', '2.00', '3.00'):
        repo.create(_sale(total))

    listed = repo.get_all()
    assert [s.id for s in listed] == [1, 2, 3]

    listed.clear()
    assert repo.count() == 3
    # Lecturas repetidas sin escrituras devuelven lo mismo
    assert repo.get_all() == repo.get_all()


def test_products_by_category():
    repo = ProductRepository()
    repo.create(Product(name='Água', price=Decimal('2.50'), category_id=1))
    repo.create(Product(name='Tomate', price=Decimal('8.50'), category_id=2))
    repo.create(Product(name='Suco', price=Decimal('8.90'), category_id=1))

    assert [p.name for p in repo.get_by_category(1)] == ['Água', 'Suco']
    assert repo.get_by_category(99) == []


def test_user_by_username_exact_match():
    repo = UserRepository()
    repo.create(User(username='admin', password_hash='x', name='Administrador'))
    assert repo.get_by_username('admin').name == 'Administrador'
    assert repo.get_by_username('Admin') is None


def test_sales_by_method():
    repo = SalesRepository()
    repo.create(_sale('9.00', PaymentMethod.CASH))
    repo.create(_sale('10.00', PaymentMethod.CREDIT))
    repo.create(_sale('11.00', PaymentMethod.DEBIT))
    repo.create(_sale('12.00', PaymentMethod.PIX))

    card = repo.get_sales_by_method(PaymentMethod.CREDIT, PaymentMethod.DEBIT)
    assert [s.total for s in card] == [Decimal('10.00'), Decimal('11.00')]
    assert isinstance(repo, ISalesRepository)


def test_date_range_is_inclusive():
    repo = CashTransactionRepository()
    first = repo.create(CashTransaction(amount=Decimal('100'), reason=CashReason.OPENING, operator_id=1))
    second = repo.create(CashTransaction(amount=Decimal('5'), reason=CashReason.OTHER, operator_id=1))

    assert repo.get_by_date_range(first.created_at, second.created_at) == [first, second]
    assert second in repo.get_by_date_range(second.created_at, None)
    assert repo.get_by_date_range() == [first, second]

    later = second.created_at + timedelta(seconds=1)
    assert repo.get_by_date_range(later, None) == []
    assert repo.get_by_date_range(None, first.created_at - timedelta(seconds=1)) == []


def test_date_range_requires_timestamp():
    with pytest.raises(TypeError):
        CategoryRepository().get_by_date_range()


def test_shared_lock():
    sales = SalesRepository()
    cash = CashTransactionRepository(sales.lock)
    assert cash.lock is sales.lock
