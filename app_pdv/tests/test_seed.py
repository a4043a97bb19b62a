from decimal import Decimal

from werkzeug.security import check_password_hash

from app_pdv.models import PaymentMethod
from app_pdv.models.money import money_sum
from app_pdv.seed_data import CATEGORIES, PRODUCTS


def test_seeded_users(seeded_container):
    admin = seeded_container.user_repo.get_by_username('admin')
    seller = seeded_container.user_repo.get_by_username('vendedor')

    assert admin.id == 1 and admin.is_admin
    assert seller.id == 2 and not seller.is_admin
    assert seller.name == 'João Vendedor'
    assert check_password_hash(admin.password_hash, 'password')
    assert check_password_hash(seller.password_hash, '123456')


def test_seeded_catalog(seeded_container):
    assert seeded_container.category_repo.count() == len(CATEGORIES)
    assert seeded_container.product_repo.count() == len(PRODUCTS)
    assert all(p.in_stock for p in seeded_container.product_repo.get_all())


def test_seeded_sales_respect_item_sum(seeded_container):
    sales = seeded_container.sales_repo.get_all()
    assert [s.payment_method for s in sales] == [
        PaymentMethod.CASH, PaymentMethod.CREDIT, PaymentMethod.PIX,
    ]
    assert [s.total for s in sales] == [Decimal('9.00'), Decimal('23.48'), Decimal('42.78')]
    for sale in sales:
        assert sale.total == money_sum(item.subtotal for item in sale.items)
        assert sale.operator_id == 2

    cash = sales[0]
    assert cash.amount_received == Decimal('20.00')
    assert cash.change_given == Decimal('11.00')


def test_seeded_opening_balance(seeded_container):
    opening, = seeded_container.cash_repo.get_all()
    assert opening.amount == Decimal('100.00')
    assert opening.operator_id == 2
    assert seeded_container.register_service.get_current_system_balance() == Decimal('109.00')


def test_empty_app_has_no_data(container):
    assert container.user_repo.count() == 0
    assert container.sales_repo.count() == 0
