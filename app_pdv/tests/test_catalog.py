from decimal import Decimal

import pytest

from app_pdv.errors import NotFoundError, ValidationError
from app_pdv.services import parse_category_filter


def test_create_and_get_category(container):
    category = container.catalog_service.create_category({'name': ' Padaria ', 'icon': 'bakery_dining'})
    assert category.id == 1
    assert category.name == 'Padaria'
    assert container.catalog_service.get_category(1) == category
    assert container.catalog_service.list_categories() == [category]


def test_category_requires_name_and_icon(container):
    with pytest.raises(ValidationError) as exc:
        container.catalog_service.create_category({'name': '', 'icon': None})
    assert set(exc.value.errors) == {'name', 'icon'}


def test_missing_category(container):
    with pytest.raises(NotFoundError):
        container.catalog_service.get_category(5)


def test_create_product(container, category):
    product = container.catalog_service.create_product({
        'name': 'Suco de Laranja 1L',
        'price': 8.9,
        'categoryId': category.id,
        'description': 'Suco natural',
    })
    assert product.price == Decimal('8.90')
    assert product.in_stock is True
    assert product.to_dict() == {
        'id': 1,
        'name': 'Suco de Laranja 1L',
        'description': 'Suco natural',
        'price': '8.90',
        'imageUrl': None,
        'categoryId': category.id,
        'inStock': True,
    }


def test_product_requires_existing_category(container):
    with pytest.raises(ValidationError) as exc:
        container.catalog_service.create_product({'name': 'X', 'price': 1, 'categoryId': 9})
    assert exc.value.errors == {'categoryId': 'La categoría no existe'}


def test_product_invalid_fields(container, category):
    with pytest.raises(ValidationError) as exc:
        container.catalog_service.create_product({
            'name': '   ',
            'price': -1,
            'categoryId': category.id,
            'inStock': 'sim',
        })
    assert set(exc.value.errors) == {'name', 'price', 'inStock'}


def test_products_by_category(container, category):
    other = container.catalog_service.create_category({'name': 'Limpeza', 'icon': 'cleaning_services'})
    water = container.catalog_service.create_product({'name': 'Água', 'price': '2.50', 'categoryId': category.id})
    container.catalog_service.create_product({'name': 'Detergente', 'price': '3.50', 'categoryId': other.id})

    assert container.catalog_service.list_products(category.id) == [water]
    assert len(container.catalog_service.list_products()) == 2

    with pytest.raises(NotFoundError):
        container.catalog_service.get_product(99)


def test_parse_category_filter():
    assert parse_category_filter(None) is None
    assert parse_category_filter('') is None
    assert parse_category_filter('3') == 3


@pytest.mark.parametrize('value', ['bebidas', '--5', '²', '1.5'])
def test_parse_category_filter_rejects(value):
    with pytest.raises(ValidationError):
        parse_category_filter(value)
