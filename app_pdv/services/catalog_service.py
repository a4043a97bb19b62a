# ==============================================================================
# SERVICIO DE CATÁLOGO
# ==============================================================================
# Categorías y productos: datos de referencia de solo-agregar.
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional

from app_pdv.errors import FieldErrors, NotFoundError
from app_pdv.models import Category, Product
from app_pdv.repositories.interfaces import ICategoryRepository, IProductRepository
from app_pdv.services.validation import (
    money_field,
    optional_str,
    parse_int,
    require_payload,
    required_int,
    required_str,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Servicio para gestión del catálogo.

    Responsabilidades:
    - Listar y crear categorías
    - Listar (por categoría) y crear productos
    - Validar que cada producto apunte a una categoría existente
    """

    def __init__(
        self,
        category_repo: ICategoryRepository,
        product_repo: IProductRepository
    ):
        self.category_repo = category_repo
        self.product_repo = product_repo

    # =========================================================================
    # CATEGORÍAS
    # =========================================================================

    def list_categories(self) -> List[Category]:
        return self.category_repo.get_all()

    def get_category(self, category_id: int) -> Category:
        category = self.category_repo.get_by_id(category_id)
        if category is None:
            raise NotFoundError('Categoría no encontrada')
        return category

    def create_category(self, data: Dict[str, Any]) -> Category:
        """
        Crea una categoría.

        Args:
            data: {name, icon}

        Raises:
            ValidationError: Si falta nombre o ícono
        """
        data = require_payload(data)
        errors = FieldErrors()
        name = required_str(data, 'name', errors, 'El nombre')
        icon = required_str(data, 'icon', errors, 'El ícono')
        errors.raise_if_any('Datos de categoría inválidos')

        category = self.category_repo.create(Category(name=name, icon=icon))
        logger.info('Categoría creada: %s (id=%s)', category.name, category.id)
        return category

    # =========================================================================
    # PRODUCTOS
    # =========================================================================

    def list_products(self, category_id: Optional[int] = None) -> List[Product]:
        """
        Lista productos, opcionalmente filtrados por categoría.

        Args:
            category_id: ID de categoría (None = todos)
        """
        if category_id is None:
            return self.product_repo.get_all()
        return self.product_repo.get_by_category(category_id)

    def get_product(self, product_id: int) -> Product:
        product = self.product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError('Producto no encontrado')
        return product

    def create_product(self, data: Dict[str, Any]) -> Product:
        """
        Crea un producto.

        Args:
            data: {name, price, categoryId, description?, imageUrl?, inStock?}

        Returns:
            Producto creado

        Raises:
            ValidationError: Datos inválidos o categoría inexistente
        """
        data = require_payload(data)
        errors = FieldErrors()
        name = required_str(data, 'name', errors, 'El nombre')
        price = money_field(data, 'price', errors, 'El precio')
        category_id = required_int(data, 'categoryId', errors, 'La categoría')
        description = optional_str(data, 'description', errors)
        image_url = optional_str(data, 'imageUrl', errors)

        in_stock = data.get('inStock', True)
        if in_stock is None:
            in_stock = True
        if not isinstance(in_stock, bool):
            errors.add('inStock', 'Debe ser verdadero o falso')

        if 'categoryId' not in errors and self.category_repo.get_by_id(category_id) is None:
            errors.add('categoryId', 'La categoría no existe')
        errors.raise_if_any('Datos de producto inválidos')

        product = self.product_repo.create(Product(
            name=name,
            price=price,
            category_id=category_id,
            description=description,
            image_url=image_url,
            in_stock=in_stock,
        ))
        logger.info('Producto creado: %s (id=%s, precio=%s)', product.name, product.id, product.price)
        return product


def parse_category_filter(raw: Optional[str]) -> Optional[int]:
    """
    Lee el filtro ?categoryId= de la query string.

    Raises:
        ValidationError: Si no es un entero
    """
    if raw is None or raw == '':
        return None
    value = parse_int(raw)
    if value is None:
        errors = FieldErrors()
        errors.add('categoryId', 'La categoría debe ser un número entero')
        errors.raise_if_any('Filtro inválido')
    return value
