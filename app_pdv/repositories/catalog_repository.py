# ==============================================================================
# REPOSITORIOS DEL CATÁLOGO - Categorías y productos
# ==============================================================================
# Datos de referencia: se crean en el seed o desde la API, nunca se editan.
# ==============================================================================

from typing import List

from app_pdv.models import Category, Product
from app_pdv.repositories.base import MemoryRepository


class CategoryRepository(MemoryRepository[Category]):
    """Repositorio de categorías de productos."""


class ProductRepository(MemoryRepository[Product]):
    """Repositorio de productos."""

    def get_by_category(self, category_id: int) -> List[Product]:
        """
        Productos de una categoría.

        Args:
            category_id: ID exacto de la categoría

        Returns:
            Lista de productos, en orden de ID
        """
        return self.find_all_by(lambda p: p.category_id == category_id)
