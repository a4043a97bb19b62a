# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Los usuarios se guardan como {id: User}. El username es único: la
# verificación de duplicados la hace UserService antes de crear.
# ==============================================================================

from typing import Optional

from app_pdv.models import User
from app_pdv.repositories.base import MemoryRepository


class UserRepository(MemoryRepository[User]):
    """Repositorio de operadores del sistema."""

    def get_by_username(self, username: str) -> Optional[User]:
        """
        Busca un usuario por su nombre exacto.

        Args:
            username: Nombre de acceso

        Returns:
            Primer usuario que coincide o None
        """
        return self.find_by(lambda u: u.username == username)
