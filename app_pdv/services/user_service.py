# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# Autenticación y alta de operadores.
#
# Las contraseñas se guardan con generate_password_hash (werkzeug) y se
# verifican SOLO aquí con check_password_hash. El repositorio solo guarda
# el hash, nunca la contraseña.
# ==============================================================================

import logging
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from app_pdv.errors import AuthenticationError, FieldErrors, ValidationError
from app_pdv.models import User
from app_pdv.repositories.interfaces import IUserRepository
from app_pdv.services.validation import require_payload, required_str

logger = logging.getLogger(__name__)


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Autenticación (login)
    - Registro de usuarios (sin ruta HTTP)
    - Búsqueda de operadores para validar operatorId
    """

    def __init__(self, user_repo: IUserRepository):
        """
        Args:
            user_repo: Repositorio de usuarios
        """
        self.user_repo = user_repo

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    def authenticate(self, username: Any, password: Any) -> User:
        """
        Valida credenciales.

        Args:
            username: Nombre de usuario
            password: Contraseña en texto plano (solo se compara contra el hash)

        Returns:
            Usuario autenticado

        Raises:
            ValidationError: Si falta usuario o contraseña
            AuthenticationError: Si las credenciales no son válidas
        """
        errors = FieldErrors()
        payload = {'username': username, 'password': password}
        required_str(payload, 'username', errors, 'El usuario')
        if not isinstance(password, str) or not password:
            errors.add('password', 'La contraseña es obligatoria')
        errors.raise_if_any('Usuario y contraseña son obligatorios')

        user = self.user_repo.get_by_username(username.strip())
        if user is None or not check_password_hash(user.password_hash, password):
            logger.warning('Intento de login fallido para %r', username)
            raise AuthenticationError()

        logger.info('Login correcto: %s (id=%s)', user.username, user.id)
        return user

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def find_user(self, user_id: Optional[int]) -> Optional[User]:
        if user_id is None:
            return None
        return self.user_repo.get_by_id(user_id)

    def operator_exists(self, operator_id: Optional[int]) -> bool:
        """True si el ID corresponde a un usuario registrado."""
        return self.find_user(operator_id) is not None

    # =========================================================================
    # REGISTRO
    # =========================================================================

    def register_user(self, data: Dict[str, Any]) -> User:
        """
        Crea un usuario nuevo.

        Args:
            data: {username, password, name, isAdmin?}

        Returns:
            Usuario creado

        Raises:
            ValidationError: Campos vacíos o username repetido
        """
        data = require_payload(data)
        errors = FieldErrors()
        username = required_str(data, 'username', errors, 'El usuario')
        name = required_str(data, 'name', errors, 'El nombre')
        password = data.get('password')
        if not isinstance(password, str) or not password:
            errors.add('password', 'La contraseña es obligatoria')
        is_admin = data.get('isAdmin', False)
        if not isinstance(is_admin, bool):
            errors.add('isAdmin', 'Debe ser verdadero o falso')
        errors.raise_if_any('Datos de usuario inválidos')

        # Chequeo y alta bajo el mismo lock: dos registros simultáneos del
        # mismo username no pueden pasar ambos
        with self.user_repo.lock:
            if self.user_repo.get_by_username(username) is not None:
                raise ValidationError(
                    'Datos de usuario inválidos',
                    {'username': 'El usuario ya existe'}
                )
            user = self.user_repo.create(User(
                username=username,
                password_hash=generate_password_hash(password),
                name=name,
                is_admin=is_admin,
            ))

        logger.info('Usuario creado: %s (id=%s, admin=%s)', user.username, user.id, user.is_admin)
        return user
