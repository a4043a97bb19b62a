# ==============================================================================
# ERRORES DEL DOMINIO
# ==============================================================================
# Los servicios lanzan estas excepciones; main.py las convierte en
# respuestas JSON {"message": ...} con el status HTTP correspondiente.
# ==============================================================================

from typing import Dict, Optional


class PdvError(Exception):
    """Excepción base del punto de venta."""

    status_code = 500
    default_message = 'Error interno del servidor'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, object]:
        return {'message': self.message}


class ValidationError(PdvError):
    """
    Datos de entrada inválidos (400).

    Attributes:
        errors: Mensajes por campo, ej: {'amount': 'Monto inválido'}
    """

    status_code = 400
    default_message = 'Datos inválidos'

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = dict(errors or {})

    def to_dict(self) -> Dict[str, object]:
        d = super().to_dict()
        if self.errors:
            d['errors'] = self.errors
        return d


class NotFoundError(PdvError):
    """El ID referenciado no existe (404)."""

    status_code = 404
    default_message = 'Registro no encontrado'


class AuthenticationError(PdvError):
    """
    Credenciales inválidas (401).
    El mensaje es genérico: no revela si falló el usuario o la contraseña.
    """

    status_code = 401
    default_message = 'Usuario o contraseña inválidos'


class InternalError(PdvError):
    """Fallo inesperado del store o de la agregación (500)."""

    status_code = 500


class FieldErrors:
    """
    Acumulador de errores por campo.

    Uso:
        errors = FieldErrors()
        if not name:
            errors.add('name', 'El nombre es obligatorio')
        errors.raise_if_any('Producto inválido')
    """

    def __init__(self):
        self._errors: Dict[str, str] = {}

    def add(self, field: str, message: str) -> None:
        # Se conserva el primer error de cada campo
        self._errors.setdefault(field, message)

    def extend(self, other: 'FieldErrors', prefix: str = '') -> None:
        """Copia los errores de otro acumulador (ej: 'items[0].price')."""
        for field, message in other._errors.items():
            self.add(f'{prefix}.{field}' if prefix else field, message)

    def __contains__(self, field: str) -> bool:
        return field in self._errors

    def __bool__(self) -> bool:
        return bool(self._errors)

    def raise_if_any(self, message: str) -> None:
        if self._errors:
            raise ValidationError(message, self._errors)
