# ==============================================================================
# CONFIGURACIÓN - Variables de entorno
# ==============================================================================
# Se leen al crear la app (create_app). Cualquier clave se puede pisar con
# el dict `overrides` (lo usan los tests).
#
# VARIABLES:
#   PDV_SECRET_KEY       Clave para firmar la cookie de sesión
#   PDV_PRODUCTION_MODE  1 = producción (exige PDV_SECRET_KEY)
#   PDV_SEED_DATA        1 = cargar usuarios, catálogo y ventas de ejemplo
#   PDV_LOG_LEVEL        Nivel de logging (INFO por defecto)
#   PDV_PROFILING        1 = medir tiempos de cada petición
#   PDV_SLOW_REQUEST_MS  Umbral de petición lenta (ms)
#   FLASK_HOST / FLASK_PORT / FLASK_DEBUG  Solo para `python -m app_pdv.main`
# ==============================================================================

import logging
import os
from typing import Any, Dict, Mapping, Optional

from app_pdv.performance_logger import DEFAULT_THRESHOLD_MS

logger = logging.getLogger(__name__)

_DEFAULT_SECRET = "app_pdv_dev_secret_key_change_in_production"

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    try:
        return int(raw) if raw else default
    except ValueError:
        logger.warning('%s=%r no es un entero, se usa %s', name, raw, default)
        return default


def load_config(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Arma la configuración de la app a partir del entorno.

    Args:
        overrides: Claves que reemplazan lo leído del entorno

    Returns:
        Dict listo para app.config.update()
    """
    config: Dict[str, Any] = {
        'PDV_PRODUCTION_MODE': _env_flag('PDV_PRODUCTION_MODE', False),
        'PDV_SEED_DATA': _env_flag('PDV_SEED_DATA', True),
        'PDV_LOG_LEVEL': os.environ.get('PDV_LOG_LEVEL', 'INFO').upper(),
        'PDV_PROFILING': _env_flag('PDV_PROFILING', True),
        'PDV_SLOW_REQUEST_MS': _env_int('PDV_SLOW_REQUEST_MS', DEFAULT_THRESHOLD_MS),
        'SECRET_KEY': os.environ.get('PDV_SECRET_KEY'),

        # Cookies de sesión (el carrito y el usuario viven en la sesión)
        'SESSION_COOKIE_HTTPONLY': True,
        'SESSION_COOKIE_SAMESITE': 'Lax',
        'PERMANENT_SESSION_LIFETIME': 86400,  # 24 horas
    }
    if overrides:
        config.update(overrides)

    if not config.get('SECRET_KEY'):
        if config['PDV_PRODUCTION_MODE']:
            logger.warning('PDV_PRODUCTION_MODE activo sin PDV_SECRET_KEY definida')
            logger.warning('Define la variable de entorno para mayor seguridad')
        config['SECRET_KEY'] = _DEFAULT_SECRET
    return config


def server_options() -> Dict[str, Any]:
    """Host, puerto y debug para el servidor de desarrollo."""
    return {
        'host': os.environ.get('FLASK_HOST', '0.0.0.0'),  # Escucha en todas las interfaces
        'port': _env_int('FLASK_PORT', 5000),
        'debug': _env_flag('FLASK_DEBUG', False),
    }
