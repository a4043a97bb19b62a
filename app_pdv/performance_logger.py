# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y funciones sin afectar la respuesta.
# Escribe en el logger 'app_pdv.performance' con nombres legibles por acción.
#
# ACTIVAR/DESACTIVAR: PDV_PROFILING (ver config.py)
# ==============================================================================

import logging
import threading
import time
from collections import defaultdict
from functools import wraps

from flask import current_app, has_app_context

logger = logging.getLogger('app_pdv.performance')

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

# Umbral por defecto (ms); create_app lo toma de PDV_SLOW_REQUEST_MS
DEFAULT_THRESHOLD_MS = 300

# Mapeo de rutas a nombres legibles (para logs más humanos)
ROUTE_NAMES = {
    # Autenticación
    'POST /api/login': 'Iniciar sesión',
    'POST /api/logout': 'Cerrar sesión',
    'GET /api/me': 'Ver sesión actual',

    # Catálogo
    'GET /api/categories': 'Listar categorías',
    'GET /api/categories/<int:category_id>': 'Ver categoría',
    'POST /api/categories': 'Crear categoría',
    'GET /api/products': 'Listar productos',
    'GET /api/products/<int:product_id>': 'Ver producto',
    'POST /api/products': 'Crear producto',

    # Carrito
    'GET /api/cart': 'Ver carrito',
    'POST /api/cart/items': 'Agregar al carrito',
    'PATCH /api/cart/items/<int:product_id>': 'Cambiar cantidad',
    'DELETE /api/cart/items/<int:product_id>': 'Quitar del carrito',
    'DELETE /api/cart': 'Vaciar carrito',
    'POST /api/cart/checkout': 'Finalizar compra',

    # Ventas y caja
    'GET /api/sales': 'Ver ventas',
    'GET /api/sales/<int:sale_id>': 'Ver recibo',
    'POST /api/sales': 'Registrar venta',
    'GET /api/cash-transactions': 'Ver movimientos de caja',
    'POST /api/cash-transactions': 'Agregar dinero a caja',
    'GET /api/daily-registers': 'Ver cierres de caja',
    'POST /api/daily-registers': 'Cerrar caja',
    'GET /api/register-summary': 'Ver resumen de caja',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Clave en app.extensions; cada app lleva sus propias estadísticas
STATS_KEY = 'pdv_function_stats'


class FunctionStats:
    """
    Contadores por función: {nombre: {calls, total_time, max_time}}.

    Fuera de una app (scripts, tests de servicios) se usa la instancia
    global _default_stats.
    """

    def __init__(self):
        self._stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
        self._lock = threading.Lock()

    def record(self, func_name, elapsed_ms):
        with self._lock:
            stats = self._stats[func_name]
            stats['calls'] += 1
            stats['total_time'] += elapsed_ms
            if elapsed_ms > stats['max_time']:
                stats['max_time'] = elapsed_ms

    def snapshot(self):
        with self._lock:
            result = {}
            for func_name, stats in self._stats.items():
                calls = stats['calls']
                avg = stats['total_time'] / calls if calls > 0 else 0
                result[func_name] = {
                    'calls': calls,
                    'avg_time': round(avg, 2),
                    'max_time': round(stats['max_time'], 2)
                }
            return result

    def reset(self):
        with self._lock:
            self._stats.clear()


_default_stats = FunctionStats()


def _stats_for(app=None):
    """Estadísticas de la app indicada, de la app activa o las globales."""
    if app is None and has_app_context():
        app = current_app._get_current_object()
    if app is not None:
        return app.extensions.get(STATS_KEY, _default_stats)
    return _default_stats


def _get_route_name(method, path, rule=None):
    """
    Obtiene nombre legible para una ruta.
    Usa la regla de Flask (con parámetros) y si no, la ruta raw.
    """
    for candidate in (rule, path):
        if candidate and f"{method} {candidate}" in ROUTE_NAMES:
            return ROUTE_NAMES[f"{method} {candidate}"]
    return f"{method} {path}"


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app, threshold_ms=DEFAULT_THRESHOLD_MS):
    """
    Registra hooks before_request y after_request en la app Flask.

    - Toda petición se registra en DEBUG con su tiempo.
    - Más de threshold_ms → WARNING; más del doble → ERROR.

    Uso:
        from app_pdv.performance_logger import init_profiling
        init_profiling(app, threshold_ms=300)
    """
    from flask import g, request, session

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms
        rule = str(request.url_rule) if request.url_rule else None
        action = _get_route_name(request.method, request.path, rule)
        user = session.get('user_id') or 'anónimo'

        if elapsed >= threshold_ms * 2:
            level = logging.ERROR
        elif elapsed >= threshold_ms:
            level = logging.WARNING
        else:
            level = logging.DEBUG

        logger.log(
            level,
            '%s | usuario=%s | %s %s | %d | %.0f ms',
            action, user, request.method, request.path,
            response.status_code, elapsed
        )
        return response


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Cerrar caja")
        def close_register():
            ...

    Registra:
        - Cantidad de llamadas
        - Tiempo promedio
        - Tiempo máximo
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                _stats_for().record(func_name, elapsed_ms)
                if elapsed_ms >= DEFAULT_THRESHOLD_MS:
                    logger.warning('Función lenta: %s (%.0f ms)', func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats(app=None):
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Args:
        app: App Flask (por defecto la activa; sin app, las globales)

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    return _stats_for(app).snapshot()


def reset_stats(app=None):
    """Reinicia las estadísticas (útil para testing)"""
    _stats_for(app).reset()


__all__ = [
    'FunctionStats',
    'STATS_KEY',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]

