# ==============================================================================
# APLICACIÓN FLASK - API JSON del punto de venta
# ==============================================================================
# create_app() arma la app: configuración, logging, profiling, contenedor
# de dependencias, datos de ejemplo y el blueprint /api.
#
# Las rutas solo leen la petición y delegan en los servicios. Los errores
# (ValidationError, NotFoundError, ...) se convierten en JSON en los
# error handlers registrados al final de create_app().
# ==============================================================================

import logging
from typing import Any, Mapping, Optional, Tuple

from flask import Blueprint, Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from app_pdv.app_container import EXTENSION_KEY, AppContainer, get_container
from app_pdv.config import load_config, server_options
from app_pdv.errors import AuthenticationError, FieldErrors, PdvError
from app_pdv.models.money import parse_timestamp
from app_pdv.performance_logger import STATS_KEY, FunctionStats, init_profiling
from app_pdv.seed_data import seed
from app_pdv.services import parse_category_filter

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')


# ═══════════════════════════════════════════════════════════════════════════
# AUXILIARES DE PETICIÓN
# ═══════════════════════════════════════════════════════════════════════════

def _json_body() -> Any:
    """Cuerpo JSON de la petición (None si falta o está mal formado)."""
    return request.get_json(silent=True)


def _date_range() -> Tuple[Any, Any]:
    """
    Lee ?startDate= y ?endDate= de la query string.

    Una fecha sin hora en endDate cubre el día completo.

    Raises:
        ValidationError: Si alguna fecha no es válida
    """
    errors = FieldErrors()
    bounds = {}
    for key, end_of_day in (('startDate', False), ('endDate', True)):
        try:
            bounds[key] = parse_timestamp(request.args.get(key), end_of_day=end_of_day)
        except ValueError:
            errors.add(key, 'Fecha inválida (use AAAA-MM-DD o ISO-8601)')
    errors.raise_if_any('Filtro de fechas inválido')
    return bounds['startDate'], bounds['endDate']


def _created(entity):
    return jsonify(entity.to_dict()), 201


# ═══════════════════════════════════════════════════════════════════════════
# AUTENTICACIÓN
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/login', methods=['POST'])
def login():
    data = _json_body()
    if not isinstance(data, dict):
        data = {}
    user = get_container().user_service.authenticate(data.get('username'), data.get('password'))
    session['user_id'] = user.id
    return jsonify(user.to_dict())


@api.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'message': 'Sesión cerrada'})


@api.route('/me', methods=['GET'])
def me():
    user = get_container().user_service.find_user(session.get('user_id'))
    if user is None:
        raise AuthenticationError('No hay sesión activa')
    return jsonify(user.to_dict())


# ═══════════════════════════════════════════════════════════════════════════
# CATÁLOGO
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/categories', methods=['GET'])
def list_categories():
    categories = get_container().catalog_service.list_categories()
    return jsonify([c.to_dict() for c in categories])


@api.route('/categories/<int:category_id>', methods=['GET'])
def get_category(category_id):
    return jsonify(get_container().catalog_service.get_category(category_id).to_dict())


@api.route('/categories', methods=['POST'])
def create_category():
    return _created(get_container().catalog_service.create_category(_json_body()))


@api.route('/products', methods=['GET'])
def list_products():
    category_id = parse_category_filter(request.args.get('categoryId'))
    products = get_container().catalog_service.list_products(category_id)
    return jsonify([p.to_dict() for p in products])


@api.route('/products/<int:product_id>', methods=['GET'])
def get_product(product_id):
    return jsonify(get_container().catalog_service.get_product(product_id).to_dict())


@api.route('/products', methods=['POST'])
def create_product():
    return _created(get_container().catalog_service.create_product(_json_body()))


# ═══════════════════════════════════════════════════════════════════════════
# CARRITO (en la sesión)
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/cart', methods=['GET'])
def get_cart():
    return jsonify(get_container().cart_service.get_cart())


@api.route('/cart/items', methods=['POST'])
def add_cart_item():
    return jsonify(get_container().cart_service.add_item(_json_body()))


@api.route('/cart/items/<int:product_id>', methods=['PATCH'])
def update_cart_item(product_id):
    return jsonify(get_container().cart_service.update_quantity(product_id, _json_body()))


@api.route('/cart/items/<int:product_id>', methods=['DELETE'])
def remove_cart_item(product_id):
    return jsonify(get_container().cart_service.remove_item(product_id))


@api.route('/cart', methods=['DELETE'])
def clear_cart():
    return jsonify(get_container().cart_service.clear())


@api.route('/cart/checkout', methods=['POST'])
def checkout():
    return _created(get_container().cart_service.checkout(_json_body()))


# ═══════════════════════════════════════════════════════════════════════════
# VENTAS
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/sales', methods=['GET'])
def list_sales():
    start, end = _date_range()
    sales = get_container().sales_service.list_sales(start, end)
    return jsonify([s.to_dict() for s in sales])


@api.route('/sales/<int:sale_id>', methods=['GET'])
def get_sale(sale_id):
    return jsonify(get_container().sales_service.get_sale(sale_id).to_dict())


@api.route('/sales', methods=['POST'])
def create_sale():
    return _created(get_container().sales_service.record_sale(_json_body()))


# ═══════════════════════════════════════════════════════════════════════════
# CAJA
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/cash-transactions', methods=['GET'])
def list_cash_transactions():
    start, end = _date_range()
    transactions = get_container().cash_service.list_transactions(start, end)
    return jsonify([t.to_dict() for t in transactions])


@api.route('/cash-transactions', methods=['POST'])
def create_cash_transaction():
    return _created(get_container().cash_service.record_transaction(_json_body()))


@api.route('/daily-registers', methods=['GET'])
def list_daily_registers():
    start, end = _date_range()
    registers = get_container().register_service.list_registers(start, end)
    return jsonify([r.to_dict() for r in registers])


@api.route('/daily-registers', methods=['POST'])
def close_register():
    return _created(get_container().register_service.close_register_from_payload(_json_body()))


@api.route('/register-summary', methods=['GET'])
def register_summary():
    return jsonify(get_container().register_service.compute_summary().to_dict())


# ═══════════════════════════════════════════════════════════════════════════
# MANEJO DE ERRORES
# ═══════════════════════════════════════════════════════════════════════════

def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(PdvError)
    def _handle_pdv_error(error):
        if error.status_code >= 500:
            logger.error('Error interno: %s', error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def _handle_unexpected(error):
        logger.exception('Error no controlado en %s %s', request.method, request.path)
        return jsonify({'message': 'Error interno del servidor'}), 500


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    logging.getLogger('app_pdv').setLevel(level)


# ═══════════════════════════════════════════════════════════════════════════
# FACTORY
# ═══════════════════════════════════════════════════════════════════════════

def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Crea la aplicación Flask.

    Args:
        overrides: Claves de configuración que reemplazan el entorno
            (ej: {'TESTING': True, 'PDV_SEED_DATA': False})

    Returns:
        App lista para servir, con su propio store en memoria
    """
    config = load_config(overrides)
    _configure_logging(config['PDV_LOG_LEVEL'])

    app = Flask(__name__)
    app.config.update(config)
    app.extensions[STATS_KEY] = FunctionStats()

    # Mide rendimiento de rutas (logger app_pdv.performance)
    if app.config['PDV_PROFILING']:
        init_profiling(app, threshold_ms=app.config['PDV_SLOW_REQUEST_MS'])

    container = AppContainer()
    app.extensions[EXTENSION_KEY] = container
    if app.config['PDV_SEED_DATA']:
        with app.app_context():
            seed(container)

    app.register_blueprint(api)
    _register_error_handlers(app)

    logger.info(
        'App PDV creada (producción=%s, datos de ejemplo=%s)',
        app.config['PDV_PRODUCTION_MODE'], app.config['PDV_SEED_DATA']
    )
    return app


if __name__ == "__main__":
    # Configuración para desarrollo local y acceso desde red WiFi
    # En producción usar WSGI (gunicorn wsgi:app)
    options = server_options()

    if not options['debug']:
        print(f"\n{'='*50}")
        print(f"  Servidor iniciado en http://{options['host']}:{options['port']}")
        print(f"  Acceso local: http://localhost:{options['port']}")
        print(f"{'='*50}\n")

    create_app().run(**options)
