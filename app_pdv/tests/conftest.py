import pytest

from app_pdv.app_container import get_container
from app_pdv.main import create_app


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'PDV_SEED_DATA': False,
    'PDV_PROFILING': False,
}


@pytest.fixture
def app():
    """App con el store vacío."""
    return create_app(TEST_CONFIG)


@pytest.fixture
def seeded_app():
    """App con usuarios, catálogo, apertura de caja y 3 ventas de ejemplo."""
    return create_app(dict(TEST_CONFIG, PDV_SEED_DATA=True))


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def seeded_client(seeded_app):
    with seeded_app.test_client() as c:
        yield c


@pytest.fixture
def container(app):
    return get_container(app)


@pytest.fixture
def seeded_container(seeded_app):
    return get_container(seeded_app)


@pytest.fixture
def operator(container):
    """Operador registrado en el store vacío."""
    return container.user_service.register_user({
        'username': 'caixa',
        'password': 'segredo',
        'name': 'Operador de Caixa',
    })


@pytest.fixture
def category(container):
    return container.catalog_service.create_category({'name': 'Bebidas', 'icon': 'local_bar'})
