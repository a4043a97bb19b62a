import logging
from decimal import Decimal

from app_pdv import performance_logger
from app_pdv.app_container import get_container
from app_pdv.config import load_config
from app_pdv.main import create_app


def test_env_and_overrides(monkeypatch):
    monkeypatch.setenv('PDV_SEED_DATA', '0')
    monkeypatch.setenv('PDV_SLOW_REQUEST_MS', '120')
    monkeypatch.setenv('PDV_SECRET_KEY', 'abc')

    config = load_config({'PDV_PROFILING': False})
    assert config['PDV_SEED_DATA'] is False
    assert config['PDV_SLOW_REQUEST_MS'] == 120
    assert config['PDV_PROFILING'] is False
    assert config['SECRET_KEY'] == 'abc'


def test_production_without_secret_warns(monkeypatch, caplog):
    monkeypatch.delenv('PDV_SECRET_KEY', raising=False)
    monkeypatch.setenv('PDV_PRODUCTION_MODE', '1')

    with caplog.at_level(logging.WARNING, logger='app_pdv.config'):
        config = load_config()
    assert config['SECRET_KEY']
    assert 'PDV_SECRET_KEY' in caplog.text


def test_apps_do_not_share_store():
    first = create_app({'TESTING': True, 'PDV_SEED_DATA': False, 'PDV_PROFILING': False})
    second = create_app({'TESTING': True, 'PDV_SEED_DATA': True, 'PDV_PROFILING': False})
    assert get_container(first).sales_repo.count() == 0
    assert get_container(second).sales_repo.count() == 3


def test_profiled_functions_are_counted(app, container, operator):
    with app.app_context():
        container.register_service.close_register(Decimal('0'), operator.id)

    stats = performance_logger.get_function_stats(app)
    assert stats['Cerrar caja']['calls'] == 1
    assert stats['Calcular resumen de caja']['calls'] == 1

    performance_logger.reset_stats(app)
    assert performance_logger.get_function_stats(app) == {}


def test_function_stats_are_per_app(app, client, operator):
    other = create_app({'TESTING': True, 'PDV_SEED_DATA': False, 'PDV_PROFILING': False})

    r = client.post('/api/daily-registers', json={'closingBalance': 0, 'operatorId': operator.id})
    assert r.status_code == 201

    assert performance_logger.get_function_stats(app)['Cerrar caja']['calls'] == 1
    assert performance_logger.get_function_stats(other) == {}


def test_function_stats_outside_app(container):
    performance_logger.reset_stats()
    container.register_service.compute_summary()
    assert performance_logger.get_function_stats()['Calcular resumen de caja']['calls'] == 1


def test_request_profiling_logs_action(caplog):
    app = create_app({'TESTING': True, 'PDV_SEED_DATA': False, 'PDV_PROFILING': True})
    with caplog.at_level(logging.DEBUG, logger='app_pdv.performance'):
        app.test_client().get('/api/register-summary')
    assert 'Ver resumen de caja' in caplog.text
