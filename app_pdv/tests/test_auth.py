# -*- coding: utf-8 -*-
"""
Test de autenticación - Verifica hash de contraseñas, login y sesión
"""
import pytest
from werkzeug.security import check_password_hash

from app_pdv.errors import AuthenticationError, ValidationError


def test_password_is_hashed(container, operator):
    stored = container.user_repo.get_by_id(operator.id)
    assert stored.password_hash != 'segredo'
    assert check_password_hash(stored.password_hash, 'segredo')
    assert 'password' not in operator.to_dict()
    assert 'password_hash' not in operator.to_dict()


def test_authenticate(container, operator):
    user = container.user_service.authenticate('caixa', 'segredo')
    assert user.id == operator.id
    assert user.to_dict() == {
        'id': operator.id, 'username': 'caixa', 'name': 'Operador de Caixa', 'isAdmin': False,
    }


@pytest.mark.parametrize('username,password', [
    ('caixa', 'errada'),
    ('ninguem', 'segredo'),
])
def test_bad_credentials_same_message(container, operator, username, password):
    with pytest.raises(AuthenticationError) as exc:
        container.user_service.authenticate(username, password)
    assert exc.value.message == 'Usuario o contraseña inválidos'
    assert exc.value.status_code == 401


def test_missing_credentials(container):
    with pytest.raises(ValidationError) as exc:
        container.user_service.authenticate('', None)
    assert set(exc.value.errors) == {'username', 'password'}


def test_register_rejects_duplicate(container, operator):
    with pytest.raises(ValidationError) as exc:
        container.user_service.register_user({'username': 'caixa', 'password': 'x', 'name': 'Outro'})
    assert exc.value.errors == {'username': 'El usuario ya existe'}


def test_register_admin(container):
    admin = container.user_service.register_user({
        'username': 'admin', 'password': 'password', 'name': 'Administrador', 'isAdmin': True,
    })
    assert admin.is_admin is True
    assert container.user_service.operator_exists(admin.id)
    assert not container.user_service.operator_exists(admin.id + 1)


def test_login_session(seeded_client):
    r = seeded_client.get('/api/me')
    assert r.status_code == 401

    r = seeded_client.post('/api/login', json={'username': 'admin', 'password': 'password'})
    assert r.status_code == 200
    assert r.get_json() == {'id': 1, 'username': 'admin', 'name': 'Administrador', 'isAdmin': True}

    r = seeded_client.get('/api/me')
    assert r.status_code == 200
    assert r.get_json()['username'] == 'admin'

    r = seeded_client.post('/api/logout')
    assert r.status_code == 200
    assert seeded_client.get('/api/me').status_code == 401


def test_login_errors(seeded_client):
    r = seeded_client.post('/api/login', json={'username': 'vendedor', 'password': 'errada'})
    assert r.status_code == 401
    assert r.get_json() == {'message': 'Usuario o contraseña inválidos'}

    r = seeded_client.post('/api/login', json={'username': 'vendedor'})
    assert r.status_code == 400
    assert 'password' in r.get_json()['errors']

    r = seeded_client.post('/api/login', data='no es json', content_type='application/json')
    assert r.status_code == 400
