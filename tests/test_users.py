# -*- coding: utf-8 -*-
"""
Test de usuarios - Login, sesión y protección del administrador por defecto
"""
import pytest

from vetstock.app_container import AppContainer
from vetstock.config import TestingConfig
from vetstock.services import HashedCredentialVerifier, MemorySessionStore, PlaintextCredentialVerifier

SESSION_KEY = TestingConfig.SESSION_USER_KEY


def _new_user(**overrides):
    data = {
        'name': 'Lucia',
        'email': 'lucia@vetstock.com',
        'role': 'Empleado',
        'password': 'secreto1',
        'confirm_password': 'secreto1',
    }
    data.update(overrides)
    return data


def test_login_email_sin_distinguir_mayusculas(container):
    user = container.user_service.login('DIANA@Admin.com', 'Zaru2025')
    assert user == {'id': 'user-admin', 'name': 'Diana', 'email': 'diana@admin.com', 'role': 'Admin'}
    assert container.session_store.get(SESSION_KEY) == 'user-admin'


def test_login_fallido_no_toca_la_sesion(container):
    service = container.user_service
    assert service.login('donato@gmail.com', '123') is not None

    assert service.login('diana@admin.com', 'zaru2025') is None
    assert service.login('nadie@vetstock.com', 'Zaru2025') is None

    assert container.session_store.get(SESSION_KEY) == 'user-001'


def test_logout_y_usuario_actual(container):
    service = container.user_service
    assert service.get_current_user() is None
    service.login('alex@vetstock.com', '123')
    assert service.get_current_user()['name'] == 'Alex'
    service.logout()
    assert service.get_current_user() is None


def test_crear_usuario(container):
    result = container.user_service.create_user(_new_user())
    assert result['ok']
    assert result['user']['id'] == 'user-006'
    assert 'password' not in result['user']
    assert container.user_repo.get_all()[-1]['email'] == 'lucia@vetstock.com'
    assert container.user_service.login('LUCIA@vetstock.com', 'secreto1') is not None


def test_crear_usuario_email_repetido(container):
    result = container.user_service.create_user(_new_user(email='Donato@Gmail.com'))
    assert result == {'ok': False, 'errors': {'email': 'Este correo electrónico ya está en uso.'}}


def test_crear_usuario_invalido(container):
    result = container.user_service.create_user(
        _new_user(name='L', email='sin-arroba', role='China', password='123', confirm_password='456')
    )
    assert set(result['errors']) == {'name', 'email', 'role', 'password', 'confirm_password'}


def test_admin_por_defecto_no_se_elimina(container):
    result = container.user_service.delete_user('user-admin')
    assert result['ok'] is False
    assert result['protected'] is True
    assert container.user_repo.get_by_id('user-admin') is not None


def test_admin_por_defecto_conserva_email_y_rol(container):
    result = container.user_service.update_user('user-admin', {
        'name': 'Diana R.',
        'email': 'otra@admin.com',
        'role': 'Empleado',
    })
    assert result['ok']
    stored = container.user_repo.get_by_id('user-admin')
    assert stored['name'] == 'Diana R.'
    assert stored['email'] == 'diana@admin.com'
    assert stored['role'] == 'Admin'


def test_editar_y_eliminar_otro_usuario(container):
    service = container.user_service
    result = service.update_user('user-002', {'role': 'Admin'})
    assert result['user']['role'] == 'Admin'

    conflict = service.update_user('user-002', {'email': 'maria@vetstock.com'})
    assert 'email' in conflict['errors']

    assert service.delete_user('user-002') == {'ok': True}
    assert service.delete_user('user-002')['not_found'] is True


def test_empleados_incluye_admin(container):
    names = [u['name'] for u in container.user_service.list_employees()]
    assert names == ['Diana', 'Donato', 'Alex', 'Maria', 'Jane']


def test_verificadores_de_credenciales():
    plain = PlaintextCredentialVerifier()
    assert plain.verify('abc', 'abc')
    assert not plain.verify('abc', 'ABC')
    assert not plain.verify(None, 'abc')

    hashed = HashedCredentialVerifier()
    stored = hashed.prepare('Zaru2025')
    assert stored != 'Zaru2025'
    assert hashed.verify(stored, 'Zaru2025')
    assert not hashed.verify(stored, 'otra')
    assert not hashed.verify('texto-plano', 'texto-plano')


def test_contenedor_con_contrasenas_hasheadas():
    class HashedConfig(TestingConfig):
        CREDENTIAL_SCHEME = 'hashed'

    container = AppContainer(HashedConfig, session_store=MemorySessionStore())
    stored = container.user_repo.get_by_id('user-admin')['password']

    assert stored != 'Zaru2025'
    assert container.user_service.login('diana@admin.com', 'Zaru2025') is not None
