# -*- coding: utf-8 -*-
"""
Fixtures compartidas: contenedor en memoria con datos de demostración,
proveedor de IA falso y clientes Flask ya autenticados.
"""
import pytest

from vetstock.app_container import AppContainer
from vetstock.config import TestingConfig
from vetstock.main import create_app
from vetstock.services import FlaskSessionStore, MemorySessionStore


ADMIN_EMAIL = 'diana@admin.com'
ADMIN_PASSWORD = 'Zaru2025'


class FakeProvider:
    """Proveedor de IA que devuelve una respuesta fija o lanza un error."""

    name = 'fake'

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {
            'suggestedOrderQuantity': 12,
            'reasoning': 'Ventas estables con alza estacional.',
        }
        self.error = error
        self.prompts = []

    def complete_json(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def container(provider):
    """Contenedor aislado con sesión en memoria."""
    return AppContainer(TestingConfig, session_store=MemorySessionStore(),
                        suggestion_provider=provider)


@pytest.fixture
def app(provider):
    web_container = AppContainer(TestingConfig, session_store=FlaskSessionStore(),
                                 suggestion_provider=provider)
    return create_app(TestingConfig, container=web_container)


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


def login(client, email, password):
    """Inicia sesión y deja el token CSRF en las cabeceras del cliente."""
    r = client.post('/api/login', json={'email': email, 'password': password})
    if r.status_code == 200:
        client.environ_base['HTTP_X_CSRF_TOKEN'] = r.get_json()['csrf_token']
    return r


@pytest.fixture
def admin_client(client):
    r = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert r.status_code == 200
    return client


@pytest.fixture
def employee_client(client):
    r = login(client, 'donato@gmail.com', '123')
    assert r.status_code == 200
    return client
