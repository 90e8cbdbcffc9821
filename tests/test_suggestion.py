# -*- coding: utf-8 -*-
"""
Test de sugerencias IA - Se usa un proveedor falso, nunca la red
"""
import json

import pytest

from vetstock.ai import OpenAIProvider
from vetstock.exceptions import ProviderError
from vetstock.services.suggestion_service import (
    UNAVAILABLE_MESSAGE,
    SuggestionService,
    build_prompt,
)
from tests.conftest import FakeProvider


def test_prompt_incluye_datos_y_textos_por_defecto():
    prompt = build_prompt('prod-001', 2, '{"2024-07-01": 3}', None)
    assert 'ID del Producto: prod-001' in prompt
    assert 'Nivel de Stock Actual: 2' in prompt
    assert '{"2024-07-01": 3}' in prompt
    assert 'No se proporcionaron tendencias estacionales.' in prompt
    assert 'formato JSON' in prompt


def test_sugerencia_exitosa(container, provider):
    result = container.suggestion_service.suggest_order_quantity('prod-001', 2, '{}', '{"7": 1.4}')
    assert result == {
        'ok': True,
        'suggested_order_quantity': 12,
        'reasoning': 'Ventas estables con alza estacional.',
    }
    assert len(provider.prompts) == 1


def test_cantidad_decimal_se_redondea():
    service = SuggestionService(FakeProvider({'suggestedOrderQuantity': 7.6, 'reasoning': 'ok'}))
    assert service.suggest_order_quantity('prod-001', 1, None)['suggested_order_quantity'] == 8


@pytest.mark.parametrize('response', [
    {'reasoning': 'sin cantidad'},
    {'suggestedOrderQuantity': -2, 'reasoning': 'negativa'},
    {'suggestedOrderQuantity': 'diez', 'reasoning': 'texto'},
    {'suggestedOrderQuantity': float('nan'), 'reasoning': 'nan'},
    {'suggestedOrderQuantity': float('inf'), 'reasoning': 'infinito'},
    {'suggestedOrderQuantity': 5},
    ['no', 'es', 'objeto'],
])
def test_respuesta_malformada(response):
    service = SuggestionService(FakeProvider(response))
    result = service.suggest_order_quantity('prod-001', 1, '{}')
    assert result['ok'] is False
    assert result['error'] == UNAVAILABLE_MESSAGE


def test_error_del_proveedor():
    service = SuggestionService(FakeProvider(error=ProviderError('sin red')))
    result = service.suggest_order_quantity('prod-001', 1, '{}')
    assert result == {'ok': False, 'error': UNAVAILABLE_MESSAGE, 'unavailable': True}


def test_sugerencia_por_producto_usa_historial(container, provider):
    repo = container.product_repo
    product = repo.get_by_id('prod-004')
    product['sales_history'] = {'2024-07-01': 4}
    repo.update('prod-004', product)

    result = container.suggestion_service.suggest_for_product('prod-004')

    assert result['ok']
    assert json.dumps({'2024-07-01': 4}) in provider.prompts[0]
    assert 'Nivel de Stock Actual: 3' in provider.prompts[0]


def test_sugerencia_producto_inexistente(container, provider):
    result = container.suggestion_service.suggest_for_product('prod-404')
    assert result['not_found'] is True
    assert provider.prompts == []


def test_openai_sin_api_key():
    with pytest.raises(ProviderError):
        OpenAIProvider(api_key='').complete_json('hola')
