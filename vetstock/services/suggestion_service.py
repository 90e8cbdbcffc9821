# ==============================================================================
# SERVICIO DE SUGERENCIAS DE PEDIDO (IA)
# ==============================================================================
# Arma el prompt del gerente de inventario, lo envía al proveedor de IA y
# valida la forma de la respuesta:
#   {"suggestedOrderQuantity": número >= 0, "reasoning": texto}
# Cualquier falla del proveedor se informa con un único mensaje genérico.
# ==============================================================================

import json
import logging
from typing import Any, Dict, Optional

from ..exceptions import SuggestionUnavailableError
from ..performance_logger import profile_function
from ..repositories.interfaces import IProductRepository, ISuggestionProvider
from ..utils import to_number

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = 'No se pudo obtener la sugerencia. Por favor, intenta de nuevo.'

# Multiplicador esperado de ventas por mes (1-12)
DEFAULT_SEASONAL_TRENDS = {
    '1': 1.0, '2': 1.0, '3': 1.2, '4': 1.3, '5': 1.4, '6': 1.5,
    '7': 1.4, '8': 1.3, '9': 1.2, '10': 1.1, '11': 1.2, '12': 1.3,
}

PROMPT_TEMPLATE = """Eres un experto gerente de inventario para una tienda veterinaria. Basándote en los datos históricos de ventas, el nivel de stock actual y las tendencias estacionales proporcionadas, sugiere una cantidad de pedido óptima para el producto dado.

ID del Producto: {product_id}
Nivel de Stock Actual: {current_stock}
Datos Históricos de Ventas (JSON):
{historical}

Tendencias Estacionales (JSON, Opcional):
{seasonal}

Considera toda la información disponible para proporcionar una cantidad de pedido sugerida bien razonada. Tu razonamiento debe ser claro y conciso.

Devuelve un objeto con las claves "suggestedOrderQuantity" (número) y "reasoning" (texto).

Responde en formato JSON.
"""


def build_prompt(product_id: str, current_stock: Any, historical_sales_json: Optional[str],
                 seasonal_trends_json: Optional[str] = None) -> str:
    """Prompt en español con los datos del producto."""
    historical = (historical_sales_json or '').strip()
    seasonal = (seasonal_trends_json or '').strip()
    return PROMPT_TEMPLATE.format(
        product_id=product_id,
        current_stock=current_stock,
        historical=historical or 'No se proporcionaron datos históricos de ventas.',
        seasonal=seasonal or 'No se proporcionaron tendencias estacionales.',
    )


def parse_suggestion(data: Any) -> Dict[str, Any]:
    """
    Valida la respuesta del modelo.

    Raises:
        SuggestionUnavailableError: Si falta un campo o tiene tipo incorrecto
    """
    if not isinstance(data, dict):
        raise SuggestionUnavailableError('Respuesta sin formato de objeto')
    quantity = data.get('suggestedOrderQuantity')
    reasoning = data.get('reasoning')
    number = to_number(quantity) if isinstance(quantity, (int, float)) else None
    if number is None or number < 0:
        raise SuggestionUnavailableError(f'suggestedOrderQuantity inválido: {quantity!r}')
    if not isinstance(reasoning, str):
        raise SuggestionUnavailableError('reasoning inválido')
    return {
        'suggested_order_quantity': int(round(number)),
        'reasoning': reasoning,
    }


class SuggestionService:
    """Sugerencia de cantidades de pedido mediante un modelo generativo."""

    def __init__(self, provider: ISuggestionProvider, product_repo: IProductRepository = None):
        self.provider = provider
        self.product_repo = product_repo

    def _request(self, prompt: str) -> Dict[str, Any]:
        try:
            data = self.provider.complete_json(prompt)
            return parse_suggestion(data)
        except SuggestionUnavailableError:
            raise
        except Exception as exc:
            raise SuggestionUnavailableError(str(exc)) from exc

    @profile_function(name="Sugerir cantidad de pedido")
    def suggest_order_quantity(self, product_id: str, current_stock: Any,
                               historical_sales_json: Optional[str],
                               seasonal_trends_json: Optional[str] = None) -> Dict[str, Any]:
        """
        Pide al modelo una cantidad de pedido sugerida.

        Args:
            product_id: ID del producto
            current_stock: Stock actual
            historical_sales_json: JSON fecha -> unidades vendidas
            seasonal_trends_json: JSON mes -> multiplicador (opcional)

        Returns:
            {'ok': True, 'suggested_order_quantity': int, 'reasoning': str}
            o {'ok': False, 'error': mensaje genérico}
        """
        prompt = build_prompt(product_id, current_stock, historical_sales_json, seasonal_trends_json)
        try:
            suggestion = self._request(prompt)
        except SuggestionUnavailableError:
            logger.exception("Sugerencia no disponible para %s", product_id)
            return {'ok': False, 'error': UNAVAILABLE_MESSAGE, 'unavailable': True}

        logger.info("Sugerencia para %s: %d unidades", product_id,
                    suggestion['suggested_order_quantity'])
        return dict(suggestion, ok=True)

    def suggest_for_product(self, product_id: str) -> Dict[str, Any]:
        """Sugerencia usando el historial del producto y las tendencias por defecto."""
        product = self.product_repo.get_by_id(product_id) if self.product_repo else None
        if product is None:
            return {'ok': False, 'error': 'Producto no encontrado', 'not_found': True}
        return self.suggest_order_quantity(
            product_id,
            product.get('stock', 0),
            json.dumps(product.get('sales_history') or {}),
            json.dumps(DEFAULT_SEASONAL_TRENDS),
        )
