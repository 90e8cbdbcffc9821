"""Adaptadores de modelos generativos para sugerencias de inventario."""

from .provider_base import SuggestionProvider
from .openai_provider import OpenAIProvider

__all__ = ['SuggestionProvider', 'OpenAIProvider']
