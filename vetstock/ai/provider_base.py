"""Interfaz común para proveedores de IA."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class SuggestionProvider(ABC):
    """Proveedor que responde un prompt con un único objeto JSON."""

    name: str

    @abstractmethod
    def complete_json(self, prompt: str) -> Dict[str, Any]:  # pragma: no cover - interfaz
        """Envía el prompt y devuelve el objeto JSON de la respuesta.

        Raises:
            ProviderError: Si falta configuración, falla la red o la respuesta
                no es un objeto JSON.
        """
