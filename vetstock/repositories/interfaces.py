# ==============================================================================
# INTERFACES DE REPOSITORIOS Y COLABORADORES
# ==============================================================================
#
# Los servicios dependen de estos protocolos, NO de implementaciones concretas:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Memoria (tests, demo) o archivos JSON, elegido en app_container.py
#
# 2. TESTING
#    - Fácil crear dobles (sesión en memoria, proveedor de IA falso)
#
# ==============================================================================

from contextlib import AbstractContextManager
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable


# ==============================================================================
# INTERFAZ BASE
# ==============================================================================

@runtime_checkable
class IRepository(Protocol):
    """Operaciones mínimas de cualquier repositorio de lista."""

    def get_all(self) -> List[Dict[str, Any]]:
        ...

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        ...

    def count(self) -> int:
        ...

    def append(self, record: Dict[str, Any]) -> None:
        ...

    def prepend(self, record: Dict[str, Any]) -> None:
        ...

    def update(self, record_id: str, record_data: Dict[str, Any]) -> bool:
        ...

    def delete(self, record_id: str) -> Optional[Dict[str, Any]]:
        ...

    def filter(self, predicate: Callable[[Dict[str, Any]], bool]) -> List[Dict[str, Any]]:
        ...

    def next_sequential_id(self, prefix: str, width: int = 3) -> str:
        ...

    def atomic(self) -> AbstractContextManager:
        """Bloque transaccional por agregado."""
        ...


# ==============================================================================
# INTERFACES ESPECÍFICAS POR DOMINIO
# ==============================================================================

@runtime_checkable
class IProductRepository(IRepository, Protocol):

    def find_by_barcode(self, barcode: str) -> Optional[Dict[str, Any]]:
        ...

    def search(self, text: str = '', category: str = '') -> List[Dict[str, Any]]:
        ...

    def low_stock(self, threshold: int) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class ISalesRepository(IRepository, Protocol):

    def add_many(self, records: List[Dict[str, Any]]) -> None:
        ...

    def in_range(self, start=None, end=None) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class IOrderRepository(IRepository, Protocol):

    def by_status(self, status: str) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class IUserRepository(IRepository, Protocol):

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        ...

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        ...

    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        ...


@runtime_checkable
class ICalendarRepository(IRepository, Protocol):

    def on_day(self, day: str) -> List[Dict[str, Any]]:
        ...


# ==============================================================================
# SESIÓN, CREDENCIALES E IA
# ==============================================================================

@runtime_checkable
class ISessionStore(Protocol):
    """
    Almacén clave -> valor de la sesión actual.
    Implementaciones: MemorySessionStore, FlaskSessionStore.
    """

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


@runtime_checkable
class ICredentialVerifier(Protocol):
    """Compara y prepara contraseñas almacenadas."""

    def verify(self, stored: str, given: str) -> bool:
        ...

    def prepare(self, password: str) -> str:
        """Transforma la contraseña a como se guarda."""
        ...


@runtime_checkable
class ISuggestionProvider(Protocol):
    """Modelo generativo que responde un prompt con un objeto JSON."""

    def complete_json(self, prompt: str) -> Dict[str, Any]:
        ...
