# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Los servicios dependen de interfaces de repositorio, no de archivos.
# Devuelven diccionarios de resultado {'ok': bool, ...} para que las rutas
# solo traduzcan request → service → response.
# ==============================================================================

from .inventory_service import InventoryService
from .sales_service import SalesService
from .cart_service import CartService
from .order_service import OrderService
from .user_service import UserService
from .bank_account_service import BankAccountService
from .calendar_service import CalendarService
from .stats_service import StatsService
from .suggestion_service import SuggestionService
from .auth import (
    MemorySessionStore,
    FlaskSessionStore,
    PlaintextCredentialVerifier,
    HashedCredentialVerifier,
    get_credential_verifier,
)

__all__ = [
    'InventoryService',
    'SalesService',
    'CartService',
    'OrderService',
    'UserService',
    'BankAccountService',
    'CalendarService',
    'StatsService',
    'SuggestionService',
    'MemorySessionStore',
    'FlaskSessionStore',
    'PlaintextCredentialVerifier',
    'HashedCredentialVerifier',
    'get_credential_verifier',
]
