# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (memoria o JSON).
#
# ESTRUCTURA:
# ├── interfaces.py                → Protocolos (contratos)
# ├── base.py                      → BaseRepository (lista + atomic())
# ├── product_repository.py        → products.json
# ├── sales_repository.py          → sales.json
# ├── order_repository.py          → orders.json
# ├── user_repository.py           → users.json
# ├── bank_account_repository.py   → bank_accounts.json
# └── calendar_repository.py       → calendar_events.json
# ==============================================================================

from .interfaces import (
    IRepository,
    IProductRepository,
    ISalesRepository,
    IOrderRepository,
    IUserRepository,
    ICalendarRepository,
    ISessionStore,
    ICredentialVerifier,
    ISuggestionProvider,
)

from .base import BaseRepository
from .product_repository import ProductRepository
from .sales_repository import SalesRepository
from .order_repository import OrderRepository
from .user_repository import UserRepository
from .bank_account_repository import BankAccountRepository
from .calendar_repository import CalendarRepository

__all__ = [
    # Interfaces
    'IRepository',
    'IProductRepository',
    'ISalesRepository',
    'IOrderRepository',
    'IUserRepository',
    'ICalendarRepository',
    'ISessionStore',
    'ICredentialVerifier',
    'ISuggestionProvider',

    # Clase base
    'BaseRepository',

    # Implementaciones
    'ProductRepository',
    'SalesRepository',
    'OrderRepository',
    'UserRepository',
    'BankAccountRepository',
    'CalendarRepository',
]
