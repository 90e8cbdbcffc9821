# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (contenedor nuevo en memoria por test, IA falsa)
#   - Cambiar de backend (memoria / JSON) sin tocar servicios
#
# BACKENDS:
#   DATA_BACKEND = 'memory' → listas en el proceso (se pierden al reiniciar)
#   DATA_BACKEND = 'json'   → un archivo por agregado en DATA_DIR
# ==============================================================================

import logging
import os
from typing import Optional

from .config import Config

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia
# ═══════════════════════════════════════════════════════════════════════════════
from .repositories import (
    ProductRepository,
    SalesRepository,
    OrderRepository,
    UserRepository,
    BankAccountRepository,
    CalendarRepository,
    ISessionStore,
    ISuggestionProvider,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from .services import (
    InventoryService,
    SalesService,
    CartService,
    OrderService,
    UserService,
    BankAccountService,
    CalendarService,
    StatsService,
    SuggestionService,
    MemorySessionStore,
    get_credential_verifier,
)
from .services import seed_data
from .ai import OpenAIProvider

logger = logging.getLogger(__name__)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Repositorios y servicios se crean la primera vez que se piden y se
    reutilizan después. Para la app se usa una instancia global
    (get_container); los tests crean contenedores propios.

    Uso:
        container = AppContainer(TestingConfig)
        inventory_service = container.inventory_service
        sales_service = container.sales_service
    """

    _instance: Optional['AppContainer'] = None

    def __init__(self, config=None, session_store: ISessionStore = None,
                 suggestion_provider: ISuggestionProvider = None):
        """
        Inicializa el contenedor.

        Args:
            config: Clase u objeto de configuración (Config por defecto)
            session_store: Sesión para usuario actual y carrito
                           (MemorySessionStore por defecto)
            suggestion_provider: Proveedor de IA (OpenAIProvider por defecto)
        """
        self.config = config or Config
        self.session_store = session_store or MemorySessionStore()
        self._suggestion_provider = suggestion_provider
        self.verifier = get_credential_verifier(self.config.CREDENTIAL_SCHEME)

        # Inicializar repositorios (lazy loading)
        self._product_repo: Optional[ProductRepository] = None
        self._sales_repo: Optional[SalesRepository] = None
        self._order_repo: Optional[OrderRepository] = None
        self._user_repo: Optional[UserRepository] = None
        self._bank_account_repo: Optional[BankAccountRepository] = None
        self._calendar_repo: Optional[CalendarRepository] = None

        # Inicializar servicios (lazy loading)
        self._inventory_service: Optional[InventoryService] = None
        self._sales_service: Optional[SalesService] = None
        self._cart_service: Optional[CartService] = None
        self._order_service: Optional[OrderService] = None
        self._user_service: Optional[UserService] = None
        self._bank_account_service: Optional[BankAccountService] = None
        self._calendar_service: Optional[CalendarService] = None
        self._stats_service: Optional[StatsService] = None
        self._suggestion_service: Optional[SuggestionService] = None

    # =========================================================================
    # CONFIGURACIÓN DE DATOS
    # =========================================================================

    @property
    def data_dir(self) -> Optional[str]:
        """Carpeta de datos, o None con el backend en memoria."""
        if self.config.DATA_BACKEND == 'json':
            return self.config.DATA_DIR
        return None

    def _seed(self, loader):
        return loader() if self.config.SEED_DEMO_DATA else []

    def _seed_users(self):
        users = self._seed(seed_data.demo_users)
        for user in users:
            user['password'] = self.verifier.prepare(user['password'])
        return users

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def product_repo(self) -> ProductRepository:
        """Repositorio de productos (singleton)."""
        if self._product_repo is None:
            self._product_repo = ProductRepository(self.data_dir, self._seed(seed_data.demo_products))
        return self._product_repo

    @property
    def sales_repo(self) -> SalesRepository:
        """Repositorio de ventas (singleton)."""
        if self._sales_repo is None:
            self._sales_repo = SalesRepository(self.data_dir)
        return self._sales_repo

    @property
    def order_repo(self) -> OrderRepository:
        """Repositorio de pedidos (singleton)."""
        if self._order_repo is None:
            self._order_repo = OrderRepository(self.data_dir)
        return self._order_repo

    @property
    def user_repo(self) -> UserRepository:
        """Repositorio de usuarios (singleton)."""
        if self._user_repo is None:
            self._user_repo = UserRepository(self.data_dir, self._seed_users())
        return self._user_repo

    @property
    def bank_account_repo(self) -> BankAccountRepository:
        """Repositorio de cuentas bancarias (singleton)."""
        if self._bank_account_repo is None:
            self._bank_account_repo = BankAccountRepository(
                self.data_dir, self._seed(seed_data.demo_bank_accounts)
            )
        return self._bank_account_repo

    @property
    def calendar_repo(self) -> CalendarRepository:
        """Repositorio de calendario (singleton)."""
        if self._calendar_repo is None:
            self._calendar_repo = CalendarRepository(self.data_dir)
        return self._calendar_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def suggestion_provider(self) -> ISuggestionProvider:
        if self._suggestion_provider is None:
            self._suggestion_provider = OpenAIProvider(
                api_key=self.config.OPENAI_API_KEY,
                model=self.config.OPENAI_MODEL,
                timeout=self.config.AI_TIMEOUT,
            )
        return self._suggestion_provider

    @property
    def inventory_service(self) -> InventoryService:
        """Servicio de inventario (singleton)."""
        if self._inventory_service is None:
            self._inventory_service = InventoryService(
                self.product_repo,
                per_page=self.config.PRODUCTS_PER_PAGE,
                low_stock_threshold=self.config.LOW_STOCK_THRESHOLD,
            )
        return self._inventory_service

    @property
    def user_service(self) -> UserService:
        """Servicio de usuarios (singleton)."""
        if self._user_service is None:
            self._user_service = UserService(
                self.user_repo,
                self.session_store,
                verifier=self.verifier,
                session_key=self.config.SESSION_USER_KEY,
                default_admin_id=self.config.DEFAULT_ADMIN_ID,
            )
        return self._user_service

    @property
    def sales_service(self) -> SalesService:
        """Servicio de ventas (singleton)."""
        if self._sales_service is None:
            self._sales_service = SalesService(
                self.sales_repo,
                self.product_repo,
                self.user_service,
                self.bank_account_repo,
            )
        return self._sales_service

    @property
    def cart_service(self) -> CartService:
        """Servicio de carrito (singleton)."""
        if self._cart_service is None:
            self._cart_service = CartService(
                self.inventory_service,
                self.sales_service,
                self.session_store,
            )
        return self._cart_service

    @property
    def order_service(self) -> OrderService:
        """Servicio de pedidos (singleton)."""
        if self._order_service is None:
            self._order_service = OrderService(self.order_repo, self.product_repo)
        return self._order_service

    @property
    def bank_account_service(self) -> BankAccountService:
        if self._bank_account_service is None:
            self._bank_account_service = BankAccountService(self.bank_account_repo)
        return self._bank_account_service

    @property
    def calendar_service(self) -> CalendarService:
        if self._calendar_service is None:
            self._calendar_service = CalendarService(self.calendar_repo)
        return self._calendar_service

    @property
    def stats_service(self) -> StatsService:
        """Servicio de estadísticas (singleton)."""
        if self._stats_service is None:
            self._stats_service = StatsService(
                self.sales_repo,
                self.order_repo,
                self.product_repo,
                low_stock_threshold=self.config.LOW_STOCK_THRESHOLD,
            )
        return self._stats_service

    @property
    def suggestion_service(self) -> SuggestionService:
        """Servicio de sugerencias IA (singleton)."""
        if self._suggestion_service is None:
            self._suggestion_service = SuggestionService(self.suggestion_provider, self.product_repo)
        return self._suggestion_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia todas las instancias.
        Con backend en memoria esto vuelve a los datos iniciales.
        """
        self._product_repo = None
        self._sales_repo = None
        self._order_repo = None
        self._user_repo = None
        self._bank_account_repo = None
        self._calendar_repo = None

        self._inventory_service = None
        self._sales_service = None
        self._cart_service = None
        self._order_service = None
        self._user_service = None
        self._bank_account_service = None
        self._calendar_service = None
        self._stats_service = None
        self._suggestion_service = None

    @classmethod
    def get_instance(cls, config=None, session_store: ISessionStore = None) -> 'AppContainer':
        """
        Obtiene la instancia global del contenedor.

        Args:
            config: Configuración (solo se usa en la primera llamada)
            session_store: Sesión (solo se usa en la primera llamada)
        """
        if cls._instance is None:
            cls._instance = cls(config, session_store=session_store)
            if cls._instance.data_dir:
                os.makedirs(cls._instance.data_dir, exist_ok=True)
                logger.info("Datos en %s", cls._instance.data_dir)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia global (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


# Función helper para obtener el contenedor global
def get_container(config=None, session_store: ISessionStore = None) -> AppContainer:
    """
    Obtiene el contenedor de dependencias global.

    Returns:
        Instancia del contenedor
    """
    return AppContainer.get_instance(config, session_store)
