# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================
# Todos los valores se leen de variables de entorno con un default seguro
# para desarrollo local.
#
# PRODUCCIÓN: definir al menos
#   export VETSTOCK_SECRET_KEY="clave_larga_y_aleatoria"
#   export VETSTOCK_PRODUCTION=1
# ==============================================================================

import os


BASE_DIR = os.path.dirname(os.path.abspath(__file__))

_DEFAULT_SECRET = "vetstock_dev_secret_key_change_in_production"


def _env_flag(name: str, default: bool) -> bool:
    """Interpreta una variable de entorno como booleano."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on', 'si', 'sí')


class Config:
    """Configuración base."""

    # ═══════════════════════════════════════════════════════════════════════
    # MODO Y SEGURIDAD
    # ═══════════════════════════════════════════════════════════════════════
    PRODUCTION_MODE = _env_flag('VETSTOCK_PRODUCTION', False)
    SECRET_KEY = os.environ.get('VETSTOCK_SECRET_KEY') or _DEFAULT_SECRET
    TESTING = False

    # Cookies de sesión (compatible con acceso por IP local)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_SAMESITE = 'Lax'
    # Token CSRF en escrituras de la API (se entrega en /api/login)
    CSRF_ENABLED = True
    PERMANENT_SESSION_LIFETIME = 86400  # 24 horas

    # Límite de subida para importaciones (5 MB)
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024

    # ═══════════════════════════════════════════════════════════════════════
    # DATOS
    # ═══════════════════════════════════════════════════════════════════════
    # 'memory' = listas en memoria del proceso; 'json' = archivos en DATA_DIR
    DATA_BACKEND = os.environ.get('VETSTOCK_DATA_BACKEND', 'memory')
    DATA_DIR = os.environ.get('VETSTOCK_DATA_DIR') or os.path.join(BASE_DIR, 'data')
    SEED_DEMO_DATA = _env_flag('VETSTOCK_SEED_DEMO', True)

    # Clave de sesión con el id del usuario actual
    SESSION_USER_KEY = 'el_amigo_user_id'
    # Usuario protegido: no se elimina ni cambia email/rol
    DEFAULT_ADMIN_ID = 'user-admin'

    # 'plaintext' (comparación exacta) o 'hashed' (werkzeug)
    CREDENTIAL_SCHEME = os.environ.get('VETSTOCK_CREDENTIALS', 'plaintext')

    LOW_STOCK_THRESHOLD = 5
    PRODUCTS_PER_PAGE = 8

    # ═══════════════════════════════════════════════════════════════════════
    # IA - Sugerencia de cantidades de pedido
    # ═══════════════════════════════════════════════════════════════════════
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY', '')
    OPENAI_MODEL = os.environ.get('OPENAI_MODEL', 'gpt-4.1-mini')
    AI_TIMEOUT = float(os.environ.get('AI_TIMEOUT', '60'))

    # ═══════════════════════════════════════════════════════════════════════
    # LOGGING Y PROFILING
    # ═══════════════════════════════════════════════════════════════════════
    LOG_LEVEL = os.environ.get('VETSTOCK_LOG_LEVEL', 'INFO')
    LOG_TO_FILE = _env_flag('VETSTOCK_LOG_FILE', False)
    LOGS_DIR = os.path.join(BASE_DIR, 'logs')
    ENABLE_PROFILING = _env_flag('VETSTOCK_PROFILING', True)
    PROFILING_WARNING_MS = 300
    PROFILING_CRITICAL_MS = 700


class DevelopmentConfig(Config):
    """Desarrollo local: logging verbose."""
    LOG_LEVEL = os.environ.get('VETSTOCK_LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    """Tests: memoria, sin profiling ni archivo de logs."""
    TESTING = True
    SECRET_KEY = 'vetstock-test-key'
    DATA_BACKEND = 'memory'
    SEED_DEMO_DATA = True
    ENABLE_PROFILING = False
    LOG_TO_FILE = False
    OPENAI_API_KEY = ''


_CONFIGS = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': Config,
}


def get_config(name: str = None):
    """
    Obtiene la clase de configuración por nombre.

    Args:
        name: 'development', 'testing' o 'production'.
              Por defecto usa VETSTOCK_ENV o 'production' si PRODUCTION_MODE.

    Returns:
        Clase de configuración
    """
    if name is None:
        name = os.environ.get('VETSTOCK_ENV')
    if name is None:
        name = 'production' if Config.PRODUCTION_MODE else 'development'
    return _CONFIGS.get(name, Config)
