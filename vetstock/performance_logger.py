# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y funciones sin afectar la experiencia del usuario.
# Todo se emite por el logger "vetstock.performance".
#
# ACTIVAR/DESACTIVAR: config ENABLE_PROFILING
# ==============================================================================

import logging
import threading
import time
from collections import defaultdict
from functools import wraps

logger = logging.getLogger('vetstock.performance')

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = True

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

# Nombres legibles de rutas (para logs más humanos)
ROUTE_NAMES = {
    'POST /api/login': 'Iniciar sesión',
    'POST /api/logout': 'Cerrar sesión',
    'GET /api/dashboard': 'Ver panel principal',
    'GET /api/products': 'Listar productos',
    'POST /api/products': 'Crear producto',
    'PUT /api/products/<product_id>': 'Editar producto',
    'POST /api/products/import': 'Importar catálogo',
    'GET /api/products/export': 'Exportar catálogo',
    'GET /api/products/<product_id>/suggestion': 'Sugerir cantidad de pedido',
    'POST /api/cart/scan': 'Escanear código de barras',
    'POST /api/cart/checkout': 'Completar venta',
    'POST /api/orders': 'Crear pedido',
    'GET /api/orders/<order_id>/template': 'Exportar pedido',
    'POST /api/orders/<order_id>/import': 'Importar y completar pedido',
    'GET /api/stats': 'Ver estadísticas',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()


def configure(enabled: bool = True, warning_ms: int = 300, critical_ms: int = 700) -> None:
    """Ajusta el profiling desde la configuración de la app."""
    global ENABLE_PROFILING, THRESHOLD_WARNING, THRESHOLD_CRITICAL
    ENABLE_PROFILING = enabled
    THRESHOLD_WARNING = warning_ms
    THRESHOLD_CRITICAL = critical_ms


def _get_route_name(method, path, rule=None):
    """Nombre legible de una ruta; si no hay match devuelve la ruta cruda."""
    key = f"{method} {path}"
    if key in ROUTE_NAMES:
        return ROUTE_NAMES[key]
    if rule:
        rule_key = f"{method} {rule}"
        if rule_key in ROUTE_NAMES:
            return ROUTE_NAMES[rule_key]
    return key


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS (hooks Flask)
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, user=None):
    """Registra el tiempo de una ruta y marca las lentas."""
    action_name = _get_route_name(method, path, rule)
    user_str = user or 'anónimo'

    if time_ms >= THRESHOLD_CRITICAL:
        logger.error(
            "Ruta MUY LENTA: %s (%s %s) usuario=%s %.0f ms (umbral %d ms)",
            action_name, method, path, user_str, time_ms, THRESHOLD_CRITICAL
        )
    elif time_ms >= THRESHOLD_WARNING:
        logger.warning(
            "Ruta LENTA: %s (%s %s) usuario=%s %.0f ms (umbral %d ms)",
            action_name, method, path, user_str, time_ms, THRESHOLD_WARNING
        )
    else:
        logger.debug("%s usuario=%s %.0f ms", action_name, user_str, time_ms)


def init_profiling(app, session_key: str = 'el_amigo_user_id'):
    """
    Inicializa el sistema de profiling en una app Flask.
    Registra hooks before_request y after_request.
    """
    if not ENABLE_PROFILING:
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request, session

        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms
        rule = str(request.url_rule) if request.url_rule else request.path
        log_route_performance(
            request.method, request.path, rule, elapsed, session.get(session_key)
        )
        return response


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Completar pedido")
        def complete_order():
            ...
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not ENABLE_PROFILING:
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms

                if elapsed_ms >= THRESHOLD_WARNING:
                    severity = 'CRÍTICO' if elapsed_ms >= THRESHOLD_CRITICAL else 'LENTO'
                    logger.warning("[%s] Función %s: %.0f ms", severity, func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'configure',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
