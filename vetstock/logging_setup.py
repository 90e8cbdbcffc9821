# ==============================================================================
# CONFIGURACIÓN DE LOGGING
# ==============================================================================
# Configura el árbol de loggers "vetstock.*" una sola vez por proceso:
#   - Consola siempre
#   - Archivo rotativo logs/vetstock.log si LOG_TO_FILE está activo
# Los módulos solo hacen: logger = logging.getLogger(__name__)
# ==============================================================================

import logging
import os
from logging.handlers import RotatingFileHandler

_INITIALIZED = False

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: str = 'INFO', log_to_file: bool = False, logs_dir: str = None) -> logging.Logger:
    """
    Inicializa el logger raíz de la aplicación.

    Args:
        level: Nivel mínimo ('DEBUG', 'INFO', ...)
        log_to_file: Si True agrega un RotatingFileHandler
        logs_dir: Carpeta para el archivo de log

    Returns:
        Logger 'vetstock'
    """
    global _INITIALIZED
    logger = logging.getLogger('vetstock')
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if _INITIALIZED:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_to_file and logs_dir:
        os.makedirs(logs_dir, exist_ok=True)
        handler = RotatingFileHandler(
            os.path.join(logs_dir, 'vetstock.log'),
            maxBytes=2_000_000,
            backupCount=5,
            encoding='utf-8',
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _INITIALIZED = True
    return logger
