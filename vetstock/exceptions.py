# ==============================================================================
# EXCEPCIONES DEL DOMINIO
# ==============================================================================
# Los servicios convierten estas excepciones en diccionarios de resultado
# ({'ok': False, 'error': ...}) en el borde de cada operación.
# ==============================================================================


class VetStockError(Exception):
    """Excepción base de la aplicación."""
    pass


class SpreadsheetFormatError(VetStockError):
    """El archivo importado no se pudo leer como hoja de cálculo válida."""
    pass


class SuggestionUnavailableError(VetStockError):
    """El servicio de IA no pudo generar una sugerencia."""
    pass


class ProviderError(VetStockError):
    """Error del proveedor de IA (red, credenciales o respuesta inválida)."""
    pass


class ProtectedUserError(VetStockError):
    """Excepción lanzada cuando se intenta modificar o eliminar el admin por defecto."""
    pass
