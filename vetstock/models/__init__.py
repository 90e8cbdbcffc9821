# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Los repositorios persisten diccionarios (to_dict) y los servicios
# reconstruyen entidades (from_dict) cuando aplican reglas de negocio.
# ==============================================================================

from .entities import (
    # Catálogo
    Product,
    ProductCategory,
    DEFAULT_IMAGE_URL,
    LOW_STOCK_THRESHOLD,

    # Ventas y caja
    Sale,
    CartLine,
    PaymentMethod,
    PAYMENT_METHOD_NAMES,
    payment_method_name,

    # Pedidos
    Order,
    OrderItem,
    OrderStatus,
    ORDER_TRANSITIONS,

    # Usuarios
    User,
    UserRole,

    # Configuración y calendario
    BankAccount,
    CalendarEvent,
    EventType,
)

__all__ = [
    # Catálogo
    'Product',
    'ProductCategory',
    'DEFAULT_IMAGE_URL',
    'LOW_STOCK_THRESHOLD',

    # Ventas y caja
    'Sale',
    'CartLine',
    'PaymentMethod',
    'PAYMENT_METHOD_NAMES',
    'payment_method_name',

    # Pedidos
    'Order',
    'OrderItem',
    'OrderStatus',
    'ORDER_TRANSITIONS',

    # Usuarios
    'User',
    'UserRole',

    # Configuración y calendario
    'BankAccount',
    'CalendarEvent',
    'EventType',
]
