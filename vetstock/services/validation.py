# ==============================================================================
# VALIDACIÓN DE FORMULARIOS
# ==============================================================================
# Cada validador devuelve un diccionario campo -> mensaje.
# Diccionario vacío = datos válidos.
# ==============================================================================

import re
from typing import Any, Dict

from ..models import ProductCategory, UserRole, EventType
from ..utils import parse_date, to_number, to_text

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ''


def _min_length(errors, data, key, length, message):
    if len(_text(data, key)) < length:
        errors[key] = message


def _non_negative(errors, data, key, message, integer=False):
    raw = data.get(key)
    if raw is None or raw == '':
        return
    number = to_number(raw)
    if number is None or number < 0 or (integer and number != int(number)):
        errors[key] = message


def validate_product(data: Dict[str, Any]) -> Dict[str, str]:
    """Formulario de creación/edición de producto."""
    errors = {}
    _min_length(errors, data, 'name', 3, 'El nombre debe tener al menos 3 caracteres.')
    category = data.get('category')
    if category not in [c.value for c in ProductCategory]:
        errors['category'] = 'Por favor selecciona una categoría.'
    _non_negative(errors, data, 'stock', 'El stock no puede ser negativo.', integer=True)
    _non_negative(errors, data, 'purchase_price', 'El precio de compra no puede ser negativo.')
    _non_negative(errors, data, 'sale_price', 'El precio de venta no puede ser negativo.')
    expiry = data.get('expiry_date')
    if expiry and parse_date(expiry) is None:
        errors['expiry_date'] = 'Fecha de vencimiento inválida.'
    return errors


def validate_user(data: Dict[str, Any], require_password: bool = True) -> Dict[str, str]:
    """Formulario de usuario. En edición la contraseña no se valida."""
    errors = {}
    _min_length(errors, data, 'name', 2, 'El nombre debe tener al menos 2 caracteres.')
    if not EMAIL_RE.match(_text(data, 'email')):
        errors['email'] = 'Por favor, introduce un correo electrónico válido.'
    if data.get('role') not in [r.value for r in UserRole]:
        errors['role'] = 'Por favor, selecciona un rol.'
    if require_password:
        password = data.get('password') or ''
        if len(password) < 6:
            errors['password'] = 'La contraseña debe tener al menos 6 caracteres.'
        confirm = data.get('confirm_password')
        if confirm is not None and confirm != password:
            errors['confirm_password'] = 'Las contraseñas no coinciden.'
    return errors


def validate_bank_account(data: Dict[str, Any]) -> Dict[str, str]:
    """Los números de cuenta pueden llegar como número JSON."""
    errors = {}
    data = {key: to_text(data.get(key)) for key in ('bank_name', 'account_holder', 'account_number')}
    _min_length(errors, data, 'bank_name', 2, 'El nombre del banco es requerido.')
    _min_length(errors, data, 'account_holder', 3, 'El titular de la cuenta es requerido.')
    _min_length(errors, data, 'account_number', 5, 'El número de cuenta es requerido.')
    return errors


def validate_event(data: Dict[str, Any]) -> Dict[str, str]:
    errors = {}
    _min_length(errors, data, 'title', 3, 'El título debe tener al menos 3 caracteres.')
    _min_length(errors, data, 'description', 3, 'La descripción debe tener al menos 3 caracteres.')
    if parse_date(data.get('date')) is None:
        errors['date'] = 'Se requiere una fecha.'
    if data.get('type') not in [t.value for t in EventType]:
        errors['type'] = 'Por favor selecciona un tipo de evento.'
    return errors


def validate_order_items(items: Any) -> Dict[str, str]:
    """Ítems de un pedido nuevo: al menos uno, cada uno con producto y cantidad >= 1."""
    if not isinstance(items, list) or not items:
        return {'items': 'Debes agregar al menos un producto.'}
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not item.get('product_id'):
            return {'items': f'Producto requerido en la fila {index + 1}.'}
        quantity = to_number(item.get('quantity'))
        if quantity is None or quantity < 1 or quantity != int(quantity):
            return {'items': f'La cantidad debe ser al menos 1 (fila {index + 1}).'}
    return {}
