# ==============================================================================
# SERVICIO DE CARRITO (PUNTO DE VENTA)
# ==============================================================================
# Centraliza la lógica del carrito de caja.
# El carrito se almacena en la sesión (ISessionStore) bajo la clave 'cart'.
# ==============================================================================

import logging
import uuid
from typing import Any, Dict, List

from ..models import CartLine, PaymentMethod
from ..repositories.interfaces import ISessionStore
from ..utils import to_int
from .inventory_service import InventoryService
from .sales_service import SalesService

logger = logging.getLogger(__name__)

STOCK_LIMIT_WARNING = 'Límite de stock alcanzado'
PRODUCT_NOT_FOUND = 'Producto no encontrado'


class CartService:
    """
    Servicio para gestión del carrito de compras.

    Responsabilidades:
    - Agregar/eliminar líneas
    - Seleccionar producto de una línea (copia nombre, precio y stock)
    - Ajustar cantidades dentro de [1, stock]
    - Escaneo de códigos de barras
    - Cobro (delegado a SalesService)
    """

    CART_KEY = 'cart'

    def __init__(self, inventory_service: InventoryService, sales_service: SalesService,
                 session_store: ISessionStore):
        """
        Args:
            inventory_service: Servicio de inventario
            sales_service: Servicio de ventas
            session_store: Sesión donde vive el carrito
        """
        self.inventory_service = inventory_service
        self.sales_service = sales_service
        self.session_store = session_store

    def _get_cart(self) -> List[CartLine]:
        return [CartLine.from_dict(line) for line in self.session_store.get(self.CART_KEY, [])]

    def _save_cart(self, cart: List[CartLine]) -> None:
        self.session_store.set(self.CART_KEY, [line.to_dict() for line in cart])

    def _find_line(self, cart: List[CartLine], line_id: str):
        for line in cart:
            if line.id == line_id:
                return line
        return None

    @staticmethod
    def _clamp(line: CartLine, quantity: Any) -> str:
        """
        Aplica la cantidad a la línea dentro de [1, stock].

        Returns:
            Mensaje de advertencia o '' si no hubo recorte por stock
        """
        requested = to_int(quantity)
        if requested is None:
            requested = 1
        warning = ''
        value = requested
        if requested > line.stock:
            warning = f"{STOCK_LIMIT_WARNING}: {line.name} solo tiene {line.stock} unidades en stock."
            value = line.stock
        if requested < 1:
            value = 1
        line.quantity = value
        return warning

    def get_cart(self) -> Dict[str, Any]:
        """
        Carrito con totales.

        Returns:
            Dict con lines, total e items_count
        """
        cart = self._get_cart()
        return {
            'lines': [dict(line.to_dict(), subtotal=line.subtotal) for line in cart],
            'total': round(sum(line.price * line.quantity for line in cart), 2),
            'items_count': len(cart),
        }

    def add_line(self) -> Dict[str, Any]:
        """Agrega una línea vacía (sin producto)."""
        cart = self._get_cart()
        line = CartLine(id=uuid.uuid4().hex)
        cart.append(line)
        self._save_cart(cart)
        return {'ok': True, 'line': line.to_dict(), 'cart': self.get_cart()}

    def select_product(self, line_id: str, product_id: str) -> Dict[str, Any]:
        """Elige el producto de una línea; la cantidad vuelve a 1."""
        cart = self._get_cart()
        line = self._find_line(cart, line_id)
        if line is None:
            return {'ok': False, 'error': 'Línea no encontrada', 'not_found': True}
        product = self.inventory_service.get_product(product_id)
        if product is None:
            return {'ok': False, 'error': PRODUCT_NOT_FOUND, 'not_found': True}

        line.product_id = product['id']
        line.name = product['name']
        line.price = product['sale_price']
        line.stock = product['stock']
        line.quantity = 1
        self._save_cart(cart)
        return {'ok': True, 'line': line.to_dict(), 'cart': self.get_cart()}

    def update_quantity(self, line_id: str, quantity: Any) -> Dict[str, Any]:
        """
        Cambia la cantidad de una línea.

        Superar el stock no es un error: la cantidad se recorta al stock
        y se devuelve una advertencia.
        """
        cart = self._get_cart()
        line = self._find_line(cart, line_id)
        if line is None:
            return {'ok': False, 'error': 'Línea no encontrada', 'not_found': True}
        warning = self._clamp(line, quantity)
        self._save_cart(cart)
        result = {'ok': True, 'line': line.to_dict(), 'cart': self.get_cart()}
        if warning:
            result['warning'] = warning
        return result

    def remove_line(self, line_id: str) -> Dict[str, Any]:
        cart = self._get_cart()
        remaining = [line for line in cart if line.id != line_id]
        if len(remaining) == len(cart):
            return {'ok': False, 'error': 'Línea no encontrada', 'not_found': True}
        self._save_cart(remaining)
        return {'ok': True, 'cart': self.get_cart()}

    def scan_barcode(self, barcode: str) -> Dict[str, Any]:
        """
        Agrega un producto por código de barras.

        Si el producto ya está en el carrito suma 1 (respetando el stock);
        si no, agrega una línea nueva con cantidad 1.
        """
        product = self.inventory_service.find_by_barcode(barcode)
        if product is None:
            return {
                'ok': False,
                'error': PRODUCT_NOT_FOUND,
                'not_found': True,
                'detail': f"No se encontró ningún producto con el código de barras {barcode}.",
            }

        cart = self._get_cart()
        result = {'ok': True}
        existing = next((line for line in cart if line.product_id == product['id']), None)
        if existing is not None:
            warning = self._clamp(existing, existing.quantity + 1)
            if warning:
                result['warning'] = warning
        else:
            cart.append(CartLine(
                id=uuid.uuid4().hex,
                product_id=product['id'],
                name=product['name'],
                quantity=1,
                price=product['sale_price'],
                stock=product['stock'],
            ))
        self._save_cart(cart)

        result['message'] = f"{product['name']} ha sido añadido al carrito."
        result['cart'] = self.get_cart()
        return result

    def clear_cart(self) -> None:
        self.session_store.remove(self.CART_KEY)

    def checkout(self, employee_name: str,
                 payment_method: str = PaymentMethod.EFECTIVO.value) -> Dict[str, Any]:
        """
        Cobra el carrito: registra las ventas y vacía el carrito.
        Si la venta es rechazada el carrito queda intacto.
        """
        lines = [line.to_dict() for line in self._get_cart()]
        result = self.sales_service.record_sale(lines, employee_name, payment_method)
        if result['ok']:
            self.clear_cart()
        else:
            logger.warning("Cobro rechazado: %s", result['error'])
        return result
