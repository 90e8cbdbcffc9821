# ==============================================================================
# SERVICIO DE PEDIDOS
# ==============================================================================
# Pedidos de compra a proveedores:
#   Pendiente ──(completar con precios)──► Completado
#   Cancelado existe como estado, pero ninguna operación lo produce.
#
# Al completar un pedido, cada fila con precio válido:
#   - reemplaza el precio de compra del ítem del pedido
#   - suma la cantidad pedida al stock del producto
#   - reemplaza el precio de compra del producto
# Las filas inválidas se ignoran una por una (aplicación parcial).
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional

from ..exceptions import SpreadsheetFormatError
from ..models import Order, OrderItem, OrderStatus
from ..performance_logger import profile_function
from ..repositories.interfaces import IOrderRepository, IProductRepository
from ..utils import format_day, now_iso, to_int, to_number, to_text
from . import spreadsheet_service
from .validation import validate_order_items

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND = 'Pedido no encontrado para importar.'
IMPORT_ERROR_MESSAGE = (
    'Hubo un problema al procesar el archivo. Asegúrate de que tenga el formato '
    'correcto y los precios unitarios rellenados.'
)

EXPORT_COLUMNS = [
    'ID Pedido', 'Proveedor', 'Estado', 'Fecha', 'ID Producto',
    'Producto', 'Cantidad', 'Precio Compra', 'Subtotal',
]


def _valid_price(value: Any) -> bool:
    """Solo números reales finitos >= 0; textos, booleanos, NaN e infinito no cuentan."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    number = to_number(value)
    return number is not None and number >= 0


class OrderService:
    """
    Servicio del libro de pedidos.

    Los pedidos copian nombre y precio de compra del catálogo al crearse;
    esas copias no se actualizan si el catálogo cambia después.
    """

    def __init__(self, order_repo: IOrderRepository, product_repo: IProductRepository):
        self.order_repo = order_repo
        self.product_repo = product_repo

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        data = self.order_repo.get_by_id(order_id)
        if data is None:
            return None
        order = Order.from_dict(data)
        result = order.to_dict()
        result['total'] = order.total
        return result

    def list_orders(self, status: str = None) -> List[Dict[str, Any]]:
        """Pedidos, más reciente primero, con su total."""
        orders = self.order_repo.by_status(status) if status else self.order_repo.get_all()
        result = []
        for data in orders:
            order = Order.from_dict(data)
            item = order.to_dict()
            item['total'] = order.total
            result.append(item)
        return result

    # =========================================================================
    # ALTA
    # =========================================================================

    def create_order(self, items: List[Dict[str, Any]], supplier: str = None) -> Dict[str, Any]:
        """
        Crea un pedido Pendiente y lo inserta al inicio.

        Args:
            items: [{'product_id': ..., 'quantity': ...}]
            supplier: Proveedor (opcional)

        Returns:
            Dict con ok y order, o errors
        """
        errors = validate_order_items(items)
        if errors:
            return {'ok': False, 'errors': errors}

        order_items = []
        for item in items:
            product = self.product_repo.get_by_id(item['product_id'])
            order_items.append(OrderItem(
                product_id=item['product_id'],
                name=product['name'] if product else 'Producto Desconocido',
                quantity=to_int(item['quantity']),
                purchase_price=product['purchase_price'] if product else 0.0,
            ))

        supplier = to_text(supplier) or None
        with self.order_repo.atomic():
            order = Order(
                id=self.order_repo.next_sequential_id('ord'),
                date=now_iso(),
                status=OrderStatus.PENDIENTE.value,
                items=order_items,
                supplier=supplier,
            )
            self.order_repo.prepend(order.to_dict())

        logger.info("Pedido creado: %s (%d ítems, proveedor %s)", order.id, len(order_items), supplier)
        return {'ok': True, 'order': order.to_dict()}

    # =========================================================================
    # COMPLETAR
    # =========================================================================

    @profile_function(name="Completar pedido")
    def complete_order(self, order_id: str, price_rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Completa un pedido Pendiente aplicando precios unitarios.

        Las filas se aplican en orden, cada una por separado. Una fila se
        ignora si no tiene product_id, si el precio no es un número >= 0 o
        si el producto no está en el pedido. El pedido pasa a Completado
        aunque ninguna fila se haya aplicado.

        Args:
            order_id: ID del pedido
            price_rows: [{'product_id': ..., 'unit_price': ...}]

        Returns:
            Dict con ok, order y applied (filas aplicadas), o error
        """
        with self.order_repo.atomic(), self.product_repo.atomic():
            data = self.order_repo.get_by_id(order_id)
            if data is None:
                return {'ok': False, 'error': ORDER_NOT_FOUND, 'not_found': True}

            order = Order.from_dict(data)
            if not order.can_transition_to(OrderStatus.COMPLETADO.value):
                return {'ok': False, 'error': f'El pedido {order_id} ya está {order.status}.'}

            applied = 0
            for row in price_rows or []:
                product_id = row.get('product_id')
                price = row.get('unit_price')
                if not product_id or not _valid_price(price):
                    continue
                item = order.get_item(product_id)
                if item is None:
                    continue

                item.purchase_price = float(price)
                product = self.product_repo.get_by_id(product_id)
                if product is not None:
                    product['stock'] = product.get('stock', 0) + item.quantity
                    product['purchase_price'] = float(price)
                    self.product_repo.update(product_id, product)
                applied += 1

            order.status = OrderStatus.COMPLETADO.value
            self.order_repo.update(order_id, order.to_dict())

        logger.info("Pedido completado: %s (%d filas aplicadas)", order_id, applied)
        result = order.to_dict()
        result['total'] = order.total
        return {
            'ok': True,
            'order': result,
            'applied': applied,
            'message': (f"Pedido {order_id} completado. Precios y stock actualizados. "
                        "Los egresos han sido actualizados."),
        }

    # =========================================================================
    # HOJAS DE CÁLCULO
    # =========================================================================

    def export_order_template(self, order_id: str) -> Optional[bytes]:
        """Plantilla .xlsx del pedido para completar precios, o None si no existe."""
        data = self.order_repo.get_by_id(order_id)
        if data is None:
            return None
        return spreadsheet_service.build_order_template(data)

    def import_order_prices(self, order_id: str, content: bytes) -> Dict[str, Any]:
        """
        Lee la plantilla completada y completa el pedido.

        Un archivo ilegible aborta antes de tocar pedidos o productos.
        """
        if self.order_repo.get_by_id(order_id) is None:
            return {'ok': False, 'error': ORDER_NOT_FOUND, 'not_found': True}
        try:
            rows = spreadsheet_service.read_rows(content)
        except SpreadsheetFormatError:
            return {'ok': False, 'error': IMPORT_ERROR_MESSAGE}

        price_rows = []
        for row in rows:
            product_id = row.get('ID Producto')
            price_rows.append({
                'product_id': str(product_id).strip() if product_id is not None else None,
                'unit_price': row.get('Precio Compra Unit.'),
            })
        return self.complete_order(order_id, price_rows)

    def export_rows(self) -> List[Dict[str, Any]]:
        """Todos los pedidos, una fila por ítem."""
        rows = []
        for data in self.order_repo.get_all():
            order = Order.from_dict(data)
            for item in order.items:
                rows.append({
                    'ID Pedido': order.id,
                    'Proveedor': order.supplier or 'N/A',
                    'Estado': order.status,
                    'Fecha': format_day(order.date),
                    'ID Producto': item.product_id,
                    'Producto': item.name,
                    'Cantidad': item.quantity,
                    'Precio Compra': item.purchase_price,
                    'Subtotal': item.subtotal,
                })
        return rows

    def export_all_orders(self) -> bytes:
        return spreadsheet_service.rows_to_xlsx(self.export_rows(), 'Pedidos', EXPORT_COLUMNS)
