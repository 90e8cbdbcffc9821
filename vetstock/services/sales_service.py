# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Registra ventas a partir de las líneas del carrito.
#
# IMPORTANTE: registrar una venta NO descuenta stock del catálogo.
# El stock solo cambia al completar pedidos, importar o editar productos.
# ==============================================================================

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models import DEFAULT_IMAGE_URL, CartLine, PaymentMethod, Sale, payment_method_name
from ..performance_logger import profile_function
from ..repositories.interfaces import IProductRepository, IRepository, ISalesRepository
from ..utils import format_timestamp, now_iso
from . import spreadsheet_service
from .user_service import UserService

logger = logging.getLogger(__name__)

INVALID_CART_MESSAGE = 'Por favor, añade productos válidos a la venta antes de completarla.'

EXPORT_COLUMNS = ['ID Venta', 'Fecha', 'Producto', 'Cantidad', 'Precio Total', 'Empleado']


def new_sale_id() -> str:
    return f"sale-{uuid.uuid4().hex[:8]}"


class SalesService:
    """
    Servicio del registro de ventas.

    Las ventas son inmutables: se insertan al inicio (más reciente primero)
    y nunca se editan ni eliminan.
    """

    def __init__(
        self,
        sales_repo: ISalesRepository,
        product_repo: IProductRepository,
        user_service: UserService,
        bank_account_repo: IRepository = None,
    ):
        self.sales_repo = sales_repo
        self.product_repo = product_repo
        self.user_service = user_service
        self.bank_account_repo = bank_account_repo

    @profile_function(name="Registrar venta")
    def record_sale(self, lines: List[Dict[str, Any]], employee_name: str,
                    payment_method: str = PaymentMethod.EFECTIVO.value) -> Dict[str, Any]:
        """
        Registra una venta por cada línea del carrito.

        Args:
            lines: Líneas del carrito (CartLine.to_dict)
            employee_name: Nombre del vendedor elegido
            payment_method: efectivo, transferencia, yape o plin

        Returns:
            Dict con ok, sales, total, payment_method_name, message y,
            para transferencias, bank_accounts
        """
        cart = [CartLine.from_dict(line) for line in (lines or [])]
        if not cart or any(not line.product_id for line in cart):
            return {'ok': False, 'error': INVALID_CART_MESSAGE}

        products = {}
        for line in cart:
            product = self.product_repo.get_by_id(line.product_id)
            if product is None:
                return {'ok': False, 'error': INVALID_CART_MESSAGE}
            products[line.product_id] = product

        employee = self.user_service.resolve_employee_name(employee_name)
        date = now_iso()
        sales = [
            Sale(
                id=new_sale_id(),
                product_id=line.product_id,
                product_name=line.name,
                product_image=products[line.product_id].get('image_url') or DEFAULT_IMAGE_URL,
                quantity=line.quantity,
                total_price=line.subtotal,
                date=date,
                employee=employee,
            ).to_dict()
            for line in cart
        ]
        self.sales_repo.add_many(sales)

        total = round(sum(line.price * line.quantity for line in cart), 2)
        method_name = payment_method_name(payment_method)
        logger.info("Venta registrada: %d líneas, total %.2f, %s, vendedor %s",
                    len(sales), total, payment_method, employee)

        result = {
            'ok': True,
            'sales': sales,
            'total': total,
            'payment_method': payment_method,
            'payment_method_name': method_name,
            'message': f"Total: S/.{total:.2f} pagado con {method_name}.",
        }
        if payment_method == PaymentMethod.TRANSFERENCIA.value and self.bank_account_repo is not None:
            result['bank_accounts'] = self.bank_account_repo.get_all()
        return result

    def list_sales(self, date_from: Optional[datetime] = None,
                   date_to: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Ventas (más reciente primero), opcionalmente en un rango."""
        if date_from is None and date_to is None:
            return self.sales_repo.get_all()
        return self.sales_repo.in_range(date_from, date_to)

    def export_rows(self, date_from: Optional[datetime] = None,
                    date_to: Optional[datetime] = None) -> List[Dict[str, Any]]:
        return [
            {
                'ID Venta': sale['id'],
                'Fecha': format_timestamp(sale['date']),
                'Producto': sale['product_name'],
                'Cantidad': sale['quantity'],
                'Precio Total': sale['total_price'],
                'Empleado': sale['employee'],
            }
            for sale in self.list_sales(date_from, date_to)
        ]

    def export_sales(self, date_from: Optional[datetime] = None,
                     date_to: Optional[datetime] = None) -> bytes:
        rows = self.export_rows(date_from, date_to)
        return spreadsheet_service.rows_to_xlsx(rows, 'Ventas', EXPORT_COLUMNS)
