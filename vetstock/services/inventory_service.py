# ==============================================================================
# SERVICIO DE INVENTARIO
# ==============================================================================
# Centraliza toda la lógica de negocio del catálogo:
# - Listado con búsqueda, filtros y paginación
# - Alta y edición de productos
# - Importación masiva desde hoja de cálculo (actualiza por ID)
# - Exportación del catálogo filtrado
# ==============================================================================

import logging
import math
from typing import Any, Dict, List, Optional

from ..exceptions import SpreadsheetFormatError
from ..models import DEFAULT_IMAGE_URL, LOW_STOCK_THRESHOLD, Product, ProductCategory
from ..performance_logger import profile_function
from ..repositories.interfaces import IProductRepository
from ..utils import format_day, parse_date, to_int, to_number, to_text
from . import spreadsheet_service
from .validation import validate_product

logger = logging.getLogger(__name__)

IMPORT_ERROR_MESSAGE = (
    'Hubo un problema al procesar el archivo. '
    'Asegúrate de que el formato sea correcto.'
)

# Columnas de exportación del catálogo, en orden
EXPORT_COLUMNS = [
    'ID', 'Código de Barras', 'Producto', 'Categoría', 'Estado',
    'Stock', 'Precio Compra', 'Precio Venta', 'Fecha de Vencimiento',
]


class InventoryService:
    """
    Servicio del catálogo de productos.

    Los métodos que modifican datos devuelven diccionarios de resultado:
        {'ok': True, 'product': {...}}
        {'ok': False, 'errors': {campo: mensaje}}
        {'ok': False, 'error': 'mensaje'}
    """

    def __init__(self, product_repo: IProductRepository, per_page: int = 8,
                 low_stock_threshold: int = LOW_STOCK_THRESHOLD):
        """
        Args:
            product_repo: Repositorio del catálogo
            per_page: Productos por página en el listado
            low_stock_threshold: Stock por debajo del cual se marca "Bajo Stock"
        """
        self.product_repo = product_repo
        self.per_page = per_page
        self.low_stock_threshold = low_stock_threshold

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        return self.product_repo.get_by_id(product_id)

    def find_by_barcode(self, barcode: str) -> Optional[Dict[str, Any]]:
        return self.product_repo.find_by_barcode(to_text(barcode))

    def filter_products(self, search: str = '', category: str = 'todos',
                        low_stock: bool = False) -> List[Dict[str, Any]]:
        """Catálogo filtrado sin paginar (base del listado y la exportación)."""
        products = self.product_repo.search(search, category)
        if low_stock:
            products = [p for p in products if p.get('stock', 0) < self.low_stock_threshold]
        return products

    def list_products(self, search: str = '', category: str = 'todos',
                      low_stock: bool = False, page: int = 1) -> Dict[str, Any]:
        """
        Listado paginado del catálogo.

        Args:
            search: Texto en nombre o código de barras
            category: Categoría o 'todos'
            low_stock: Solo productos con stock bajo
            page: Página (empieza en 1)

        Returns:
            Dict con products, page, total_pages y total
        """
        products = self.filter_products(search, category, low_stock)
        total_pages = math.ceil(len(products) / self.per_page) if self.per_page else 1
        page = max(1, page or 1)
        start = (page - 1) * self.per_page
        return {
            'products': products[start:start + self.per_page],
            'page': page,
            'total_pages': total_pages,
            'total': len(products),
        }

    def low_stock_products(self) -> List[Dict[str, Any]]:
        return self.product_repo.low_stock(self.low_stock_threshold)

    # =========================================================================
    # ALTA Y EDICIÓN
    # =========================================================================

    def _build_product(self, product_id: str, data: Dict[str, Any],
                       current: Optional[Dict[str, Any]] = None) -> Product:
        current = current or {}
        barcode = to_text(data.get('barcode'))
        return Product(
            id=product_id,
            name=data['name'].strip(),
            category=data['category'],
            stock=to_int(data.get('stock')) or 0,
            purchase_price=to_number(data.get('purchase_price')) or 0.0,
            sale_price=to_number(data.get('sale_price')) or 0.0,
            image_url=data.get('image_url') or current.get('image_url') or DEFAULT_IMAGE_URL,
            sales_history=current.get('sales_history') or {},
            barcode=barcode if barcode and barcode != 'N/A' else None,
            expiry_date=parse_date(data.get('expiry_date')),
        )

    @profile_function(name="Crear producto")
    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crea un producto y lo inserta al inicio del catálogo.

        El ID es prod-{n+1} con n = cantidad actual de productos.
        Campos numéricos ausentes quedan en 0.

        Args:
            data: name, category, stock, purchase_price, sale_price,
                  barcode (opcional), expiry_date (opcional)

        Returns:
            Dict con ok y product, o errors
        """
        errors = validate_product(data)
        if errors:
            return {'ok': False, 'errors': errors}

        with self.product_repo.atomic():
            product_id = self.product_repo.next_sequential_id('prod')
            product = self._build_product(product_id, data)
            self.product_repo.prepend(product.to_dict())

        logger.info("Producto creado: %s (%s)", product.id, product.name)
        return {'ok': True, 'product': product.to_dict()}

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Reemplaza todos los campos editables de un producto.

        Args:
            product_id: ID del producto
            data: Mismos campos que create_product (image_url opcional)
        """
        errors = validate_product(data)
        if errors:
            return {'ok': False, 'errors': errors}

        with self.product_repo.atomic():
            current = self.product_repo.get_by_id(product_id)
            if current is None:
                return {'ok': False, 'error': 'Producto no encontrado', 'not_found': True}
            product = self._build_product(product_id, data, current)
            self.product_repo.update(product_id, product.to_dict())

        logger.info("Producto actualizado: %s", product_id)
        return {'ok': True, 'product': product.to_dict()}

    # =========================================================================
    # IMPORTACIÓN / EXPORTACIÓN
    # =========================================================================

    def apply_import_rows(self, rows: List[Dict[str, Any]]) -> int:
        """
        Aplica filas importadas al catálogo, fila por fila en orden.

        Solo se actualizan productos cuyo ID existe; las filas con IDs
        desconocidos se ignoran. Una celda vacía conserva el valor guardado,
        salvo código de barras y vencimiento, donde vacío o 'N/A' lo borra.

        Returns:
            Cantidad de filas aplicadas
        """
        updated = 0
        categories = {c.value for c in ProductCategory}

        with self.product_repo.atomic():
            for row in rows:
                product_id = row.get('ID')
                if product_id is None:
                    continue
                product = self.product_repo.get_by_id(str(product_id).strip())
                if product is None:
                    continue

                name = row.get('Producto')
                if name is not None and str(name).strip():
                    product['name'] = str(name).strip()

                if 'Código de Barras' in row:
                    barcode = row['Código de Barras']
                    if barcode is None or barcode == '' or barcode == 'N/A':
                        product['barcode'] = None
                    else:
                        product['barcode'] = to_text(barcode)

                category = row.get('Categoría')
                if category in categories:
                    product['category'] = category

                stock = to_int(row.get('Stock'))
                if stock is not None:
                    product['stock'] = stock
                purchase = to_number(row.get('Precio Compra'))
                if purchase is not None:
                    product['purchase_price'] = purchase
                sale = to_number(row.get('Precio Venta'))
                if sale is not None:
                    product['sale_price'] = sale

                if 'Fecha de Vencimiento' in row:
                    expiry = row['Fecha de Vencimiento']
                    if expiry is None or expiry == '' or expiry == 'N/A':
                        product['expiry_date'] = None
                    else:
                        parsed = parse_date(expiry)
                        if parsed:
                            product['expiry_date'] = parsed

                self.product_repo.update(product['id'], product)
                updated += 1

        return updated

    @profile_function(name="Importar catálogo")
    def bulk_import(self, content: bytes) -> Dict[str, Any]:
        """
        Importa un .xlsx de catálogo.

        Un archivo ilegible aborta antes de escribir nada.

        Returns:
            {'ok': True, 'updated': n} o {'ok': False, 'error': ...}
        """
        try:
            rows = spreadsheet_service.read_rows(content)
        except SpreadsheetFormatError:
            return {'ok': False, 'error': IMPORT_ERROR_MESSAGE}

        updated = self.apply_import_rows(rows)
        logger.info("Importación de catálogo: %d productos actualizados", updated)
        return {'ok': True, 'updated': updated}

    def export_rows(self, search: str = '', category: str = 'todos',
                    low_stock: bool = False) -> List[Dict[str, Any]]:
        """Catálogo filtrado proyectado a las columnas de exportación."""
        rows = []
        for data in self.filter_products(search, category, low_stock):
            product = Product.from_dict(data)
            rows.append({
                'ID': product.id,
                'Código de Barras': product.barcode or 'N/A',
                'Producto': product.name,
                'Categoría': product.category,
                'Estado': (f"Bajo Stock ({product.stock})"
                           if product.stock < self.low_stock_threshold else 'En Stock'),
                'Stock': product.stock,
                'Precio Compra': product.purchase_price,
                'Precio Venta': product.sale_price,
                'Fecha de Vencimiento': format_day(product.expiry_date),
            })
        return rows

    def export_catalog(self, search: str = '', category: str = 'todos',
                       low_stock: bool = False) -> bytes:
        rows = self.export_rows(search, category, low_stock)
        return spreadsheet_service.rows_to_xlsx(rows, 'Productos', EXPORT_COLUMNS)
