# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Catálogo de la tienda. Los productos nuevos se insertan al inicio.
# ==============================================================================

import os
from typing import Any, Dict, List, Optional

from .base import BaseRepository


class ProductRepository(BaseRepository):
    """
    Repositorio del catálogo.

    Formato de datos en products.json:
    [
        {"id": "prod-001", "name": "SURFAC 820 500ML", "category": "Desinfectantes",
         "stock": 2, "purchase_price": 10.0, "sale_price": 14.0, ...}
    ]
    """

    FILENAME = 'products.json'

    def __init__(self, data_dir: Optional[str] = None, initial: Optional[List[Dict[str, Any]]] = None):
        """
        Args:
            data_dir: Carpeta de datos, o None para memoria
            initial: Catálogo inicial
        """
        file_path = os.path.join(data_dir, self.FILENAME) if data_dir else None
        super().__init__(file_path, initial)

    def find_by_barcode(self, barcode: str) -> Optional[Dict[str, Any]]:
        """Producto con ese código de barras exacto."""
        if not barcode:
            return None
        return self.find_by('barcode', barcode)

    def search(self, text: str = '', category: str = '') -> List[Dict[str, Any]]:
        """
        Filtra por nombre o código de barras (subcadena, sin distinguir
        mayúsculas) y por categoría.

        Args:
            text: Texto de búsqueda
            category: Categoría exacta, '' o 'todos' para todas
        """
        needle = (text or '').strip().lower()
        wanted = (category or '').strip().lower()

        def matches(product: Dict[str, Any]) -> bool:
            if wanted and wanted != 'todos' and product.get('category', '').lower() != wanted:
                return False
            if not needle:
                return True
            name = product.get('name', '').lower()
            barcode = (product.get('barcode') or '').lower()
            return needle in name or needle in barcode

        return self.filter(matches)

    def low_stock(self, threshold: int) -> List[Dict[str, Any]]:
        return self.filter(lambda p: p.get('stock', 0) < threshold)
