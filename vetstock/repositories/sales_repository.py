# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Registro de ventas, más reciente primero. Las ventas no se editan.
# ==============================================================================

import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import BaseRepository
from ..utils import parse_datetime


class SalesRepository(BaseRepository):
    """
    Repositorio de ventas.

    Formato de datos en sales.json:
    [
        {"id": "sale-1a2b3c4d", "product_id": "prod-001", "product_name": "...",
         "quantity": 2, "total_price": 28.0, "date": "2024-07-22T15:04:05+00:00",
         "employee": "Diana"}
    ]
    """

    FILENAME = 'sales.json'

    def __init__(self, data_dir: Optional[str] = None, initial: Optional[List[Dict[str, Any]]] = None):
        file_path = os.path.join(data_dir, self.FILENAME) if data_dir else None
        super().__init__(file_path, initial)

    def add_many(self, records: List[Dict[str, Any]]) -> None:
        """Inserta un lote de ventas al inicio conservando su orden."""
        with self._lock:
            data = self._read_raw()
            self._write_raw(list(records) + data)

    def in_range(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """
        Ventas con fecha dentro de [start, end].

        Args:
            start: Inicio inclusivo (None = sin límite)
            end: Fin inclusivo (None = sin límite)
        """
        def inside(sale: Dict[str, Any]) -> bool:
            when = parse_datetime(sale.get('date'))
            if when is None:
                return False
            if start is not None and when < start:
                return False
            if end is not None and when > end:
                return False
            return True

        return self.filter(inside)
