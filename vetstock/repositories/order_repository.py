# ==============================================================================
# REPOSITORIO DE PEDIDOS
# ==============================================================================

import os
from typing import Any, Dict, List, Optional

from .base import BaseRepository


class OrderRepository(BaseRepository):
    """
    Pedidos de compra, más reciente primero.

    Formato de datos en orders.json:
    [
        {"id": "ord-001", "date": "...", "status": "Pendiente", "supplier": null,
         "items": [{"product_id": "prod-001", "name": "...", "quantity": 10,
                    "purchase_price": 10.0}]}
    ]
    """

    FILENAME = 'orders.json'

    def __init__(self, data_dir: Optional[str] = None, initial: Optional[List[Dict[str, Any]]] = None):
        file_path = os.path.join(data_dir, self.FILENAME) if data_dir else None
        super().__init__(file_path, initial)

    def by_status(self, status: str) -> List[Dict[str, Any]]:
        return self.filter(lambda o: o.get('status') == status)
