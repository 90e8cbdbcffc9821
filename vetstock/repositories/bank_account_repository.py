# ==============================================================================
# REPOSITORIO DE CUENTAS BANCARIAS
# ==============================================================================

import os
from typing import Any, Dict, List, Optional

from .base import BaseRepository


class BankAccountRepository(BaseRepository):
    """Cuentas mostradas al cobrar por transferencia (bank_accounts.json)."""

    FILENAME = 'bank_accounts.json'

    def __init__(self, data_dir: Optional[str] = None, initial: Optional[List[Dict[str, Any]]] = None):
        file_path = os.path.join(data_dir, self.FILENAME) if data_dir else None
        super().__init__(file_path, initial)
