# ==============================================================================
# REPOSITORIO DE CALENDARIO
# ==============================================================================

import os
from typing import Any, Dict, List, Optional

from .base import BaseRepository


class CalendarRepository(BaseRepository):
    """Eventos del calendario (calendar_events.json)."""

    FILENAME = 'calendar_events.json'

    def __init__(self, data_dir: Optional[str] = None, initial: Optional[List[Dict[str, Any]]] = None):
        file_path = os.path.join(data_dir, self.FILENAME) if data_dir else None
        super().__init__(file_path, initial)

    def on_day(self, day: str) -> List[Dict[str, Any]]:
        """Eventos cuya fecha empieza con 'YYYY-MM-DD'."""
        return self.filter(lambda e: (e.get('date') or '')[:10] == day)
