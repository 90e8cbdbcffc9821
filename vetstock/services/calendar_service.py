# ==============================================================================
# SERVICIO DE CALENDARIO
# ==============================================================================
# Eventos de tipo pedido, cita o evento. Las fechas se guardan a mediodía
# UTC (YYYY-MM-DDT12:00:00Z) para que el día no cambie con la zona horaria.
# ==============================================================================

import logging
from typing import Any, Dict, List

from ..models import CalendarEvent
from ..repositories.interfaces import ICalendarRepository
from ..utils import parse_date, parse_datetime
from . import spreadsheet_service
from .validation import validate_event

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ['Fecha', 'Titulo', 'Descripcion', 'Tipo']


def _noon(value: Any) -> str:
    return f"{parse_date(value)}T12:00:00Z"


class CalendarService:

    def __init__(self, calendar_repo: ICalendarRepository):
        self.calendar_repo = calendar_repo

    def list_events(self) -> List[Dict[str, Any]]:
        return self.calendar_repo.get_all()

    def events_on(self, day: Any) -> List[Dict[str, Any]]:
        """Eventos de un día, ordenados por fecha y hora."""
        iso_day = parse_date(day)
        if iso_day is None:
            return []
        events = self.calendar_repo.on_day(iso_day)
        return sorted(events, key=lambda e: parse_datetime(e.get('date')) or parse_datetime(iso_day))

    def _build(self, event_id: str, data: Dict[str, Any]) -> CalendarEvent:
        return CalendarEvent(
            id=event_id,
            date=_noon(data['date']),
            title=data['title'].strip(),
            description=data['description'].strip(),
            type=data['type'],
        )

    def create_event(self, data: Dict[str, Any]) -> Dict[str, Any]:
        errors = validate_event(data)
        if errors:
            return {'ok': False, 'errors': errors}

        with self.calendar_repo.atomic():
            event = self._build(self.calendar_repo.next_sequential_id('evt'), data)
            self.calendar_repo.append(event.to_dict())

        logger.info("Evento creado: %s (%s)", event.id, event.date)
        return {'ok': True, 'event': event.to_dict()}

    def update_event(self, event_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        errors = validate_event(data)
        if errors:
            return {'ok': False, 'errors': errors}

        with self.calendar_repo.atomic():
            if self.calendar_repo.get_by_id(event_id) is None:
                return {'ok': False, 'error': 'Evento no encontrado', 'not_found': True}
            event = self._build(event_id, data)
            self.calendar_repo.update(event_id, event.to_dict())

        logger.info("Evento actualizado: %s", event_id)
        return {'ok': True, 'event': event.to_dict()}

    def delete_event(self, event_id: str) -> Dict[str, Any]:
        if self.calendar_repo.delete(event_id) is None:
            return {'ok': False, 'error': 'Evento no encontrado', 'not_found': True}
        return {'ok': True}

    def export_rows(self) -> List[Dict[str, Any]]:
        return [
            {
                'Fecha': event['date'],
                'Titulo': event['title'],
                'Descripcion': event['description'],
                'Tipo': event['type'],
            }
            for event in self.list_events()
        ]

    def export_events(self) -> bytes:
        return spreadsheet_service.rows_to_xlsx(self.export_rows(), 'Eventos', EXPORT_COLUMNS)
