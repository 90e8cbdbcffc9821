# ==============================================================================
# UTILIDADES - Fechas, números y formatos compartidos
# ==============================================================================

import calendar
import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

# Meses abreviados en español como aparecen en las hojas de proveedores
_SPANISH_MONTHS = {
    'ene': 1, 'feb': 2, 'mar': 3, 'abr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'ago': 8, 'set': 9, 'oct': 10, 'nov': 11, 'dic': 12,
}

_MONTH_YEAR_RE = re.compile(r'([a-z]{3})-(\d{2})')
_ISO_RE = re.compile(r'(\d{4})-(\d{2})-(\d{2})')


def now_iso() -> str:
    """Timestamp actual en ISO-8601 UTC."""
    return datetime.now(timezone.utc).isoformat()


def parse_date(value: Any) -> Optional[str]:
    """
    Convierte fechas en varios formatos a 'YYYY-MM-DD'.

    Formatos aceptados:
        - date / datetime (celdas de fecha de Excel)
        - 'Mmm-yy' en español (Mar-22 -> último día de marzo 2022)
        - 'd/m/yyyy' y 'd/m/yy'
        - ISO 'YYYY-MM-DD' (con o sin hora)

    Args:
        value: Valor a interpretar

    Returns:
        Fecha ISO o None si no se reconoce
    """
    if value is None or value == '':
        return None

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = _MONTH_YEAR_RE.search(text.lower())
    if match:
        month = _SPANISH_MONTHS.get(match.group(1))
        if month:
            year = 2000 + int(match.group(2))
            last_day = calendar.monthrange(year, month)[1]
            return date(year, month, last_day).isoformat()

    parts = text.split('/')
    if len(parts) == 3 and all(p.strip().isdigit() for p in parts):
        day, month, year = (p.strip() for p in parts)
        if len(year) == 2:
            year = '20' + year
        if len(year) == 4:
            try:
                return date(int(year), int(month), int(day)).isoformat()
            except ValueError:
                return None

    match = _ISO_RE.search(text)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3))).isoformat()
        except ValueError:
            return None

    return None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Interpreta un timestamp ISO (con 'Z' o zona) como datetime con zona UTC."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        day = parse_date(value)
        if day is None:
            return None
        parsed = datetime.fromisoformat(day)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_number(value: Any) -> Optional[float]:
    """
    Convierte un valor de celda a número.
    None, vacío, texto no numérico, NaN o infinito -> None.
    Los booleanos no son números.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(',', '.')
        if not value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def to_int(value: Any) -> Optional[int]:
    number = to_number(value)
    if number is None:
        return None
    return int(number)


def to_text(value: Any) -> str:
    """Texto recortado de un valor crudo (JSON o celda); None -> ''."""
    if value is None:
        return ''
    return str(value).strip()


def format_day(iso_date: Optional[str]) -> str:
    """'2023-08-05' -> '05/08/2023'; vacío -> 'N/A'."""
    if not iso_date:
        return 'N/A'
    try:
        return date.fromisoformat(iso_date[:10]).strftime('%d/%m/%Y')
    except ValueError:
        return 'N/A'


def format_timestamp(value: str) -> str:
    """Timestamp ISO -> 'yyyy-mm-dd HH:MM'."""
    parsed = parse_datetime(value)
    if parsed is None:
        return value or ''
    return parsed.strftime('%Y-%m-%d %H:%M')


def week_start(day: date) -> date:
    """Lunes de la semana que contiene day."""
    return day - timedelta(days=day.weekday())
