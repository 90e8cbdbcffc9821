# ==============================================================================
# SERVICIO DE ESTADÍSTICAS
# ==============================================================================
# Reportes de solo lectura sobre ventas, pedidos y catálogo:
# - Productos más vendidos
# - Resumen financiero (ingresos, egresos, neto)
# - Ventas por semana (semanas que empiezan en lunes)
# - Resumen del panel principal
# ==============================================================================

import logging
from collections import OrderedDict
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..models import LOW_STOCK_THRESHOLD, Order, OrderStatus
from ..repositories.interfaces import IOrderRepository, IProductRepository, ISalesRepository
from ..utils import parse_date, parse_datetime, week_start

logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 30
TOP_PRODUCTS_LIMIT = 5


def _as_day(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    iso = parse_date(value)
    return date.fromisoformat(iso) if iso else None


class StatsService:
    """Servicio de estadísticas y panel."""

    def __init__(self, sales_repo: ISalesRepository, order_repo: IOrderRepository,
                 product_repo: IProductRepository, low_stock_threshold: int = LOW_STOCK_THRESHOLD):
        self.sales_repo = sales_repo
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.low_stock_threshold = low_stock_threshold

    def resolve_range(self, date_from: Any = None, date_to: Any = None,
                      today: Optional[date] = None) -> Tuple[datetime, datetime]:
        """
        Convierte un rango de días en límites datetime UTC inclusivos.

        Sin date_from se usan los últimos 30 días (hoy incluido).
        Sin date_to el rango es solo el día date_from.
        """
        today = today or datetime.now(timezone.utc).date()
        start_day = _as_day(date_from)
        end_day = _as_day(date_to)
        if start_day is None:
            start_day = today - timedelta(days=DEFAULT_RANGE_DAYS - 1)
            end_day = end_day or today
        if end_day is None:
            end_day = start_day
        start = datetime.combine(start_day, time.min, tzinfo=timezone.utc)
        end = datetime.combine(end_day, time.max, tzinfo=timezone.utc)
        return start, end

    def sales_in_range(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        return self.sales_repo.in_range(start, end)

    def top_products(self, sales: List[Dict[str, Any]],
                     limit: int = TOP_PRODUCTS_LIMIT) -> List[Dict[str, Any]]:
        """Productos con más unidades vendidas."""
        totals: Dict[str, Dict[str, Any]] = OrderedDict()
        for sale in sales:
            entry = totals.setdefault(sale['product_id'], {
                'product_id': sale['product_id'],
                'name': sale['product_name'],
                'quantity': 0,
            })
            entry['quantity'] += sale['quantity']
        ranked = sorted(totals.values(), key=lambda e: e['quantity'], reverse=True)
        return ranked[:limit]

    def financial_summary(self, sales: List[Dict[str, Any]], start: datetime,
                          end: datetime) -> Dict[str, float]:
        """
        Ingresos = suma de ventas; egresos = pedidos Completado del rango
        (precio de compra x cantidad); neto = ingresos - egresos.
        """
        income = sum(sale['total_price'] for sale in sales)

        expenses = 0.0
        for data in self.order_repo.by_status(OrderStatus.COMPLETADO.value):
            when = parse_datetime(data.get('date'))
            if when is None or when < start or when > end:
                continue
            expenses += Order.from_dict(data).total

        return {
            'total_income': round(income, 2),
            'total_expenses': round(expenses, 2),
            'net_profit': round(income - expenses, 2),
        }

    def weekly_sales(self, sales: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Total vendido por semana (lunes a domingo), en orden cronológico."""
        weeks: Dict[date, float] = {}
        for sale in sales:
            when = parse_datetime(sale['date'])
            if when is None:
                continue
            monday = week_start(when.date())
            weeks[monday] = weeks.get(monday, 0.0) + sale['total_price']
        return [
            {
                'week_start': monday.isoformat(),
                'name': f"Sem {monday.isocalendar()[1]}",
                'total': round(weeks[monday], 2),
            }
            for monday in sorted(weeks)
        ]

    def get_stats(self, date_from: Any = None, date_to: Any = None) -> Dict[str, Any]:
        """Reporte completo de la página de estadísticas."""
        start, end = self.resolve_range(date_from, date_to)
        sales = self.sales_in_range(start, end)
        return {
            'date_from': start.date().isoformat(),
            'date_to': end.date().isoformat(),
            'sales_count': len(sales),
            'top_products': self.top_products(sales),
            'financial_summary': self.financial_summary(sales, start, end),
            'weekly_sales': self.weekly_sales(sales),
        }

    def dashboard(self) -> Dict[str, Any]:
        """Resumen del panel: productos, stock bajo y ventas."""
        low_stock = self.product_repo.low_stock(self.low_stock_threshold)
        return {
            'product_count': self.product_repo.count(),
            'low_stock_count': len(low_stock),
            'low_stock_products': low_stock,
            'sales_count': len(self.sales_repo.get_all()),
        }
