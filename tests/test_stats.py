# -*- coding: utf-8 -*-
"""
Test de estadísticas - Rango de fechas, más vendidos, finanzas y semanas
"""
from datetime import date

import pytest

from vetstock.models import Order, OrderItem, Sale


def _sale(container, sale_id, product_id, quantity, total, when):
    container.sales_repo.append(Sale(
        id=sale_id, product_id=product_id, product_name=f'Producto {product_id}',
        product_image='', quantity=quantity, total_price=total, date=when, employee='Diana',
    ).to_dict())


def _order(container, order_id, status, when, price, quantity):
    container.order_repo.append(Order(
        id=order_id, date=when, status=status,
        items=[OrderItem('prod-001', 'SURFAC', quantity, price)],
    ).to_dict())


@pytest.fixture
def julio(container):
    _sale(container, 'sale-a', 'prod-001', 2, 28.0, '2024-07-22T10:00:00Z')
    _sale(container, 'sale-b', 'prod-002', 5, 50.0, '2024-07-24T18:30:00Z')
    _sale(container, 'sale-c', 'prod-001', 1, 14.0, '2024-07-29T09:00:00Z')
    _sale(container, 'sale-d', 'prod-003', 9, 90.0, '2024-06-01T09:00:00Z')
    _order(container, 'ord-001', 'Completado', '2024-07-23T12:00:00Z', 10.0, 3)
    _order(container, 'ord-002', 'Pendiente', '2024-07-23T12:00:00Z', 99.0, 1)
    _order(container, 'ord-003', 'Completado', '2024-05-01T12:00:00Z', 50.0, 1)
    return container.stats_service


def test_rango_por_defecto_ultimos_30_dias(container):
    start, end = container.stats_service.resolve_range(today=date(2024, 7, 30))
    assert start.date() == date(2024, 7, 1)
    assert end.date() == date(2024, 7, 30)


def test_rango_de_un_solo_dia(container):
    start, end = container.stats_service.resolve_range('2024-07-22')
    assert start.date() == end.date() == date(2024, 7, 22)
    assert end.hour == 23


def test_mas_vendidos_por_unidades(julio):
    start, end = julio.resolve_range('2024-07-01', '2024-07-31')
    top = julio.top_products(julio.sales_in_range(start, end))
    assert [(t['product_id'], t['quantity']) for t in top] == [('prod-002', 5), ('prod-001', 3)]


def test_mas_vendidos_limite_cinco(julio):
    sales = [
        {'product_id': f'prod-{i}', 'product_name': str(i), 'quantity': i}
        for i in range(1, 8)
    ]
    top = julio.top_products(sales)
    assert [t['quantity'] for t in top] == [7, 6, 5, 4, 3]


def test_resumen_financiero(julio):
    start, end = julio.resolve_range('2024-07-01', '2024-07-31')
    summary = julio.financial_summary(julio.sales_in_range(start, end), start, end)
    assert summary == {'total_income': 92.0, 'total_expenses': 30.0, 'net_profit': 62.0}


def test_ventas_semanales_desde_lunes(julio):
    start, end = julio.resolve_range('2024-07-01', '2024-07-31')
    weeks = julio.weekly_sales(julio.sales_in_range(start, end))
    assert weeks == [
        {'week_start': '2024-07-22', 'name': 'Sem 30', 'total': 78.0},
        {'week_start': '2024-07-29', 'name': 'Sem 31', 'total': 14.0},
    ]


def test_reporte_completo(julio):
    report = julio.get_stats('2024-07-22', '2024-07-24')
    assert report['sales_count'] == 2
    assert report['financial_summary']['total_expenses'] == 30.0
    assert report['date_from'] == '2024-07-22'
    assert report['date_to'] == '2024-07-24'


def test_panel_principal(container):
    data = container.stats_service.dashboard()
    assert data['product_count'] == 20
    assert data['low_stock_count'] == 17
    assert data['sales_count'] == 0
