# -*- coding: utf-8 -*-
"""
Test del libro de pedidos - Alta, plantilla .xlsx y completado con precios
"""
from io import BytesIO

import pytest
from openpyxl import load_workbook

from vetstock.services.order_service import IMPORT_ERROR_MESSAGE, ORDER_NOT_FOUND
from vetstock.services.spreadsheet_service import ORDER_TEMPLATE_COLUMNS


def _create(container, items=None, supplier='Agrovet Norte'):
    items = items or [
        {'product_id': 'prod-001', 'quantity': 10},
        {'product_id': 'prod-002', 'quantity': 4},
    ]
    result = container.order_service.create_order(items, supplier)
    assert result['ok'], result
    return result['order']


def test_alta_copia_nombre_y_precio(container):
    order = _create(container)

    assert order['id'] == 'ord-001'
    assert order['status'] == 'Pendiente'
    assert order['supplier'] == 'Agrovet Norte'
    assert order['items'][0] == {
        'product_id': 'prod-001',
        'name': 'SURFAC 820 500ML',
        'quantity': 10,
        'purchase_price': 10.00,
    }


def test_alta_con_producto_desconocido(container):
    order = _create(container, [{'product_id': 'prod-777', 'quantity': 1}], supplier='  ')
    assert order['items'][0]['name'] == 'Producto Desconocido'
    assert order['items'][0]['purchase_price'] == 0.0
    assert order['supplier'] is None


@pytest.mark.parametrize('items', [
    [],
    None,
    [{'product_id': '', 'quantity': 2}],
    [{'product_id': 'prod-001', 'quantity': 0}],
    [{'product_id': 'prod-001', 'quantity': 1.5}],
    [{'product_id': 'prod-001', 'quantity': 'nan'}],
    [{'product_id': 'prod-001', 'quantity': 'inf'}],
    [{'product_id': 'prod-001', 'quantity': float('inf')}],
    [{'product_id': 'prod-001', 'quantity': 10 ** 400}],
])
def test_alta_invalida(container, items):
    result = container.order_service.create_order(items)
    assert result['ok'] is False
    assert 'items' in result['errors']
    assert container.order_repo.count() == 0


def test_pedidos_nuevos_van_primero(container):
    first = _create(container)
    second = _create(container)
    ids = [o['id'] for o in container.order_service.list_orders()]
    assert ids == [second['id'], first['id']]
    assert second['id'] == 'ord-002'


def test_completar_aplica_filas_validas(container):
    order = _create(container)
    products = container.product_repo

    result = container.order_service.complete_order(order['id'], [
        {'product_id': 'prod-001', 'unit_price': 9.5},
        {'product_id': 'prod-002', 'unit_price': 'barato'},
        {'product_id': 'prod-019', 'unit_price': 3},
        {'product_id': None, 'unit_price': 1},
    ])

    assert result['ok']
    assert result['applied'] == 1
    assert result['order']['status'] == 'Completado'

    surfac = products.get_by_id('prod-001')
    assert surfac['stock'] == 2 + 10
    assert surfac['purchase_price'] == 9.5
    untouched = products.get_by_id('prod-002')
    assert untouched['stock'] == 3
    assert untouched['purchase_price'] == 6.50
    assert products.get_by_id('prod-019')['stock'] == 2

    stored = container.order_service.get_order(order['id'])
    assert stored['items'][0]['purchase_price'] == 9.5
    assert stored['items'][1]['purchase_price'] == 6.50
    assert stored['total'] == pytest.approx(10 * 9.5 + 4 * 6.50)


def test_completar_sin_filas_validas_igual_completa(container):
    order = _create(container)
    result = container.order_service.complete_order(order['id'], [
        {'product_id': 'prod-001', 'unit_price': -1},
        {'product_id': 'prod-002', 'unit_price': True},
    ])
    assert result['ok']
    assert result['applied'] == 0
    assert container.order_repo.get_by_id(order['id'])['status'] == 'Completado'
    assert container.product_repo.get_by_id('prod-001')['stock'] == 2


def test_completar_ignora_precios_no_finitos(container):
    order = _create(container)
    result = container.order_service.complete_order(order['id'], [
        {'product_id': 'prod-001', 'unit_price': float('nan')},
        {'product_id': 'prod-002', 'unit_price': float('inf')},
    ])
    assert result['ok']
    assert result['applied'] == 0
    assert container.product_repo.get_by_id('prod-001')['purchase_price'] == 10.00


def test_alta_con_proveedor_numerico(container):
    order = _create(container, supplier=20601234567)
    assert order['supplier'] == '20601234567'


def test_completar_dos_veces_se_rechaza(container):
    order = _create(container)
    container.order_service.complete_order(order['id'], [{'product_id': 'prod-001', 'unit_price': 1}])

    result = container.order_service.complete_order(order['id'], [{'product_id': 'prod-001', 'unit_price': 1}])

    assert result['ok'] is False
    assert 'Completado' in result['error']
    assert container.product_repo.get_by_id('prod-001')['stock'] == 12


def test_completar_pedido_inexistente(container):
    result = container.order_service.complete_order('ord-404', [])
    assert result == {'ok': False, 'error': ORDER_NOT_FOUND, 'not_found': True}


def test_plantilla_ida_y_vuelta(container):
    order = _create(container)
    service = container.order_service

    content = service.export_order_template(order['id'])
    wb = load_workbook(BytesIO(content))
    ws = wb.active
    assert ws.title == f"Pedido {order['id']}"
    assert [c.value for c in ws[1]] == ORDER_TEMPLATE_COLUMNS
    assert ws['A2'].value == 'prod-001'
    assert ws['D2'].value is None
    assert ws['E2'].value == '=C2*D2'

    ws['D2'] = 11.25
    ws['D3'] = 7
    buffer = BytesIO()
    wb.save(buffer)

    result = service.import_order_prices(order['id'], buffer.getvalue())

    assert result['ok'], result
    assert result['applied'] == 2
    completed = service.get_order(order['id'])
    assert completed['status'] == 'Completado'
    assert completed['total'] == pytest.approx(10 * 11.25 + 4 * 7)
    assert container.product_repo.get_by_id('prod-002')['stock'] == 3 + 4
    assert container.product_repo.get_by_id('prod-002')['purchase_price'] == 7


def test_importar_archivo_ilegible_no_toca_nada(container):
    order = _create(container)
    result = container.order_service.import_order_prices(order['id'], b'PK rota')
    assert result == {'ok': False, 'error': IMPORT_ERROR_MESSAGE}
    assert container.order_repo.get_by_id(order['id'])['status'] == 'Pendiente'


def test_plantilla_de_pedido_inexistente(container):
    assert container.order_service.export_order_template('ord-404') is None
    result = container.order_service.import_order_prices('ord-404', b'')
    assert result['not_found'] is True


def test_exportar_todos_los_pedidos(container):
    _create(container)
    rows = container.order_service.export_rows()
    assert len(rows) == 2
    assert rows[0]['ID Pedido'] == 'ord-001'
    assert rows[0]['Subtotal'] == pytest.approx(100.0)
    assert rows[1]['Proveedor'] == 'Agrovet Norte'


def test_filtrar_por_estado(container):
    first = _create(container)
    _create(container)
    container.order_service.complete_order(first['id'], [])
    pending = container.order_service.list_orders('Pendiente')
    assert [o['id'] for o in pending] == ['ord-002']
