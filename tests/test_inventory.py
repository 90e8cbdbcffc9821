# -*- coding: utf-8 -*-
"""
Test del catálogo - Alta, búsqueda, importación y exportación
"""
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from vetstock.services.inventory_service import EXPORT_COLUMNS, IMPORT_ERROR_MESSAGE


def _product(**overrides):
    data = {
        'name': 'Collar antipulgas',
        'category': 'Accesorios para mascotas',
        'stock': 4,
        'purchase_price': 8,
        'sale_price': 12.5,
    }
    data.update(overrides)
    return data


def _xlsx(header, *rows):
    wb = Workbook()
    ws = wb.active
    ws.append(header)
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def test_ids_secuenciales_y_al_inicio(container):
    service = container.inventory_service

    first = service.create_product(_product())
    second = service.create_product(_product(name='Collar grande'))

    assert first['ok'] and second['ok']
    assert first['product']['id'] == 'prod-021'
    assert second['product']['id'] == 'prod-022'
    all_ids = [p['id'] for p in container.product_repo.get_all()]
    assert all_ids[0] == 'prod-022'
    assert len(all_ids) == len(set(all_ids))


def test_alta_con_errores_de_validacion(container):
    result = container.inventory_service.create_product(
        _product(name='ab', category='Juguetes', stock=-1, sale_price='x')
    )
    assert result['ok'] is False
    assert set(result['errors']) == {'name', 'category', 'stock', 'sale_price'}
    assert container.product_repo.count() == 20


def test_alta_normaliza_campos_opcionales(container):
    result = container.inventory_service.create_product(
        _product(barcode='N/A', expiry_date='Nov-25', stock=None)
    )
    product = result['product']
    assert product['barcode'] is None
    assert product['expiry_date'] == '2025-11-30'
    assert product['stock'] == 0
    assert product['sales_history'] == {}


def test_editar_conserva_historial(container):
    repo = container.product_repo
    product = repo.get_by_id('prod-003')
    product['sales_history'] = {'2024-07-01': 3}
    repo.update('prod-003', product)

    result = container.inventory_service.update_product('prod-003', _product(name='PROTEXIN 2 LITROS'))

    assert result['ok']
    stored = repo.get_by_id('prod-003')
    assert stored['name'] == 'PROTEXIN 2 LITROS'
    assert stored['sales_history'] == {'2024-07-01': 3}


def test_editar_producto_inexistente(container):
    result = container.inventory_service.update_product('prod-999', _product())
    assert result == {'ok': False, 'error': 'Producto no encontrado', 'not_found': True}


def test_listado_filtra_y_pagina(container):
    service = container.inventory_service

    page = service.list_products(page=1)
    assert page['total'] == 20
    assert page['total_pages'] == 3
    assert len(page['products']) == 8

    tifon = service.list_products(search='tifon')
    assert {p['id'] for p in tifon['products']} == {'prod-005', 'prod-006', 'prod-013'}

    fert = service.list_products(category='fertilizantes', low_stock=True, page=1)
    assert all(p['category'] == 'Fertilizantes' and p['stock'] < 5 for p in fert['products'])
    assert 'prod-013' not in {p['id'] for p in fert['products']}


def test_busqueda_por_codigo_de_barras(container):
    repo = container.product_repo
    product = repo.get_by_id('prod-001')
    product['barcode'] = '7750001112223'
    repo.update('prod-001', product)

    result = container.inventory_service.list_products(search='0001112')
    assert [p['id'] for p in result['products']] == ['prod-001']


def test_importacion_omite_ids_desconocidos(container):
    repo = container.product_repo
    product = repo.get_by_id('prod-002')
    product['barcode'] = '111'
    repo.update('prod-002', product)

    content = _xlsx(
        ['ID', 'Producto', 'Código de Barras', 'Stock', 'Precio Venta', 'Categoría', 'Fecha de Vencimiento'],
        ['prod-002', None, 'N/A', 50, None, 'Juguetes', None],
        ['prod-404', 'Fantasma', '999', 1, 1, 'Vitaminas', None],
        ['prod-004', 'DORSAN 500ML', None, None, 25, 'Medicamentos', 'Dic-25'],
    )

    result = container.inventory_service.bulk_import(content)

    assert result == {'ok': True, 'updated': 2}
    assert repo.count() == 20
    assert repo.get_by_id('prod-404') is None

    surfac = repo.get_by_id('prod-002')
    assert surfac['barcode'] is None
    assert surfac['stock'] == 50
    assert surfac['name'] == 'SURFAC 820 250ML'
    assert surfac['sale_price'] == 10.00
    assert surfac['category'] == 'Desinfectantes'
    assert surfac['expiry_date'] is None

    dorsan = repo.get_by_id('prod-004')
    assert dorsan['name'] == 'DORSAN 500ML'
    assert dorsan['sale_price'] == 25
    assert dorsan['category'] == 'Medicamentos'
    assert dorsan['expiry_date'] == '2025-12-31'
    assert dorsan['stock'] == 3


@pytest.mark.parametrize('field, raw', [
    ('stock', 'nan'),
    ('stock', 'inf'),
    ('stock', float('inf')),
    ('purchase_price', 'nan'),
    ('sale_price', float('nan')),
    ('sale_price', '1e400'),
])
def test_alta_rechaza_numeros_no_finitos(container, field, raw):
    result = container.inventory_service.create_product(_product(**{field: raw}))
    assert result['ok'] is False
    assert set(result['errors']) == {field}
    assert container.product_repo.count() == 20


def test_alta_con_codigo_de_barras_numerico(container):
    service = container.inventory_service
    result = service.create_product(_product(barcode=7750001112223))
    assert result['ok']
    assert result['product']['barcode'] == '7750001112223'
    assert service.find_by_barcode('7750001112223')['id'] == result['product']['id']
    assert service.find_by_barcode(7750001112223)['id'] == result['product']['id']


@pytest.mark.parametrize('raw', ['nan', 'inf', '-inf', '1e400'])
def test_importacion_ignora_stock_no_finito(container, raw):
    content = _xlsx(['ID', 'Stock', 'Precio Venta'], ['prod-004', raw, raw])

    result = container.inventory_service.bulk_import(content)

    assert result == {'ok': True, 'updated': 1}
    dorsan = container.product_repo.get_by_id('prod-004')
    assert dorsan['stock'] == 3
    assert dorsan['sale_price'] == 20.00


def test_importacion_archivo_ilegible(container):
    before = container.product_repo.get_all()
    result = container.inventory_service.bulk_import(b'esto no es un xlsx')
    assert result == {'ok': False, 'error': IMPORT_ERROR_MESSAGE}
    assert container.product_repo.get_all() == before


def test_exportacion_respeta_filtros(container):
    content = container.inventory_service.export_catalog(category='Vitaminas')
    ws = load_workbook(BytesIO(content)).active
    rows = list(ws.iter_rows(values_only=True))

    assert list(rows[0]) == EXPORT_COLUMNS
    assert len(rows) == 2
    row = dict(zip(rows[0], rows[1]))
    assert row['ID'] == 'prod-018'
    assert row['Código de Barras'] == 'N/A'
    assert row['Estado'] == 'En Stock'
    assert row['Fecha de Vencimiento'] == '31/05/2023'


def test_estado_bajo_stock_en_exportacion(container):
    rows = container.inventory_service.export_rows(search='PROTEXIN')
    assert rows[0]['Estado'] == 'Bajo Stock (1)'


@pytest.mark.parametrize('stock, low', [(0, True), (4, True), (5, False)])
def test_umbral_de_stock_bajo(container, stock, low):
    repo = container.product_repo
    product = repo.get_by_id('prod-018')
    product['stock'] = stock
    repo.update('prod-018', product)
    ids = {p['id'] for p in container.inventory_service.low_stock_products()}
    assert ('prod-018' in ids) is low
