# -*- coding: utf-8 -*-
"""
Test de caja - Carrito, escaneo de códigos de barras y registro de ventas
"""
import pytest

from vetstock.services.cart_service import PRODUCT_NOT_FOUND, STOCK_LIMIT_WARNING
from vetstock.services.sales_service import INVALID_CART_MESSAGE


def _set_barcode(container, product_id, barcode):
    repo = container.product_repo
    product = repo.get_by_id(product_id)
    product['barcode'] = barcode
    repo.update(product_id, product)


def _line_with(container, product_id):
    cart = container.cart_service
    line = cart.add_line()['line']
    return cart.select_product(line['id'], product_id)['line']


def test_linea_nueva_empieza_vacia(container):
    result = container.cart_service.add_line()
    assert result['ok']
    assert result['line']['product_id'] == ''
    assert result['cart']['items_count'] == 1


def test_seleccionar_producto_copia_datos(container):
    line = _line_with(container, 'prod-001')
    assert line['name'] == 'SURFAC 820 500ML'
    assert line['price'] == 14.00
    assert line['stock'] == 2
    assert line['quantity'] == 1


def test_cantidad_se_recorta_al_stock_con_advertencia(container):
    cart = container.cart_service
    line = _line_with(container, 'prod-001')

    result = cart.update_quantity(line['id'], 5)

    assert result['ok']
    assert result['line']['quantity'] == 2
    assert result['warning'].startswith(STOCK_LIMIT_WARNING)
    assert 'SURFAC 820 500ML' in result['warning']


@pytest.mark.parametrize('raw, expected', [(0, 1), (-3, 1), ('abc', 1), ('2', 2)])
def test_cantidad_minima_uno(container, raw, expected):
    cart = container.cart_service
    line = _line_with(container, 'prod-018')
    result = cart.update_quantity(line['id'], raw)
    assert result['line']['quantity'] == expected
    assert 'warning' not in result


def test_total_del_carrito(container):
    cart = container.cart_service
    first = _line_with(container, 'prod-018')
    cart.update_quantity(first['id'], 3)
    _line_with(container, 'prod-007')

    state = cart.get_cart()
    assert state['total'] == pytest.approx(3 * 9.00 + 6.50)
    assert state['items_count'] == 2


def test_eliminar_linea(container):
    cart = container.cart_service
    line = _line_with(container, 'prod-001')
    assert cart.remove_line(line['id'])['ok']
    assert cart.get_cart()['lines'] == []
    assert cart.remove_line(line['id'])['not_found'] is True


def test_escaneo_agrega_y_luego_incrementa(container):
    _set_barcode(container, 'prod-002', '7751234')
    cart = container.cart_service

    first = cart.scan_barcode('7751234')
    second = cart.scan_barcode('7751234')

    assert first['ok'] and second['ok']
    assert 'ha sido añadido al carrito' in first['message']
    lines = cart.get_cart()['lines']
    assert len(lines) == 1
    assert lines[0]['quantity'] == 2


def test_escaneo_respeta_stock(container):
    _set_barcode(container, 'prod-003', '999')
    cart = container.cart_service

    cart.scan_barcode('999')
    result = cart.scan_barcode('999')

    assert result['ok']
    assert result['cart']['lines'][0]['quantity'] == 1
    assert STOCK_LIMIT_WARNING in result['warning']


def test_escaneo_codigo_desconocido(container):
    result = container.cart_service.scan_barcode('000')
    assert result['ok'] is False
    assert result['error'] == PRODUCT_NOT_FOUND
    assert result['not_found'] is True
    assert container.cart_service.get_cart()['lines'] == []


def test_venta_no_modifica_stock(container):
    cart = container.cart_service
    line = _line_with(container, 'prod-018')
    cart.update_quantity(line['id'], 4)
    stock_before = container.product_repo.get_by_id('prod-018')['stock']

    result = cart.checkout('donato', 'efectivo')

    assert result['ok']
    assert container.product_repo.get_by_id('prod-018')['stock'] == stock_before
    assert cart.get_cart()['lines'] == []


def test_venta_registra_una_fila_por_linea(container):
    cart = container.cart_service
    first = _line_with(container, 'prod-018')
    cart.update_quantity(first['id'], 2)
    _line_with(container, 'prod-014')

    result = cart.checkout('DONATO', 'yape')

    assert result['total'] == pytest.approx(2 * 9.00 + 17.00)
    assert result['payment_method_name'] == 'Yape'
    assert result['message'] == 'Total: S/.35.00 pagado con Yape.'
    sales = container.sales_repo.get_all()
    assert len(sales) == 2
    assert {s['employee'] for s in sales} == {'Donato'}
    assert len({s['date'] for s in sales}) == 1
    assert all(s['id'].startswith('sale-') for s in sales)
    by_product = {s['product_id']: s for s in sales}
    assert by_product['prod-018']['total_price'] == pytest.approx(18.00)
    assert by_product['prod-018']['product_name'] == 'POLIFON X 25GR'


def test_vendedor_desconocido(container):
    _line_with(container, 'prod-018')
    result = container.cart_service.checkout('Nadie', 'efectivo')
    assert result['sales'][0]['employee'] == 'Desconocido'


def test_transferencia_muestra_cuentas(container):
    _line_with(container, 'prod-018')
    result = container.cart_service.checkout('Diana', 'transferencia')
    assert result['payment_method_name'] == 'Transferencia Bancaria'
    assert [a['id'] for a in result['bank_accounts']] == ['acc-001', 'acc-002']


def test_carrito_vacio_o_incompleto_se_rechaza(container):
    cart = container.cart_service
    assert cart.checkout('Diana')['error'] == INVALID_CART_MESSAGE

    cart.add_line()
    result = cart.checkout('Diana')
    assert result == {'ok': False, 'error': INVALID_CART_MESSAGE}
    assert cart.get_cart()['items_count'] == 1
    assert container.sales_repo.count() == 0


def test_ventas_nuevas_van_primero(container):
    cart = container.cart_service
    _line_with(container, 'prod-018')
    first = cart.checkout('Diana')['sales'][0]['id']
    _line_with(container, 'prod-014')
    second = cart.checkout('Diana')['sales'][0]['id']

    ids = [s['id'] for s in container.sales_service.list_sales()]
    assert ids == [second, first]
