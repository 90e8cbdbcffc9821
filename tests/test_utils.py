# -*- coding: utf-8 -*-
"""
Test de utilidades - Fechas de hojas de proveedores y números de celdas
"""
from datetime import date, datetime, timezone

import pytest

from vetstock.utils import (
    format_day,
    format_timestamp,
    parse_date,
    parse_datetime,
    to_int,
    to_number,
    week_start,
)


@pytest.mark.parametrize('raw, expected', [
    ('5/08/2023', '2023-08-05'),
    ('20/04/22', '2022-04-20'),
    ('Mar-22', '2022-03-31'),
    ('Set-23', '2023-09-30'),
    ('Feb-24', '2024-02-29'),
    ('2024-07-01', '2024-07-01'),
    ('2024-07-01T15:30:00Z', '2024-07-01'),
    (date(2023, 1, 2), '2023-01-02'),
    (datetime(2023, 1, 2, 10, 0), '2023-01-02'),
])
def test_parse_date_formatos_aceptados(raw, expected):
    assert parse_date(raw) == expected


@pytest.mark.parametrize('raw', [None, '', '   ', 'N/A', 'mañana', '31/02/2023', 12345])
def test_parse_date_no_reconocida(raw):
    assert parse_date(raw) is None


def test_parse_datetime_normaliza_a_utc():
    parsed = parse_datetime('2024-07-22T15:04:05Z')
    assert parsed == datetime(2024, 7, 22, 15, 4, 5, tzinfo=timezone.utc)
    assert parse_datetime('2024-07-22').tzinfo is not None
    assert parse_datetime('basura') is None


def test_to_number_y_to_int():
    assert to_number('12,50') == 12.5
    assert to_number(3) == 3.0
    assert to_number(True) is None
    assert to_number('abc') is None
    assert to_number('') is None
    assert to_int('7') == 7


@pytest.mark.parametrize('raw', [
    'nan', 'NaN', 'inf', '-inf', 'Infinity', '1e400',
    float('nan'), float('inf'), float('-inf'), 10 ** 400,
])
def test_numeros_no_finitos_no_son_numeros(raw):
    assert to_number(raw) is None
    assert to_int(raw) is None


def test_formatos_de_exportacion():
    assert format_day('2023-08-05') == '05/08/2023'
    assert format_day(None) == 'N/A'
    assert format_timestamp('2024-07-22T15:04:05+00:00') == '2024-07-22 15:04'


def test_week_start_es_lunes():
    # 2024-07-25 es jueves
    assert week_start(date(2024, 7, 25)) == date(2024, 7, 22)
    assert week_start(date(2024, 7, 22)) == date(2024, 7, 22)
