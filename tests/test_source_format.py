# -*- coding: utf-8 -*-
"""
Test de formato de fuentes - Fin de línea CRLF en todo el código
"""
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def _sources():
    yield ROOT / 'wsgi.py'
    for folder in ('vetstock', 'tests'):
        yield from sorted((ROOT / folder).rglob('*.py'))


def test_fuentes_con_fin_de_linea_crlf():
    bare_lf = []
    for path in _sources():
        content = path.read_bytes()
        if content.count(b'\n') != content.count(b'\r\n'):
            bare_lf.append(str(path.relative_to(ROOT)))
    assert bare_lf == []
