# ==============================================================================
# HOJAS DE CÁLCULO (openpyxl)
# ==============================================================================
# Exportación a .xlsx y lectura de archivos importados.
# Los nombres de columna son el formato de intercambio: la plantilla de
# pedido que se exporta es exactamente la que se vuelve a importar.
# ==============================================================================

import logging
from io import BytesIO
from typing import Any, Dict, List, Sequence

from openpyxl import Workbook, load_workbook

from ..exceptions import SpreadsheetFormatError

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# Columnas de la plantilla de pedido (A-E)
ORDER_TEMPLATE_COLUMNS = ['ID Producto', 'Producto', 'Cantidad', 'Precio Compra Unit.', 'Subtotal']


def _safe_title(title: str) -> str:
    """Excel limita los nombres de hoja a 31 caracteres sin []:*?/\\"""
    for char in '[]:*?/\\':
        title = title.replace(char, '-')
    return title[:31] or 'Hoja1'


def rows_to_xlsx(rows: List[Dict[str, Any]], sheet_title: str, columns: Sequence[str] = None) -> bytes:
    """
    Serializa una lista de diccionarios como libro .xlsx.

    Args:
        rows: Registros planos (columna -> valor)
        sheet_title: Nombre de la hoja
        columns: Orden de columnas; por defecto las claves de la primera fila

    Returns:
        Contenido del archivo
    """
    wb = Workbook()
    ws = wb.active
    ws.title = _safe_title(sheet_title)

    headers = list(columns) if columns else (list(rows[0].keys()) if rows else [])
    ws.append(headers)
    for row in rows:
        ws.append([row.get(h) for h in headers])

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def read_rows(content: bytes) -> List[Dict[str, Any]]:
    """
    Lee la primera hoja de un .xlsx usando la primera fila como encabezado.

    Args:
        content: Bytes del archivo subido

    Returns:
        Lista de filas (encabezado -> valor); se omiten filas vacías

    Raises:
        SpreadsheetFormatError: Si el archivo no es una hoja de cálculo legible
    """
    if not content:
        raise SpreadsheetFormatError('Archivo vacío')
    try:
        wb = load_workbook(BytesIO(content), data_only=True, read_only=True)
    except Exception as exc:
        logger.warning("No se pudo abrir la hoja de cálculo: %s", exc)
        raise SpreadsheetFormatError(str(exc)) from exc

    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        names = [str(h).strip() if h is not None else '' for h in header]
        result = []
        for values in rows:
            if values is None or all(v is None or v == '' for v in values):
                continue
            result.append({
                name: value for name, value in zip(names, values) if name
            })
        return result
    finally:
        wb.close()


def build_order_template(order: Dict[str, Any]) -> bytes:
    """
    Plantilla de pedido para que el proveedor complete precios.

    Columna D (Precio Compra Unit.) queda vacía; E es la fórmula C*D.

    Args:
        order: Pedido como diccionario (to_dict)

    Returns:
        Contenido .xlsx
    """
    wb = Workbook()
    ws = wb.active
    ws.title = _safe_title(f"Pedido {order.get('id', '')}")
    ws.append(ORDER_TEMPLATE_COLUMNS)

    for index, item in enumerate(order.get('items', []), start=2):
        ws.append([
            item.get('product_id'),
            item.get('name'),
            item.get('quantity'),
            None,
            f"=C{index}*D{index}",
        ])

    ws.column_dimensions['A'].width = 15
    ws.column_dimensions['B'].width = 40
    ws.column_dimensions['C'].width = 10
    ws.column_dimensions['D'].width = 20
    ws.column_dimensions['E'].width = 15

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
