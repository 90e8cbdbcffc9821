# ==============================================================================
# REPOSITORIO BASE - Colección de registros en memoria o archivo JSON
# ==============================================================================

import copy
import json
import logging
import os
import threading
from abc import ABC
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Clase base para todos los repositorios.

    Guarda una lista de diccionarios con dos backends:
    - Memoria: file_path=None, los datos viven en el proceso
    - JSON: file_path apunta a un archivo; cada escritura reemplaza el
      archivo completo a través de un temporal

    Cada repositorio tiene su propio RLock. atomic() lo mantiene tomado
    durante un bloque de operaciones y restaura los datos si el bloque falla.
    """

    def __init__(self, file_path: Optional[str] = None, initial: Optional[List[Dict[str, Any]]] = None):
        """
        Inicializa el repositorio.

        Args:
            file_path: Ruta al archivo JSON, o None para backend en memoria
            initial: Registros iniciales si el almacenamiento está vacío
        """
        self.file_path = file_path
        self._lock = threading.RLock()
        self._memory: List[Dict[str, Any]] = []
        self._ensure_storage(initial or [])

    def _ensure_storage(self, initial: List[Dict[str, Any]]) -> None:
        """Crea el archivo (o la lista) con los datos iniciales si no existe."""
        if self.file_path is None:
            self._memory = copy.deepcopy(initial)
            return
        if not os.path.exists(self.file_path):
            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            self._write_raw(initial)

    def _read_raw(self) -> List[Dict[str, Any]]:
        """
        Lee los datos crudos.

        Returns:
            Copia de la lista de registros
        """
        with self._lock:
            if self.file_path is None:
                return copy.deepcopy(self._memory)
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (json.JSONDecodeError, FileNotFoundError):
                logger.warning("Archivo de datos ilegible, se usa lista vacía: %s", self.file_path)
                return []
            return data if isinstance(data, list) else []

    def _write_raw(self, data: List[Dict[str, Any]]) -> None:
        """
        Escribe la lista completa.

        Args:
            data: Registros a guardar
        """
        with self._lock:
            if self.file_path is None:
                self._memory = copy.deepcopy(data)
                return
            # Escribir a archivo temporal primero para atomicidad
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except Exception:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise

    @contextmanager
    def atomic(self) -> Iterator['BaseRepository']:
        """
        Bloque transaccional por agregado.

        Mantiene el lock del repositorio y, si el bloque lanza una excepción,
        restaura los datos al estado previo antes de propagarla.

        Uso:
            with repo.atomic():
                repo.update(...)
                repo.update(...)
        """
        with self._lock:
            snapshot = self._read_raw()
            try:
                yield self
            except Exception:
                self._write_raw(snapshot)
                logger.warning("Operación revertida en %s", type(self).__name__)
                raise

    # ═══════════════════════════════════════════════════════════════════════
    # OPERACIONES DE LISTA
    # ═══════════════════════════════════════════════════════════════════════

    def get_all(self) -> List[Dict[str, Any]]:
        """Obtiene todos los registros (en el orden almacenado)."""
        return self._read_raw()

    def count(self) -> int:
        return len(self._read_raw())

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene un registro por su ID.

        Returns:
            Datos del registro o None si no existe
        """
        for record in self._read_raw():
            if record.get('id') == record_id:
                return record
        return None

    def append(self, record: Dict[str, Any]) -> None:
        """Agrega un registro al final."""
        with self._lock:
            data = self._read_raw()
            data.append(record)
            self._write_raw(data)

    def prepend(self, record: Dict[str, Any]) -> None:
        """Agrega un registro al inicio (más reciente primero)."""
        with self._lock:
            data = self._read_raw()
            data.insert(0, record)
            self._write_raw(data)

    def update(self, record_id: str, record_data: Dict[str, Any]) -> bool:
        """
        Reemplaza el registro con ese ID manteniendo su posición.

        Returns:
            True si el registro existía
        """
        with self._lock:
            data = self._read_raw()
            for index, record in enumerate(data):
                if record.get('id') == record_id:
                    data[index] = record_data
                    self._write_raw(data)
                    return True
            return False

    def delete(self, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Elimina un registro.

        Returns:
            Datos del registro eliminado o None si no existía
        """
        with self._lock:
            data = self._read_raw()
            for index, record in enumerate(data):
                if record.get('id') == record_id:
                    removed = data.pop(index)
                    self._write_raw(data)
                    return removed
            return None

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Primer registro cuyo campo coincide con value."""
        for record in self._read_raw():
            if record.get(field) == value:
                return record
        return None

    def filter(self, predicate: Callable[[Dict[str, Any]], bool]) -> List[Dict[str, Any]]:
        return [r for r in self._read_raw() if predicate(r)]

    def next_sequential_id(self, prefix: str, width: int = 3) -> str:
        """
        Genera el siguiente ID secuencial: prefix-{n+1} con n = cantidad actual.
        Si ese ID ya está tomado (por ejemplo tras eliminar registros) avanza
        hasta encontrar uno libre.
        """
        with self._lock:
            data = self._read_raw()
            taken = {r.get('id') for r in data}
            n = len(data) + 1
            candidate = f"{prefix}-{n:0{width}d}"
            while candidate in taken:
                n += 1
                candidate = f"{prefix}-{n:0{width}d}"
            return candidate
