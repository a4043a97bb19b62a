# ==============================================================================
# REPOSITORIO BASE - Almacenamiento en memoria con IDs autoincrementales
# ==============================================================================

import itertools
import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from app_pdv.models.money import utc_now


T = TypeVar('T')


class MemoryRepository(Generic[T]):
    """
    Clase base para todos los repositorios del Entity Store.

    Cada repositorio guarda un tipo de entidad en un diccionario
    {id: entidad} con su propio contador de IDs. Los IDs son monótonos y
    nunca se reutilizan. No existen operaciones de edición ni borrado:
    el historial es de solo-agregar.

    Concurrencia:
    - La asignación de ID y la inserción ocurren bajo el mismo lock.
    - El lock se puede compartir entre repositorios (lo hace AppContainer)
      para que un servicio lea varias colecciones y escriba en otra sin
      que otro hilo se intercale.
    """

    # Campo de timestamp que el store estampa al crear (None = ninguno)
    timestamp_field: Optional[str] = None

    def __init__(self, lock: Optional[threading.RLock] = None):
        """
        Inicializa el repositorio vacío.

        Args:
            lock: Lock compartido del store (si no se pasa, uno propio)
        """
        self._lock = lock or threading.RLock()
        self._records: Dict[int, T] = {}
        self._ids = itertools.count(1)

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    def create(self, record: T) -> T:
        """
        Guarda una nueva entidad.

        Asigna el siguiente ID y, si corresponde, el timestamp del servidor.

        Args:
            record: Entidad sin ID

        Returns:
            Entidad guardada (con id y timestamp)
        """
        with self._lock:
            changes: Dict[str, Any] = {'id': next(self._ids)}
            if self.timestamp_field:
                changes[self.timestamp_field] = utc_now()
            stored = replace(record, **changes)
            self._records[stored.id] = stored
            return stored

    # =========================================================================
    # LECTURA
    # =========================================================================

    def get_by_id(self, record_id: int) -> Optional[T]:
        """
        Obtiene una entidad por su ID.

        Returns:
            Entidad o None si no existe
        """
        with self._lock:
            return self._records.get(record_id)

    def get_all(self) -> List[T]:
        """
        Obtiene todas las entidades en orden de inserción (= orden de ID).
        Devuelve una copia de la lista: el llamador no altera el store.
        """
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def find_by(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """Primera entidad que cumple el predicado, o None."""
        for record in self.get_all():
            if predicate(record):
                return record
        return None

    def find_all_by(self, predicate: Callable[[T], bool]) -> List[T]:
        """Todas las entidades que cumplen el predicado."""
        return [r for r in self.get_all() if predicate(r)]

    def get_by_date_range(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[T]:
        """
        Filtra por el timestamp de la entidad dentro de [start, end].

        Ambos extremos son inclusivos. Un extremo None deja el rango abierto
        de ese lado; sin extremos devuelve todo.

        Args:
            start: Fecha inicio (con zona horaria)
            end: Fecha fin (con zona horaria)

        Returns:
            Lista de entidades en el rango, en orden de ID
        """
        if not self.timestamp_field:
            raise TypeError(f"{type(self).__name__} no tiene timestamp")

        def in_range(record: T) -> bool:
            ts = getattr(record, self.timestamp_field)
            if ts is None:
                return False
            if start is not None and ts < start:
                return False
            if end is not None and ts > end:
                return False
            return True

        return self.find_all_by(in_range)
