# backend/repositories/json_repository.py
"""
Backend de archivos JSON en disco (pedidos.json, imagenes.json, usuarios.json
y folios.json con los contadores de folio por año).

Las colecciones viven en memoria y se sincronizan al disco en cada escritura.
Cada escritura arma la colección nueva, la vuelca a un archivo temporal y lo
renombra sobre el original con os.replace; sólo después se reemplaza la copia
en memoria. Si algo falla, lectores posteriores siguen viendo el estado previo.

No hay detección de conflictos: dos escritores sobre el mismo pedido resultan
en "gana la última escritura".
"""

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from repositories.base import (
    PedidosRepository, Row, PEDIDO_FIELDS, IMAGEN_FIELDS, USUARIO_FIELDS,
)
from services.errors import NotFoundError, StorageFailure

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "pedidos": PEDIDO_FIELDS,
    "imagenes": IMAGEN_FIELDS,
    "usuarios": USUARIO_FIELDS,
    "folios": ("clave", "ultimo"),
}


class JsonPedidosRepository(PedidosRepository):

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        # el lock sólo protege el par "escribir archivo + publicar en memoria"
        self._lock = threading.Lock()
        self._data: Dict[str, List[Row]] = {
            name: self._load(name) for name in COLLECTIONS
        }

    # ---------- infraestructura ----------
    def _path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def _load(self, name: str) -> List[Row]:
        path = self._path(name)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as fh:
                rows = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read {path}: {e}")
            raise StorageFailure()
        if not isinstance(rows, list):
            logger.error(f"{path} does not contain a JSON array")
            raise StorageFailure()
        return rows

    def _write(self, name: str, rows: List[Row]) -> None:
        path = self._path(name)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{name}-", suffix=".json", dir=self.data_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(rows, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Could not write {path}: {e}")
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise StorageFailure()

    def _snapshot(self, name: str) -> List[Row]:
        return copy.deepcopy(self._data[name])

    def _mutate(self, name: str, change: Callable[[List[Row]], object]):
        """Aplica `change` sobre una copia, persiste y publica; devuelve lo que retorne `change`."""
        with self._lock:
            rows = self._snapshot(name)
            result = change(rows)
            self._write(name, rows)
            self._data[name] = rows
            return copy.deepcopy(result)

    @staticmethod
    def _next_id(rows: List[Row]) -> int:
        return max((int(r.get("id") or 0) for r in rows), default=0) + 1

    @staticmethod
    def _index_of(rows: List[Row], row_id: int) -> Optional[int]:
        for i, r in enumerate(rows):
            if r.get("id") == row_id:
                return i
        return None

    def _find(self, name: str, row_id: int, not_found_message: str) -> Row:
        rows = self._data[name]
        idx = self._index_of(rows, row_id)
        if idx is None:
            raise NotFoundError(not_found_message)
        return copy.deepcopy(rows[idx])

    # ---------- pedidos ----------
    def list_pedidos(self) -> List[Row]:
        rows = self._snapshot("pedidos")
        return sorted(rows, key=lambda r: r["id"], reverse=True)

    def get_pedido(self, pedido_id: int) -> Row:
        return self._find("pedidos", pedido_id, "Pedido no encontrado")

    def create_pedido(self, data: Row) -> Row:
        def change(rows):
            row = {f: data.get(f) for f in PEDIDO_FIELDS}
            row["id"] = self._next_id(rows)
            rows.append(row)
            return row
        return self._mutate("pedidos", change)

    def update_pedido(self, pedido_id: int, data: Row) -> Row:
        def change(rows):
            idx = self._index_of(rows, pedido_id)
            if idx is None:
                raise NotFoundError("Pedido no encontrado")
            row = rows[idx]
            for key, value in data.items():
                if key in PEDIDO_FIELDS and key != "id":
                    row[key] = value
            return row
        return self._mutate("pedidos", change)

    def delete_pedido(self, pedido_id: int) -> None:
        def change(rows):
            idx = self._index_of(rows, pedido_id)
            if idx is None:
                raise NotFoundError("Pedido no encontrado")
            rows.pop(idx)
        self._mutate("pedidos", change)

    # ---------- imágenes ----------
    def list_imagenes(self, pedido_id: Optional[int] = None) -> List[Row]:
        rows = self._snapshot("imagenes")
        if pedido_id is not None:
            rows = [r for r in rows if r.get("pedido_id") == pedido_id]
        return sorted(rows, key=lambda r: r["id"])

    def get_imagen(self, imagen_id: int) -> Row:
        return self._find("imagenes", imagen_id, "Imagen no encontrada")

    def create_imagen(self, data: Row) -> Row:
        def change(rows):
            row = {f: data.get(f) for f in IMAGEN_FIELDS}
            row["id"] = self._next_id(rows)
            rows.append(row)
            return row
        return self._mutate("imagenes", change)

    def delete_imagenes_by_pedido(self, pedido_id: int) -> List[Row]:
        def change(rows):
            deleted = [r for r in rows if r.get("pedido_id") == pedido_id]
            rows[:] = [r for r in rows if r.get("pedido_id") != pedido_id]
            return deleted
        return self._mutate("imagenes", change)

    # ---------- usuarios ----------
    def list_usuarios(self) -> List[Row]:
        return sorted(self._snapshot("usuarios"), key=lambda r: r["id"])

    def get_usuario(self, usuario_id: int) -> Row:
        return self._find("usuarios", usuario_id, "Usuario no encontrado")

    def create_usuario(self, data: Row) -> Row:
        def change(rows):
            row = {f: data.get(f) for f in USUARIO_FIELDS}
            row["id"] = self._next_id(rows)
            rows.append(row)
            return row
        return self._mutate("usuarios", change)

    def delete_usuario(self, usuario_id: int) -> None:
        def change(rows):
            idx = self._index_of(rows, usuario_id)
            if idx is None:
                raise NotFoundError("Usuario no encontrado")
            rows.pop(idx)
        self._mutate("usuarios", change)

    def find_usuario_by_credentials(self, email: str, password: str) -> Optional[Row]:
        wanted = (email or "").strip().lower()
        for u in self._data["usuarios"]:
            if (u.get("email") or "").lower() == wanted and u.get("password") == password:
                return copy.deepcopy(u)
        return None

    def email_exists(self, email: str) -> bool:
        wanted = (email or "").strip().lower()
        return any((u.get("email") or "").lower() == wanted for u in self._data["usuarios"])

    def count_usuarios(self) -> int:
        return len(self._data["usuarios"])

    # ---------- folios ----------
    def reserve_folio_seq(self, key: str, floor: int = 0) -> int:
        def change(rows):
            for r in rows:
                if r.get("clave") == key:
                    break
            else:
                r = {"clave": key, "ultimo": 0}
                rows.append(r)
            r["ultimo"] = max(int(r.get("ultimo") or 0), floor) + 1
            return r["ultimo"]
        return self._mutate("folios", change)
