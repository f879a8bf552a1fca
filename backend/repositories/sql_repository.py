# backend/repositories/sql_repository.py
import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.session import Base, create_database_engine, create_session_factory
from models.pedido_model import Pedido
from models.imagen_model import Imagen
from models.usuario_model import Usuario
from models.folio_model import FolioContador
from repositories.base import (
    PedidosRepository, Row, PEDIDO_FIELDS, IMAGEN_FIELDS, USUARIO_FIELDS,
)
from services.errors import NotFoundError, StorageFailure

logger = logging.getLogger(__name__)


def _row(obj, fields) -> Row:
    return {f: getattr(obj, f) for f in fields}


class SqlPedidosRepository(PedidosRepository):
    """Repositorio sobre SQLAlchemy: una sesión por operación, commit o rollback."""

    def __init__(self, database_url: str):
        self.engine = create_database_engine(database_url)
        self.SessionLocal = create_session_factory(self.engine)
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def _session(self, operation: str):
        db: Session = self.SessionLocal()
        try:
            yield db
            db.commit()
        except NotFoundError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"SQL error during {operation}: {e}")
            raise StorageFailure()
        finally:
            db.close()

    # ---------- pedidos ----------
    def list_pedidos(self) -> List[Row]:
        with self._session("list_pedidos") as db:
            rows = db.query(Pedido).order_by(Pedido.id.desc()).all()
            return [_row(p, PEDIDO_FIELDS) for p in rows]

    def get_pedido(self, pedido_id: int) -> Row:
        with self._session("get_pedido") as db:
            p = db.get(Pedido, pedido_id)
            if not p:
                raise NotFoundError("Pedido no encontrado")
            return _row(p, PEDIDO_FIELDS)

    def create_pedido(self, data: Row) -> Row:
        with self._session("create_pedido") as db:
            values = {k: v for k, v in data.items() if k in PEDIDO_FIELDS and k != "id"}
            p = Pedido(**values)
            db.add(p)
            db.flush()
            return _row(p, PEDIDO_FIELDS)

    def update_pedido(self, pedido_id: int, data: Row) -> Row:
        with self._session("update_pedido") as db:
            p = db.get(Pedido, pedido_id)
            if not p:
                raise NotFoundError("Pedido no encontrado")
            for key, value in data.items():
                if key in PEDIDO_FIELDS and key != "id":
                    setattr(p, key, value)
            db.flush()
            return _row(p, PEDIDO_FIELDS)

    def delete_pedido(self, pedido_id: int) -> None:
        with self._session("delete_pedido") as db:
            p = db.get(Pedido, pedido_id)
            if not p:
                raise NotFoundError("Pedido no encontrado")
            db.delete(p)

    # ---------- imágenes ----------
    def list_imagenes(self, pedido_id: Optional[int] = None) -> List[Row]:
        with self._session("list_imagenes") as db:
            q = db.query(Imagen)
            if pedido_id is not None:
                q = q.filter(Imagen.pedido_id == pedido_id)
            return [_row(i, IMAGEN_FIELDS) for i in q.order_by(Imagen.id.asc()).all()]

    def get_imagen(self, imagen_id: int) -> Row:
        with self._session("get_imagen") as db:
            img = db.get(Imagen, imagen_id)
            if not img:
                raise NotFoundError("Imagen no encontrada")
            return _row(img, IMAGEN_FIELDS)

    def create_imagen(self, data: Row) -> Row:
        with self._session("create_imagen") as db:
            img = Imagen(
                pedido_id=data["pedido_id"],
                imagen_url=data["imagen_url"],
                creado_en=data["creado_en"],
            )
            db.add(img)
            db.flush()
            return _row(img, IMAGEN_FIELDS)

    def delete_imagenes_by_pedido(self, pedido_id: int) -> List[Row]:
        with self._session("delete_imagenes_by_pedido") as db:
            imgs = db.query(Imagen).filter(Imagen.pedido_id == pedido_id).all()
            deleted = [_row(i, IMAGEN_FIELDS) for i in imgs]
            for img in imgs:
                db.delete(img)
            return deleted

    # ---------- usuarios ----------
    def list_usuarios(self) -> List[Row]:
        with self._session("list_usuarios") as db:
            return [_row(u, USUARIO_FIELDS) for u in db.query(Usuario).order_by(Usuario.id.asc()).all()]

    def get_usuario(self, usuario_id: int) -> Row:
        with self._session("get_usuario") as db:
            u = db.get(Usuario, usuario_id)
            if not u:
                raise NotFoundError("Usuario no encontrado")
            return _row(u, USUARIO_FIELDS)

    def create_usuario(self, data: Row) -> Row:
        with self._session("create_usuario") as db:
            u = Usuario(
                nombre=data["nombre"],
                email=data["email"],
                password=data["password"],
                rol=data["rol"],
            )
            db.add(u)
            db.flush()
            return _row(u, USUARIO_FIELDS)

    def delete_usuario(self, usuario_id: int) -> None:
        with self._session("delete_usuario") as db:
            u = db.get(Usuario, usuario_id)
            if not u:
                raise NotFoundError("Usuario no encontrado")
            db.delete(u)

    def find_usuario_by_credentials(self, email: str, password: str) -> Optional[Row]:
        with self._session("find_usuario_by_credentials") as db:
            u = (
                db.query(Usuario)
                .filter(func.lower(Usuario.email) == (email or "").strip().lower(),
                        Usuario.password == password)
                .first()
            )
            return _row(u, USUARIO_FIELDS) if u else None

    def email_exists(self, email: str) -> bool:
        with self._session("email_exists") as db:
            return db.query(Usuario).filter(
                func.lower(Usuario.email) == (email or "").strip().lower()
            ).count() > 0

    def count_usuarios(self) -> int:
        with self._session("count_usuarios") as db:
            return db.query(Usuario).count()

    # ---------- folios ----------
    def reserve_folio_seq(self, key: str, floor: int = 0) -> int:
        with self._session("reserve_folio_seq") as db:
            c = db.get(FolioContador, key, with_for_update=True)
            if not c:
                c = FolioContador(clave=key, ultimo=0)
                db.add(c)
            c.ultimo = max(c.ultimo or 0, floor) + 1
            db.flush()
            return c.ultimo

    def close(self) -> None:
        self.engine.dispose()
