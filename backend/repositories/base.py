# backend/repositories/base.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Row = Dict[str, Any]

# Columnas persistidas (snake_case). El mapeo a camelCase vive en schemas/.
PEDIDO_FIELDS = (
    "id", "folio",
    "cliente_nombre", "cliente_telefono", "cliente_escuela",
    "prenda_tipo", "prenda_modelo", "descripcion_general",
    "fecha_entrega", "estado", "tallas_texto",
    "compras_notas", "corte_notas", "confeccion_notas",
    "precio_total", "anticipo", "saldo", "gastos_compras",
    "condiciones_cliente", "compras_detalle",
    "imagen_url", "creado_en", "actualizado_en",
)
IMAGEN_FIELDS = ("id", "pedido_id", "imagen_url", "creado_en")
USUARIO_FIELDS = ("id", "nombre", "email", "password", "rol")


# Contrato que toda implementación de almacenamiento debe cumplir.
# Los servicios del núcleo sólo conocen esta interfaz, nunca el backend activo.
# Toda escritura es atómica para quien llama: si falla, el estado previo queda intacto.
class PedidosRepository(ABC):

    # ---------- pedidos ----------
    @abstractmethod
    def list_pedidos(self) -> List[Row]:
        """Todos los pedidos, del id más reciente al más antiguo."""

    @abstractmethod
    def get_pedido(self, pedido_id: int) -> Row:
        """Pedido por id; NotFoundError si no existe."""

    @abstractmethod
    def create_pedido(self, data: Row) -> Row:
        """Inserta un pedido y lo devuelve con su id asignado."""

    @abstractmethod
    def update_pedido(self, pedido_id: int, data: Row) -> Row:
        """Reemplaza las columnas indicadas; NotFoundError si no existe."""

    @abstractmethod
    def delete_pedido(self, pedido_id: int) -> None:
        """Borra sólo la fila del pedido; NotFoundError si no existe."""

    # ---------- imágenes ----------
    @abstractmethod
    def list_imagenes(self, pedido_id: Optional[int] = None) -> List[Row]:
        """Imágenes (de un pedido, si se indica) en orden ascendente de id."""

    @abstractmethod
    def get_imagen(self, imagen_id: int) -> Row:
        """Imagen por id; NotFoundError si no existe."""

    @abstractmethod
    def create_imagen(self, data: Row) -> Row:
        pass

    @abstractmethod
    def delete_imagenes_by_pedido(self, pedido_id: int) -> List[Row]:
        """Borra las imágenes del pedido y devuelve las filas eliminadas."""

    # ---------- usuarios ----------
    @abstractmethod
    def list_usuarios(self) -> List[Row]:
        pass

    @abstractmethod
    def get_usuario(self, usuario_id: int) -> Row:
        pass

    @abstractmethod
    def create_usuario(self, data: Row) -> Row:
        pass

    @abstractmethod
    def delete_usuario(self, usuario_id: int) -> None:
        pass

    @abstractmethod
    def find_usuario_by_credentials(self, email: str, password: str) -> Optional[Row]:
        pass

    @abstractmethod
    def email_exists(self, email: str) -> bool:
        pass

    # ---------- folios ----------
    @abstractmethod
    def reserve_folio_seq(self, key: str, floor: int = 0) -> int:
        """
        Avanza el contador `key` y devuelve el nuevo valor.

        El contador sólo crece: parte de max(último reservado, floor) + 1, así que
        un consecutivo ya entregado no vuelve a salir aunque se borre su pedido.
        """

    def count_usuarios(self) -> int:
        return len(self.list_usuarios())

    def close(self) -> None:
        """Libera recursos del backend (conexiones, archivos)."""
