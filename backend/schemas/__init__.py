# backend/schemas/__init__.py

# pedidos
from .pedidos import CamelModel, PedidoPayload, PedidoOut, ActionResult, pedido_to_out

# imágenes
from .imagenes import ImagenOut, imagen_to_out

# usuarios
from .usuarios import UsuarioCreate, UsuarioOut, LoginPayload, LoginResponse, usuario_to_out

# respaldo
from .respaldo import RespaldoOut

__all__ = [
    # pedidos
    "CamelModel", "PedidoPayload", "PedidoOut", "ActionResult", "pedido_to_out",
    # imágenes
    "ImagenOut", "imagen_to_out",
    # usuarios
    "UsuarioCreate", "UsuarioOut", "LoginPayload", "LoginResponse", "usuario_to_out",
    # respaldo
    "RespaldoOut",
]
