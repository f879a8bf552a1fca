# backend/schemas/respaldo.py
from typing import List

from schemas.pedidos import CamelModel, PedidoOut
from schemas.imagenes import ImagenOut
from schemas.usuarios import UsuarioOut


class RespaldoOut(CamelModel):
    pedidos: List[PedidoOut]
    usuarios: List[UsuarioOut]
    imagenes: List[ImagenOut]
    generated_at: str
