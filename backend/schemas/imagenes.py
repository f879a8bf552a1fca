# backend/schemas/imagenes.py
from typing import Optional

from repositories.base import Row
from schemas.pedidos import CamelModel


class ImagenOut(CamelModel):
    id: int
    pedido_id: int
    imagen_url: str
    creado_en: Optional[str] = None


def imagen_to_out(row: Row) -> ImagenOut:
    return ImagenOut.model_validate(row)
