# backend/services/imagenes_service.py
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Optional

from repositories.base import PedidosRepository, Row
from services.errors import PayloadTooLarge, StorageFailure, ValidationError
from services.storage_service import ImageStorage

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".jpg"


def build_storage_key(pedido_id: int, filename: Optional[str], now: Optional[datetime] = None) -> str:
    """pedidos/<id>/pedido-<id>-<epoch ms>-<aleatorio><ext>; la extensión original se conserva."""
    now = now or datetime.now(timezone.utc)
    ext = os.path.splitext(filename or "")[1].lower() or DEFAULT_EXTENSION
    stamp = int(now.timestamp() * 1000)
    return f"pedidos/{pedido_id}/pedido-{pedido_id}-{stamp}-{uuid.uuid4().hex[:10]}{ext}"


def attach_imagen(
    repo: PedidosRepository,
    storage: ImageStorage,
    pedido_id: int,
    content: bytes,
    content_type: Optional[str],
    filename: Optional[str],
    max_bytes: int,
) -> Row:
    """
    Sube la imagen, registra la fila y, si el pedido aún no tiene imagen
    principal, la convierte en portada. Las imágenes posteriores nunca
    reemplazan una portada existente.
    """
    pedido = repo.get_pedido(pedido_id)

    if not content:
        raise ValidationError("No se recibió imagen")
    if len(content) > max_bytes:
        raise PayloadTooLarge(f"La imagen excede el máximo de {max_bytes // (1024 * 1024)}MB")

    now = datetime.now(timezone.utc)
    key = build_storage_key(pedido_id, filename, now)
    url = storage.save(key, content, content_type)

    try:
        imagen = repo.create_imagen({
            "pedido_id": pedido_id,
            "imagen_url": url,
            "creado_en": now.isoformat(),
        })
    except StorageFailure:
        # sin fila no debe quedar el archivo suelto
        try:
            storage.delete(url)
        except StorageFailure as e:
            logger.warning(f"Could not remove orphan file {url}: {e}")
        raise

    if not pedido.get("imagen_url"):
        try:
            repo.update_pedido(pedido_id, {"imagen_url": url, "actualizado_en": now.isoformat()})
        except StorageFailure as e:
            # la imagen ya quedó registrada; la portada puede fijarse después
            logger.error(f"Could not set cover image of pedido {pedido_id}: {e}")

    logger.info(f"Image {imagen['id']} attached to pedido {pedido_id}")
    return imagen
