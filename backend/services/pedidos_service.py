# backend/services/pedidos_service.py
"""
Ciclo de vida de un pedido: alta (folio + valores por defecto), actualización
parcial campo por campo y borrado en cascada de sus imágenes.

Las filas son dicts con llaves snake_case (ver repositories.base.PEDIDO_FIELDS).
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

from repositories.base import PedidosRepository, Row, PEDIDO_FIELDS
from services.errors import Forbidden, StorageFailure, ValidationError
from services.folio_service import folio_in_use, next_folio
from services.storage_service import ImageStorage

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("precio_total", "anticipo", "saldo", "gastos_compras")
# nulos explícitos en estos campos se ignoran (se conserva el valor previo)
NON_NULLABLE_FIELDS = ("folio", "estado") + MONEY_FIELDS
READ_ONLY_FIELDS = ("id", "creado_en", "actualizado_en")
TEXT_FIELDS = tuple(
    f for f in PEDIDO_FIELDS
    if f not in MONEY_FIELDS + READ_ONLY_FIELDS + ("folio", "estado", "imagen_url")
)
DEFAULT_ESTADO = "nuevo"


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_money(value: Any) -> float:
    """Convierte un importe; ValueError si no es un número finito >= 0."""
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("empty amount")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("amount must be finite")
    if number < 0:
        raise ValueError("amount must be non-negative")
    return number


def _money_for_create(field: str, value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return parse_money(value)
    except (TypeError, ValueError):
        # en el alta, lo no numérico vale 0; lo negativo sí es un error
        if _is_negative_number(value):
            raise ValidationError(f"El campo {field} no puede ser negativo")
        return 0.0


def _money_for_update(field: str, value: Any) -> float:
    try:
        return parse_money(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Valor numérico inválido para {field}")


def _is_negative_number(value: Any) -> bool:
    try:
        return not isinstance(value, bool) and float(value) < 0
    except (TypeError, ValueError):
        return False


# ---------- alta ----------

def build_new_pedido(body: Row, folio: str, now: str) -> Row:
    row: Row = {f: "" for f in TEXT_FIELDS}
    for f in TEXT_FIELDS:
        if body.get(f) is not None:
            row[f] = body[f]
    row["folio"] = folio
    row["estado"] = body.get("estado") or DEFAULT_ESTADO
    for f in MONEY_FIELDS:
        row[f] = _money_for_create(f, body.get(f))
    row["imagen_url"] = body.get("imagen_url") or None
    row["creado_en"] = now
    row["actualizado_en"] = now
    return row


def create_pedido(repo: PedidosRepository, body: Row, folio_prefix: str) -> Row:
    explicit = (body.get("folio") or "").strip()
    if explicit:
        if folio_in_use(repo, explicit):
            raise ValidationError(f"El folio {explicit} ya existe")
        folio = explicit
    else:
        folio = next_folio(repo, folio_prefix)

    row = build_new_pedido(body, folio, utcnow_iso())
    created = repo.create_pedido(row)
    logger.info(f"Pedido {created['id']} created with folio {created['folio']}")
    return created


# ---------- actualización parcial ----------

def merge_pedido(previous: Row, patch: Row, now: str, allow_folio_change: bool = False) -> Row:
    """
    Superpone `patch` sobre `previous` campo por campo.

    Un campo presente en `patch` (incluido un null explícito en campos que
    admiten nulo) reemplaza al previo; uno ausente se conserva. `actualizado_en`
    se sella siempre. No toca el repositorio.
    """
    merged = dict(previous)
    for field, value in patch.items():
        if field in READ_ONLY_FIELDS or field not in PEDIDO_FIELDS:
            continue
        if value is None and field in NON_NULLABLE_FIELDS:
            continue

        if field == "folio":
            folio = str(value).strip()
            if not folio or folio == previous.get("folio"):
                continue
            if not allow_folio_change:
                raise Forbidden("Sólo un admin puede corregir el folio")
            merged["folio"] = folio
        elif field in MONEY_FIELDS:
            merged[field] = _money_for_update(field, value)
        else:
            merged[field] = value

    merged["actualizado_en"] = now
    return merged


def update_pedido(repo: PedidosRepository, pedido_id: int, patch: Row, allow_folio_change: bool = False) -> Row:
    previous = repo.get_pedido(pedido_id)
    merged = merge_pedido(previous, patch, utcnow_iso(), allow_folio_change=allow_folio_change)

    if merged["folio"] != previous["folio"]:
        if folio_in_use(repo, merged["folio"], exclude_id=pedido_id):
            raise ValidationError(f"El folio {merged['folio']} ya existe")
        logger.info(f"Pedido {pedido_id} folio corrected {previous['folio']} -> {merged['folio']}")

    changes = {k: v for k, v in merged.items() if k != "id"}
    updated = repo.update_pedido(pedido_id, changes)
    logger.info(f"Pedido {pedido_id} updated ({', '.join(sorted(patch)) or 'no fields'})")
    return updated


# ---------- borrado en cascada ----------

def delete_pedido_cascade(repo: PedidosRepository, storage: Optional[ImageStorage], pedido_id: int) -> None:
    """
    Borra las imágenes del pedido (filas y, si aplica, archivos) y luego el pedido.

    La limpieza de imágenes es best-effort: sus fallos se registran y no impiden
    borrar el pedido. Si el pedido no existe, NotFoundError sin efectos.
    """
    repo.get_pedido(pedido_id)

    try:
        imagenes = repo.delete_imagenes_by_pedido(pedido_id)
    except StorageFailure as e:
        logger.warning(f"Could not delete image rows for pedido {pedido_id}, leaving orphans: {e}")
        imagenes = []

    if storage is not None:
        for img in imagenes:
            try:
                storage.delete(img["imagen_url"])
            except StorageFailure as e:
                logger.warning(f"Could not delete stored file {img['imagen_url']} of pedido {pedido_id}: {e}")

    repo.delete_pedido(pedido_id)
    logger.info(f"Pedido {pedido_id} deleted with {len(imagenes)} image(s)")
