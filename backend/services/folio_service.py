# backend/services/folio_service.py
"""
Generación de folios: PREFIJO-<año>-<consecutivo de 4 dígitos>.

El consecutivo reinicia cada año calendario y sale de un contador por
prefijo y año guardado en el repositorio, que sólo avanza. Borrar un pedido
(incluido el más reciente) no libera su folio. Los folios ya existentes de
ese año sirven de piso, así que datos cargados antes del contador o folios
capturados a mano con el mismo formato tampoco se repiten.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from repositories.base import PedidosRepository
from services.errors import StorageFailure

logger = logging.getLogger(__name__)


def folio_pattern(prefix: str) -> "re.Pattern[str]":
    return re.compile(rf"^{re.escape(prefix)}-(\d{{4}})-(\d+)$")


def format_folio(prefix: str, year: int, seq: int) -> str:
    return f"{prefix}-{year}-{seq:04d}"


def counter_key(prefix: str, year: int) -> str:
    return f"{prefix}-{year}"


def highest_stored_seq(repo: PedidosRepository, prefix: str, year: int) -> int:
    pattern = folio_pattern(prefix)
    last = 0
    for p in repo.list_pedidos():
        m = pattern.match(p.get("folio") or "")
        if m and int(m.group(1)) == year:
            last = max(last, int(m.group(2)))
    return last


def next_folio(repo: PedidosRepository, prefix: str, now: Optional[datetime] = None) -> str:
    """Reserva el siguiente folio del año en curso. Nunca falla: si el almacenamiento falla, usa 1."""
    year = (now or datetime.now(timezone.utc)).year
    try:
        floor = highest_stored_seq(repo, prefix, year)
        seq = repo.reserve_folio_seq(counter_key(prefix, year), floor)
    except StorageFailure as e:
        logger.warning(f"Could not reserve folio for {year}, falling back to 1: {e}")
        seq = 1
    return format_folio(prefix, year, seq)


def folio_in_use(repo: PedidosRepository, folio: str, exclude_id: Optional[int] = None) -> bool:
    return any(
        p.get("folio") == folio and p.get("id") != exclude_id
        for p in repo.list_pedidos()
    )
