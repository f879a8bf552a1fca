# backend/routers/respaldo_router.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from repositories.base import PedidosRepository
from routers.deps import get_repository, require_admin
from schemas.imagenes import imagen_to_out
from schemas.pedidos import pedido_to_out
from schemas.respaldo import RespaldoOut
from schemas.usuarios import usuario_to_out

router = APIRouter(tags=["respaldo"])

@router.get("/respaldo", response_model=RespaldoOut, dependencies=[Depends(require_admin)])
def respaldo(repo: PedidosRepository = Depends(get_repository)):
    """Exporta las tres colecciones; no es un snapshot consistente, sólo reciente."""
    return RespaldoOut(
        pedidos=[pedido_to_out(p) for p in repo.list_pedidos()],
        usuarios=[usuario_to_out(u) for u in repo.list_usuarios()],
        imagenes=[imagen_to_out(i) for i in repo.list_imagenes()],
        generated_at=datetime.now(timezone.utc).isoformat(),
    )
