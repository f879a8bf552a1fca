# backend/routers/usuarios_router.py
from fastapi import APIRouter, Depends
from typing import List

from repositories.base import PedidosRepository
from routers.deps import get_repository, require_admin
from schemas.pedidos import ActionResult
from schemas.usuarios import UsuarioCreate, UsuarioOut, usuario_to_out
from services import usuarios_service

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])

@router.get("", response_model=List[UsuarioOut])
def list_users(repo: PedidosRepository = Depends(get_repository)):
    return [usuario_to_out(u) for u in repo.list_usuarios()]

@router.post("", response_model=UsuarioOut, status_code=201)
def create_user(body: UsuarioCreate, repo: PedidosRepository = Depends(get_repository)):
    u = usuarios_service.create_usuario(repo, body.name, body.email, body.password, body.role)
    return usuario_to_out(u)

@router.delete("/{user_id}", response_model=ActionResult)
def delete_user(user_id: int, repo: PedidosRepository = Depends(get_repository)):
    repo.delete_usuario(user_id)
    return ActionResult(ok=True)
