# backend/routers/auth_router.py
from fastapi import APIRouter, Depends, Header
from typing import Optional

from repositories.base import PedidosRepository
from routers.deps import get_identity, get_repository, get_session_store
from schemas.pedidos import ActionResult
from schemas.usuarios import LoginPayload, LoginResponse
from services import auth_service
from services.auth_service import Identity, SessionStore

router = APIRouter(tags=["auth"])

@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginPayload,
    repo: PedidosRepository = Depends(get_repository),
    sessions: SessionStore = Depends(get_session_store),
):
    token, identity = auth_service.login(repo, sessions, body.email, body.password)
    return LoginResponse(token=token, name=identity.name, role=identity.role)

@router.post("/logout", response_model=ActionResult)
def logout(
    authorization: Optional[str] = Header(default=None),
    identity: Identity = Depends(get_identity),
    sessions: SessionStore = Depends(get_session_store),
):
    sessions.revoke(auth_service.token_from_header(authorization))
    return ActionResult(ok=True)
