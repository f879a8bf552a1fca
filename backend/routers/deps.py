# backend/routers/deps.py
from typing import Optional

from fastapi import Depends, Header, Request

from config.settings import Settings
from repositories.base import PedidosRepository
from services.auth_service import ADMIN_ROLE, Identity, SessionStore, authenticate, require_role
from services.storage_service import ImageStorage


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> PedidosRepository:
    return request.app.state.repository


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_identity(
    authorization: Optional[str] = Header(default=None),
    sessions: SessionStore = Depends(get_session_store),
) -> Identity:
    return authenticate(sessions, authorization)


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    require_role(identity, ADMIN_ROLE)
    return identity
