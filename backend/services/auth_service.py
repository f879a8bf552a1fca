# backend/services/auth_service.py
"""
Sesiones y autenticación.

Las sesiones son copias por valor de {userId, name, role} en el momento del
login: cambiar el rol de un usuario no afecta sesiones ya emitidas.
La comparación de credenciales vive sólo en login() (⚠️ texto plano, igual
que la base existente) para poder endurecerla sin tocar a quienes llaman.
"""

import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from repositories.base import PedidosRepository
from services.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Identity:
    user_id: int
    name: str
    role: str


class SessionStore(ABC):

    @abstractmethod
    def create(self, identity: Identity) -> str:
        pass

    @abstractmethod
    def get(self, token: str) -> Optional[Identity]:
        pass

    @abstractmethod
    def revoke(self, token: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class InMemorySessionStore(SessionStore):
    """Sesiones en memoria del proceso; se pierden al reiniciar."""

    def __init__(self, ttl_minutes: int = 0, clock=time.monotonic):
        self._clock = clock
        self.ttl_seconds = ttl_minutes * 60 if ttl_minutes and ttl_minutes > 0 else None
        self._lock = threading.Lock()
        self._sessions: Dict[str, Tuple[Identity, Optional[float]]] = {}

    def create(self, identity: Identity) -> str:
        token = uuid.uuid4().hex
        expires_at = self._clock() + self.ttl_seconds if self.ttl_seconds else None
        with self._lock:
            self._sessions[token] = (identity, expires_at)
        return token

    def get(self, token: str) -> Optional[Identity]:
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            identity, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._sessions[token]
                return None
            return identity

    def revoke(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


def login(repo: PedidosRepository, sessions: SessionStore, email: str, password: str) -> Tuple[str, Identity]:
    user = repo.find_usuario_by_credentials((email or "").strip(), password or "")
    if not user:
        logger.info(f"Failed login for {email!r}")
        raise Unauthorized("Credenciales incorrectas")
    identity = Identity(user_id=user["id"], name=user["nombre"], role=user["rol"])
    token = sessions.create(identity)
    logger.info(f"User {user['id']} logged in")
    return token, identity


def token_from_header(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.strip().split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def authenticate(sessions: SessionStore, authorization: Optional[str]) -> Identity:
    token = token_from_header(authorization)
    identity = sessions.get(token) if token else None
    if identity is None:
        raise Unauthorized("No autorizado")
    return identity


def require_role(identity: Identity, role: str) -> None:
    if identity.role != role:
        raise Forbidden("Solo admin" if role == ADMIN_ROLE else f"Requiere rol {role}")
