# backend/services/usuarios_service.py
import logging

from config.settings import Settings
from repositories.base import PedidosRepository, Row
from services.auth_service import ADMIN_ROLE
from services.errors import ValidationError

logger = logging.getLogger(__name__)


def create_usuario(repo: PedidosRepository, nombre: str, email: str, password: str, rol: str) -> Row:
    email = email.strip().lower()
    # unicidad por pre-chequeo; el almacenamiento no la garantiza
    if repo.email_exists(email):
        raise ValidationError("El email ya está registrado")
    user = repo.create_usuario({"nombre": nombre, "email": email, "password": password, "rol": rol})
    logger.info(f"User {user['id']} created with role {rol}")
    return user


def ensure_admin_seed(repo: PedidosRepository, settings: Settings) -> None:
    """Sin usuarios no habría quien inicie sesión: crea el admin inicial."""
    if repo.count_usuarios() > 0:
        return
    create_usuario(repo, settings.admin_name, settings.admin_email, settings.admin_password, ADMIN_ROLE)
    logger.warning(f"No users found, seeded admin {settings.admin_email}; change its password")
