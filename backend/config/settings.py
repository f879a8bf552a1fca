# backend/config/settings.py
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"La variable de entorno {name} debe ser un entero (recibido: {raw!r})")


@dataclass
class Settings:
    """Configuración del servicio, leída del entorno (.env incluido)."""

    storage_backend: str = "sql"               # "sql" | "json"
    database_url: str = "sqlite:///./uniformes.db"
    data_dir: str = "./data"

    image_storage: str = "local"               # "local" | "cloudinary"
    uploads_dir: str = "./uploads"
    uploads_url_prefix: str = "/uploads"
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "imagenes-bonaparte"
    max_upload_mb: int = 10

    folio_prefix: str = "BONA"
    session_ttl_minutes: int = 0               # 0 = las sesiones no expiran

    admin_name: str = "Administrador"
    admin_email: str = "admin@bonaparte.com"
    admin_password: str = "admin123"

    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def get_settings() -> Settings:
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        storage_backend=os.getenv("STORAGE_BACKEND", "sql").strip().lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./uniformes.db").strip(),
        data_dir=os.getenv("DATA_DIR", "./data"),
        image_storage=os.getenv("IMAGE_STORAGE", "local").strip().lower(),
        uploads_dir=os.getenv("UPLOADS_DIR", "./uploads"),
        uploads_url_prefix=os.getenv("UPLOADS_URL_PREFIX", "/uploads").rstrip("/") or "/uploads",
        cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME"),
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY"),
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET"),
        cloudinary_folder=os.getenv("CLOUDINARY_FOLDER", "imagenes-bonaparte"),
        max_upload_mb=_env_int("MAX_UPLOAD_MB", 10),
        folio_prefix=os.getenv("FOLIO_PREFIX", "BONA").strip() or "BONA",
        session_ttl_minutes=_env_int("SESSION_TTL_MINUTES", 0),
        admin_name=os.getenv("ADMIN_NAME", "Administrador"),
        admin_email=os.getenv("ADMIN_EMAIL", "admin@bonaparte.com"),
        admin_password=os.getenv("ADMIN_PASSWORD", "admin123"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
