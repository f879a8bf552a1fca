# backend/services/storage_service.py
"""
Almacenamiento de archivos de imagen.

Dos implementaciones detrás de la misma interfaz:
- LocalImageStorage: disco local, servido como estáticos bajo UPLOADS_URL_PREFIX
- CloudinaryImageStorage: bucket en Cloudinary, devuelve la secure_url pública
"""

import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path

import cloudinary
import cloudinary.uploader

from config.settings import Settings
from services.errors import StorageFailure

logger = logging.getLogger(__name__)


class ImageStorage(ABC):
    """Guarda bytes bajo una llave y devuelve una URL/ruta pública."""

    @abstractmethod
    def save(self, key: str, content: bytes, content_type: str | None = None) -> str:
        pass

    @abstractmethod
    def delete(self, url: str) -> None:
        pass


class LocalImageStorage(ImageStorage):

    def __init__(self, uploads_dir: str, url_prefix: str = "/uploads"):
        self.root = Path(uploads_dir).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.url_prefix = url_prefix.rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise StorageFailure("Ruta de imagen inválida")
        return path

    def save(self, key: str, content: bytes, content_type: str | None = None) -> str:
        path = self._path_for(key)
        tmp = path.with_name(f".{path.name}.part")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(content)
            os.replace(tmp, path)
        except OSError as e:
            logger.error(f"Could not write image {path}: {e}")
            tmp.unlink(missing_ok=True)
            raise StorageFailure("Error al subir imagen")
        return f"{self.url_prefix}/{key}"

    def delete(self, url: str) -> None:
        if not url.startswith(self.url_prefix + "/"):
            logger.warning(f"Image url {url} is not managed by local storage, skipping")
            return
        path = self._path_for(url[len(self.url_prefix) + 1:])
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Could not delete image {path}: {e}")
            raise StorageFailure("Error al eliminar imagen")


class CloudinaryImageStorage(ImageStorage):
    """Imágenes de pedidos en Cloudinary"""

    _UPLOAD_PATH = re.compile(r"/upload/(?:v\d+/)?(?P<public_id>.+?)(?:\.[A-Za-z0-9]+)?$")

    def __init__(self, settings: Settings):
        self.folder = settings.cloudinary_folder
        self._configure_cloudinary(settings)

    def _configure_cloudinary(self, settings: Settings):
        """Conexión a Cloudinary a partir de la configuración"""
        cloud_name = settings.cloudinary_cloud_name
        api_key = settings.cloudinary_api_key
        api_secret = settings.cloudinary_api_secret

        if not all([cloud_name, api_key, api_secret]):
            raise ValueError("Faltan variables de entorno de Cloudinary: CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET")

        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True
        )

    def save(self, key: str, content: bytes, content_type: str | None = None) -> str:
        public_id = os.path.splitext(key)[0]
        try:
            result = cloudinary.uploader.upload(
                content,
                public_id=public_id,
                folder=self.folder,
                resource_type="image",
                overwrite=False,
            )
        except Exception as e:
            logger.error(f"Cloudinary upload failed for {public_id}: {e}")
            raise StorageFailure("Error al subir imagen")
        return result["secure_url"]

    def delete(self, url: str) -> None:
        public_id = self.public_id_from_url(url)
        if not public_id:
            logger.warning(f"Cannot derive Cloudinary public_id from {url}, skipping")
            return
        try:
            result = cloudinary.uploader.destroy(public_id, resource_type="image")
        except Exception as e:
            logger.error(f"Cloudinary destroy failed for {public_id}: {e}")
            raise StorageFailure("Error al eliminar imagen")
        if result.get("result") not in ("ok", "not found"):
            raise StorageFailure("Error al eliminar imagen")

    @classmethod
    def public_id_from_url(cls, url: str) -> str | None:
        m = cls._UPLOAD_PATH.search(url or "")
        return m.group("public_id") if m else None


def build_image_storage(settings: Settings) -> ImageStorage:
    if settings.image_storage == "cloudinary":
        return CloudinaryImageStorage(settings)
    if settings.image_storage == "local":
        return LocalImageStorage(settings.uploads_dir, settings.uploads_url_prefix)
    raise RuntimeError(f"IMAGE_STORAGE desconocido: {settings.image_storage!r} (usa 'local' o 'cloudinary')")
