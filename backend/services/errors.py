# backend/services/errors.py
"""
Errores de dominio del servicio.

Cada error sabe a qué código HTTP corresponde; main.py registra un handler
que los traduce a {"detail": ...}. Los detalles internos del backend de
almacenamiento nunca viajan en el mensaje.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Error interno del servidor"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(AppError):
    status_code = 401
    default_message = "No autorizado"


class Forbidden(AppError):
    status_code = 403
    default_message = "Solo admin"


class NotFoundError(AppError):
    status_code = 404
    default_message = "No encontrado"


class ValidationError(AppError):
    status_code = 400
    default_message = "Datos inválidos"


class PayloadTooLarge(AppError):
    status_code = 413
    default_message = "El archivo excede el tamaño permitido"


class StorageFailure(AppError):
    status_code = 500
    default_message = "Error de almacenamiento"
