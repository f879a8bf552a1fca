# backend/repositories/__init__.py
from config.settings import Settings
from repositories.base import PedidosRepository


def build_repository(settings: Settings) -> PedidosRepository:
    if settings.storage_backend == "json":
        from repositories.json_repository import JsonPedidosRepository
        return JsonPedidosRepository(settings.data_dir)
    if settings.storage_backend == "sql":
        from repositories.sql_repository import SqlPedidosRepository
        return SqlPedidosRepository(settings.database_url)
    raise RuntimeError(f"STORAGE_BACKEND desconocido: {settings.storage_backend!r} (usa 'sql' o 'json')")
