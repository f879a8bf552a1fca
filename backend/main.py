# backend/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config.settings import Settings, get_settings
from gateway.api_router import api_router
from repositories import build_repository
from services.auth_service import InMemorySessionStore
from services.errors import AppError
from services.storage_service import LocalImageStorage, build_image_storage
from services.usuarios_service import ensure_admin_seed

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings: Settings = app.state.settings
    logger.info("🚀 Uniformes Bonaparte API is starting…")
    logger.info(f"Storage backend: {settings.storage_backend} | images: {settings.image_storage}")

    yield

    # Shutdown: las sesiones son del proceso y mueren con él
    logger.info("🛑 Shutting down…")
    app.state.sessions.clear()
    app.state.repository.close()


def _register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # cuerpos mal formados son errores de validación (400), no 422
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
            for e in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": "Datos inválidos", "errors": errors})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Uniformes Bonaparte - Pedidos",
        description="API de pedidos, imágenes y usuarios del taller de uniformes",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Colaboradores: viven en app.state y se inyectan con Depends (routers/deps.py)
    app.state.settings = settings
    app.state.repository = build_repository(settings)
    app.state.image_storage = build_image_storage(settings)
    app.state.sessions = InMemorySessionStore(ttl_minutes=settings.session_ttl_minutes)
    ensure_admin_seed(app.state.repository, settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    @app.get("/health")
    def health():
        status = {
            "status": "healthy",
            "service": "uniformes-bonaparte-api",
            "storage": settings.storage_backend,
            "images": settings.image_storage,
        }
        try:
            app.state.repository.count_usuarios()
        except AppError as e:
            status["status"] = "degraded"
            status["storage_error"] = e.message
        return status

    app.include_router(api_router)

    # imágenes en disco local servidas como estáticos
    if isinstance(app.state.image_storage, LocalImageStorage):
        app.mount(
            settings.uploads_url_prefix,
            StaticFiles(directory=str(app.state.image_storage.root)),
            name="uploads",
        )

    return app


if __name__ == "__main__":
    import os
    import uvicorn

    log_level = "debug" if os.getenv("DEBUG", "False").lower() == "true" else "info"

    uvicorn.run(
        "main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "4000")),
        reload=os.getenv("RELOAD", "False").lower() == "true",
        log_level=log_level,
    )
