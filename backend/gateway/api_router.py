# backend/gateway/api_router.py
from fastapi import APIRouter

from routers.auth_router import router as auth_router
from routers.pedidos_router import router as pedidos_router
from routers.usuarios_router import router as usuarios_router
from routers.respaldo_router import router as respaldo_router

api_router = APIRouter(prefix="/api")

api_router.include_router(auth_router)        # /api/login, /api/logout
api_router.include_router(pedidos_router)     # /api/pedidos/...
api_router.include_router(usuarios_router)    # /api/users/...
api_router.include_router(respaldo_router)    # /api/respaldo
