# backend/routers/pedidos_router.py
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from typing import List, Optional

from config.settings import Settings
from repositories.base import PedidosRepository
from routers.deps import get_identity, get_image_storage, get_repository, get_settings_dep
from schemas.pedidos import ActionResult, PedidoOut, PedidoPayload, pedido_to_out
from schemas.imagenes import ImagenOut, imagen_to_out
from services import imagenes_service, pedidos_service
from services.auth_service import ADMIN_ROLE, Identity
from services.errors import ValidationError
from services.storage_service import ImageStorage

# todas las rutas de pedidos exigen sesión
router = APIRouter(prefix="/pedidos", tags=["pedidos"], dependencies=[Depends(get_identity)])

@router.get("", response_model=List[PedidoOut])
def list_pedidos(repo: PedidosRepository = Depends(get_repository)):
    return [pedido_to_out(p) for p in repo.list_pedidos()]

@router.get("/{pedido_id}", response_model=PedidoOut)
def get_pedido(pedido_id: int, repo: PedidosRepository = Depends(get_repository)):
    return pedido_to_out(repo.get_pedido(pedido_id))

@router.post("", response_model=PedidoOut, status_code=201)
def create_pedido(
    body: PedidoPayload,
    repo: PedidosRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings_dep),
):
    created = pedidos_service.create_pedido(repo, body.present_fields(), settings.folio_prefix)
    return pedido_to_out(created)

@router.put("/{pedido_id}", response_model=PedidoOut)
def update_pedido(
    pedido_id: int,
    body: PedidoPayload,
    identity: Identity = Depends(get_identity),
    repo: PedidosRepository = Depends(get_repository),
):
    # sólo se mezclan los campos que vinieron en el JSON
    updated = pedidos_service.update_pedido(
        repo, pedido_id, body.present_fields(),
        allow_folio_change=identity.role == ADMIN_ROLE,
    )
    return pedido_to_out(updated)

@router.delete("/{pedido_id}", response_model=ActionResult)
def delete_pedido(
    pedido_id: int,
    repo: PedidosRepository = Depends(get_repository),
    storage: ImageStorage = Depends(get_image_storage),
):
    pedidos_service.delete_pedido_cascade(repo, storage, pedido_id)
    return ActionResult(ok=True)

# ---------- imágenes ----------

@router.post("/{pedido_id}/imagen", response_model=ImagenOut, status_code=201)
async def upload_imagen(
    pedido_id: int,
    imagen: Optional[UploadFile] = File(None, description="archivo de imagen"),
    file: Optional[UploadFile] = File(None, description="alias de 'imagen'"),
    repo: PedidosRepository = Depends(get_repository),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_settings_dep),
):
    upload = imagen or file
    if upload is None:
        raise ValidationError("No se recibió imagen")

    # se lee como máximo un byte más del límite: basta para detectar el exceso
    content = await upload.read(settings.max_upload_bytes + 1)
    # guardado en disco/Cloudinary y SQL son bloqueantes: fuera del event loop
    created = await run_in_threadpool(
        imagenes_service.attach_imagen, repo, storage, pedido_id,
        content=content,
        content_type=upload.content_type,
        filename=upload.filename,
        max_bytes=settings.max_upload_bytes,
    )
    return imagen_to_out(created)

@router.get("/{pedido_id}/imagenes", response_model=List[ImagenOut])
def list_imagenes(pedido_id: int, repo: PedidosRepository = Depends(get_repository)):
    return [imagen_to_out(i) for i in repo.list_imagenes(pedido_id)]
