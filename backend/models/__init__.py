# backend/models/__init__.py
from .pedido_model import Pedido
from .imagen_model import Imagen
from .usuario_model import Usuario
from .folio_model import FolioContador
