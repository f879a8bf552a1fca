# backend/models/pedido_model.py
from sqlalchemy import Column, Integer, Float
from sqlalchemy.types import Unicode, UnicodeText
from sqlalchemy.orm import relationship

from database.session import Base

class Pedido(Base):
    __tablename__ = "pedidos"

    id                  = Column(Integer, primary_key=True, index=True)
    folio               = Column(Unicode(40), unique=True, nullable=False, index=True)
    cliente_nombre      = Column(Unicode(255))
    cliente_telefono    = Column(Unicode(40))
    cliente_escuela     = Column(Unicode(255))
    prenda_tipo         = Column(Unicode(120))
    prenda_modelo       = Column(Unicode(120))
    descripcion_general = Column(UnicodeText)
    fecha_entrega       = Column(Unicode(40))
    estado              = Column(Unicode(40), nullable=False, default="nuevo")
    tallas_texto        = Column(UnicodeText)
    compras_notas       = Column(UnicodeText)
    corte_notas         = Column(UnicodeText)
    confeccion_notas    = Column(UnicodeText)
    precio_total        = Column(Float, nullable=False, default=0)
    anticipo            = Column(Float, nullable=False, default=0)
    saldo               = Column(Float, nullable=False, default=0)
    gastos_compras      = Column(Float, nullable=False, default=0)
    condiciones_cliente = Column(UnicodeText)
    compras_detalle     = Column(UnicodeText)
    imagen_url          = Column(Unicode(1024), nullable=True)   # imagen principal (portada)
    creado_en           = Column(Unicode(40), nullable=False)    # ISO-8601 UTC
    actualizado_en      = Column(Unicode(40), nullable=False)

    # sin cascade a nivel ORM: el borrado de imágenes lo coordina services.pedidos_service
    imagenes = relationship("Imagen", back_populates="pedido", passive_deletes=True)
