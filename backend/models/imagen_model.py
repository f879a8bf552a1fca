# backend/models/imagen_model.py
from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship

from database.session import Base

class Imagen(Base):
    __tablename__ = "imagenes"

    id         = Column(Integer, primary_key=True, index=True)
    pedido_id  = Column(Integer, ForeignKey("pedidos.id"), nullable=False, index=True)
    imagen_url = Column(Unicode(1024), nullable=False)
    creado_en  = Column(Unicode(40), nullable=False)

    pedido = relationship("Pedido", back_populates="imagenes")
