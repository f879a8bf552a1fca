# backend/models/folio_model.py
from sqlalchemy import Column, Integer
from sqlalchemy.types import Unicode
from database.session import Base

class FolioContador(Base):
    __tablename__ = "folio_contadores"
    clave  = Column(Unicode(60), primary_key=True)   # '<prefijo>-<año>'
    ultimo = Column(Integer, nullable=False, default=0)  # sólo crece, aunque se borren pedidos
