# backend/models/usuario_model.py
from sqlalchemy import Column, Integer
from sqlalchemy.types import Unicode
from database.session import Base

class Usuario(Base):
    __tablename__ = "usuarios"
    id       = Column(Integer, primary_key=True, index=True)
    nombre   = Column(Unicode(255), nullable=False)
    email    = Column(Unicode(255), nullable=False, index=True)  # unicidad validada en la capa de servicio
    password = Column(Unicode(255), nullable=False)              # ⚠️ texto plano, ver services.auth_service
    rol      = Column(Unicode(20), nullable=False)               # 'admin' / 'operador'
