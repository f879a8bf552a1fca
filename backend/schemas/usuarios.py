# backend/schemas/usuarios.py
from typing import NewType
from pydantic import AliasChoices, BaseModel, EmailStr, Field, constr

from repositories.base import Row

NameStr = NewType("NameStr", constr(strip_whitespace=True, min_length=1, max_length=255))
RoleStr = NewType("RoleStr", constr(strip_whitespace=True, min_length=1, max_length=20))

# ---------- Schemas ----------

class UsuarioCreate(BaseModel):
    # el frontend histórico manda nombre/rol; la API documentada usa name/role
    name: NameStr = Field(validation_alias=AliasChoices("name", "nombre"))
    email: EmailStr
    password: constr(min_length=1, max_length=128)
    role: RoleStr = Field(default="operador", validation_alias=AliasChoices("role", "rol"))

class UsuarioOut(BaseModel):
    id: int
    name: str
    email: str
    role: str

class LoginPayload(BaseModel):
    email: str = ""
    password: str = ""

class LoginResponse(BaseModel):
    token: str
    name: str
    role: str


def usuario_to_out(row: Row) -> UsuarioOut:
    # nunca exponer password
    return UsuarioOut(id=row["id"], name=row["nombre"], email=row["email"], role=row["rol"])
