# backend/schemas/pedidos.py
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from repositories.base import Row


class CamelModel(BaseModel):
    """snake_case en Python/DB, camelCase en el JSON de la API."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PedidoPayload(CamelModel):
    """
    Cuerpo de POST/PUT /pedidos. Todo es opcional: en PUT sólo se aplican los
    campos que vienen en el JSON (model_fields_set). Los importes llegan como Any
    porque la coerción/validación numérica depende de si es alta o actualización.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    folio: Optional[str] = None
    cliente_nombre: Optional[str] = None
    cliente_telefono: Optional[str] = None
    cliente_escuela: Optional[str] = None
    prenda_tipo: Optional[str] = None
    prenda_modelo: Optional[str] = None
    descripcion_general: Optional[str] = None
    fecha_entrega: Optional[str] = None
    estado: Optional[str] = None
    tallas_texto: Optional[str] = None
    compras_notas: Optional[str] = None
    corte_notas: Optional[str] = None
    confeccion_notas: Optional[str] = None
    precio_total: Any = None
    anticipo: Any = None
    saldo: Any = None
    gastos_compras: Any = None
    condiciones_cliente: Optional[str] = None
    compras_detalle: Optional[str] = None
    imagen_url: Optional[str] = None

    def present_fields(self) -> Row:
        return self.model_dump(exclude_unset=True)


class PedidoOut(CamelModel):
    id: int
    folio: str
    cliente_nombre: Optional[str] = None
    cliente_telefono: Optional[str] = None
    cliente_escuela: Optional[str] = None
    prenda_tipo: Optional[str] = None
    prenda_modelo: Optional[str] = None
    descripcion_general: Optional[str] = None
    fecha_entrega: Optional[str] = None
    estado: Optional[str] = None
    tallas_texto: Optional[str] = None
    compras_notas: Optional[str] = None
    corte_notas: Optional[str] = None
    confeccion_notas: Optional[str] = None
    precio_total: float = 0.0
    anticipo: float = 0.0
    saldo: float = 0.0
    gastos_compras: float = 0.0
    condiciones_cliente: Optional[str] = None
    compras_detalle: Optional[str] = None
    imagen_url: Optional[str] = None
    creado_en: Optional[str] = None
    actualizado_en: Optional[str] = None


def pedido_to_out(row: Row) -> PedidoOut:
    data = dict(row)
    for key in ("precio_total", "anticipo", "saldo", "gastos_compras"):
        data[key] = float(data.get(key) or 0)
    return PedidoOut.model_validate(data)


class ActionResult(BaseModel):
    ok: bool = True
