import pytest

from services.errors import Forbidden, ValidationError
from services.pedidos_service import build_new_pedido, merge_pedido, parse_money

NOW = "2026-03-01T10:00:00+00:00"
LATER = "2026-03-02T09:30:00+00:00"


@pytest.fixture()
def previous():
    row = build_new_pedido({
        "cliente_nombre": "Ana",
        "cliente_telefono": "5551234",
        "prenda_tipo": "Falda",
        "precio_total": 500,
        "anticipo": "200",
    }, "BONA-2026-0001", NOW)
    row["id"] = 7
    return row


def test_build_new_pedido_defaults(previous):
    assert previous["cliente_escuela"] == ""
    assert previous["estado"] == "nuevo"
    assert previous["precio_total"] == 500.0
    assert previous["anticipo"] == 200.0
    assert previous["saldo"] == 0.0 and previous["gastos_compras"] == 0.0
    assert previous["imagen_url"] is None
    assert previous["creado_en"] == previous["actualizado_en"] == NOW


def test_build_new_pedido_coerces_garbage_money_to_zero():
    row = build_new_pedido({"precio_total": "abc", "saldo": None, "anticipo": ""}, "F-1", NOW)
    assert row["precio_total"] == 0.0 and row["saldo"] == 0.0 and row["anticipo"] == 0.0


def test_build_new_pedido_rejects_negative_money():
    with pytest.raises(ValidationError):
        build_new_pedido({"precio_total": -5}, "F-1", NOW)


def test_merge_keeps_absent_fields_and_sets_present(previous):
    merged = merge_pedido(previous, {"estado": "corte", "corte_notas": "tela lista"}, LATER)
    assert merged["estado"] == "corte"
    assert merged["corte_notas"] == "tela lista"
    for field in ("cliente_nombre", "cliente_telefono", "prenda_tipo", "precio_total", "anticipo", "folio", "creado_en"):
        assert merged[field] == previous[field]
    assert merged["actualizado_en"] == LATER


def test_merge_stamps_updated_at_even_without_changes(previous):
    merged = merge_pedido(previous, {}, LATER)
    assert merged["actualizado_en"] == LATER
    assert {k: v for k, v in merged.items() if k != "actualizado_en"} == \
        {k: v for k, v in previous.items() if k != "actualizado_en"}


def test_merge_explicit_null_clears_nullable_fields(previous):
    previous["imagen_url"] = "/uploads/a.jpg"
    merged = merge_pedido(previous, {"imagen_url": None, "compras_notas": None}, LATER)
    assert merged["imagen_url"] is None
    assert merged["compras_notas"] is None


def test_merge_null_on_non_nullable_keeps_previous(previous):
    merged = merge_pedido(previous, {"precio_total": None, "estado": None, "folio": None}, LATER)
    assert merged["precio_total"] == 500.0
    assert merged["estado"] == "nuevo"
    assert merged["folio"] == "BONA-2026-0001"


def test_merge_converts_numeric_strings(previous):
    merged = merge_pedido(previous, {"saldo": "300.50"}, LATER)
    assert merged["saldo"] == 300.5


@pytest.mark.parametrize("bad", ["abc", "", -1, True, "nan", [1]])
def test_merge_rejects_invalid_money(previous, bad):
    with pytest.raises(ValidationError):
        merge_pedido(previous, {"anticipo": bad}, LATER)


def test_merge_ignores_read_only_fields(previous):
    merged = merge_pedido(previous, {"id": 99, "creado_en": "x", "desconocido": 1}, LATER)
    assert merged["id"] == 7
    assert merged["creado_en"] == NOW
    assert "desconocido" not in merged


def test_merge_folio_change_requires_permission(previous):
    with pytest.raises(Forbidden):
        merge_pedido(previous, {"folio": "BONA-2026-0100"}, LATER)
    merged = merge_pedido(previous, {"folio": "BONA-2026-0100"}, LATER, allow_folio_change=True)
    assert merged["folio"] == "BONA-2026-0100"


def test_merge_same_folio_is_not_a_correction(previous):
    merged = merge_pedido(previous, {"folio": "BONA-2026-0001"}, LATER)
    assert merged["folio"] == "BONA-2026-0001"


def test_parse_money():
    assert parse_money("12.5") == 12.5
    assert parse_money(0) == 0.0
    with pytest.raises(ValueError):
        parse_money("inf")
