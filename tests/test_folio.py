from datetime import datetime, timezone

import pytest

from repositories.json_repository import JsonPedidosRepository
from repositories.sql_repository import SqlPedidosRepository
from services.errors import StorageFailure
from services.folio_service import folio_in_use, next_folio

NOW = datetime(2026, 5, 4, tzinfo=timezone.utc)
NEXT_YEAR = datetime(2027, 1, 2, tzinfo=timezone.utc)


@pytest.fixture(params=["sql", "json"])
def repo(request, tmp_path):
    if request.param == "sql":
        r = SqlPedidosRepository(f"sqlite:///{(tmp_path / 'folios.db').as_posix()}")
    else:
        r = JsonPedidosRepository(str(tmp_path / "data"))
    yield r
    r.close()


def _add(repo, folio):
    return repo.create_pedido({"folio": folio, "estado": "nuevo", "creado_en": "x", "actualizado_en": "x"})


def test_first_folio_of_the_year(repo):
    assert next_folio(repo, "BONA", NOW) == "BONA-2026-0001"


def test_folio_counts_only_current_year_and_prefix(repo):
    _add(repo, "BONA-2025-0042")
    _add(repo, "BONA-2026-0001")
    _add(repo, "BONA-2026-0007")
    _add(repo, "OTRO-2026-0100")
    _add(repo, "manual")
    assert next_folio(repo, "BONA", NOW) == "BONA-2026-0008"


def test_folio_of_deleted_newest_pedido_is_not_reused(repo):
    _add(repo, next_folio(repo, "BONA", NOW))
    newest = _add(repo, next_folio(repo, "BONA", NOW))
    repo.delete_pedido(newest["id"])

    folio = next_folio(repo, "BONA", NOW)
    assert folio != newest["folio"]
    assert folio == "BONA-2026-0003"


def test_folio_not_reused_after_deleting_everything(repo):
    for _ in range(2):
        _add(repo, next_folio(repo, "BONA", NOW))
    for p in repo.list_pedidos():
        repo.delete_pedido(p["id"])
    assert next_folio(repo, "BONA", NOW) == "BONA-2026-0003"


def test_counter_restarts_each_year(repo):
    _add(repo, next_folio(repo, "BONA", NOW))
    assert next_folio(repo, "BONA", NEXT_YEAR) == "BONA-2027-0001"
    assert next_folio(repo, "BONA", NOW) == "BONA-2026-0002"


def test_counter_survives_reopening_json_store(tmp_path):
    repo = JsonPedidosRepository(str(tmp_path))
    p = _add(repo, next_folio(repo, "BONA", NOW))
    repo.delete_pedido(p["id"])

    reopened = JsonPedidosRepository(str(tmp_path))
    assert next_folio(reopened, "BONA", NOW) == "BONA-2026-0002"


def test_folio_falls_back_to_one_when_storage_fails(repo, monkeypatch):
    def boom(*args, **kwargs):
        raise StorageFailure()

    monkeypatch.setattr(repo, "reserve_folio_seq", boom)
    assert next_folio(repo, "BONA", NOW) == "BONA-2026-0001"


def test_folio_in_use(repo):
    p = _add(repo, "BONA-2026-0001")
    assert folio_in_use(repo, "BONA-2026-0001")
    assert not folio_in_use(repo, "BONA-2026-0001", exclude_id=p["id"])
    assert not folio_in_use(repo, "BONA-2026-0002")
