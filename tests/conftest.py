import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from main import create_app

ADMIN = {"email": "admin@bonaparte.com", "password": "admin123"}


def make_settings(tmp_path, backend="sql", **overrides):
    values = dict(
        storage_backend=backend,
        database_url=f"sqlite:///{(tmp_path / 'test.db').as_posix()}",
        data_dir=str(tmp_path / "data"),
        image_storage="local",
        uploads_dir=str(tmp_path / "uploads"),
        uploads_url_prefix="/uploads",
        folio_prefix="BONA",
        log_level="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(params=["sql", "json"])
def backend(request):
    return request.param


@pytest.fixture()
def settings(tmp_path, backend):
    return make_settings(tmp_path, backend)


@pytest.fixture()
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


def login(client, email, password):
    r = client.post("/api/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture()
def admin_headers(client):
    return login(client, ADMIN["email"], ADMIN["password"])


@pytest.fixture()
def operator_headers(client, admin_headers):
    r = client.post("/api/users", headers=admin_headers, json={
        "name": "Lucía", "email": "lucia@bonaparte.com", "password": "taller1", "role": "operador",
    })
    assert r.status_code == 201, r.text
    return login(client, "lucia@bonaparte.com", "taller1")


@pytest.fixture()
def login_as():
    return login


@pytest.fixture()
def make_client(tmp_path):
    """Cliente con settings a medida; se cierra al terminar el test."""
    opened = []

    def factory(backend="sql", **overrides):
        c = TestClient(create_app(make_settings(tmp_path, backend, **overrides)))
        c.__enter__()
        opened.append(c)
        return c

    yield factory
    for c in opened:
        c.__exit__(None, None, None)
