NUEVO = {"name": "Beto", "email": "beto@bonaparte.com", "password": "corte123", "role": "operador"}


def test_login_returns_token_name_role(client):
    r = client.post("/api/login", json={"email": "admin@bonaparte.com", "password": "admin123"})
    assert r.status_code == 200
    body = r.json()
    assert body["token"] and body["name"] == "Administrador" and body["role"] == "admin"


def test_login_rejects_bad_credentials(client):
    r = client.post("/api/login", json={"email": "admin@bonaparte.com", "password": "mala"})
    assert r.status_code == 401
    assert client.post("/api/login", json={}).status_code == 401


def test_logout_invalidates_token(client, admin_headers):
    assert client.post("/api/logout", headers=admin_headers).json() == {"ok": True}
    assert client.get("/api/pedidos", headers=admin_headers).status_code == 401


def test_users_are_admin_only(client, operator_headers):
    assert client.get("/api/users", headers=operator_headers).status_code == 403
    assert client.post("/api/users", headers=operator_headers, json=NUEVO).status_code == 403
    assert client.delete("/api/users/1", headers=operator_headers).status_code == 403
    assert client.get("/api/respaldo", headers=operator_headers).status_code == 403
    assert client.get("/api/users").status_code == 401


def test_create_and_list_users_without_password(client, admin_headers):
    r = client.post("/api/users", headers=admin_headers, json=NUEVO)
    assert r.status_code == 201
    created = r.json()
    assert created["email"] == "beto@bonaparte.com" and created["role"] == "operador"
    assert "password" not in created

    users = client.get("/api/users", headers=admin_headers).json()
    assert {u["email"] for u in users} == {"admin@bonaparte.com", "beto@bonaparte.com"}
    assert all("password" not in u for u in users)


def test_create_user_accepts_spanish_field_names(client, admin_headers, login_as):
    r = client.post("/api/users", headers=admin_headers, json={
        "nombre": "Carla", "email": "carla@bonaparte.com", "password": "x1", "rol": "admin",
    })
    assert r.status_code == 201
    assert r.json()["name"] == "Carla" and r.json()["role"] == "admin"
    login_as(client, "carla@bonaparte.com", "x1")


def test_duplicate_email_is_rejected(client, admin_headers):
    assert client.post("/api/users", headers=admin_headers, json=NUEVO).status_code == 201
    before = len(client.get("/api/users", headers=admin_headers).json())
    dup = dict(NUEVO, name="Otro Beto", email="BETO@bonaparte.com")
    r = client.post("/api/users", headers=admin_headers, json=dup)
    assert r.status_code == 400
    assert len(client.get("/api/users", headers=admin_headers).json()) == before


def test_create_user_validates_body(client, admin_headers):
    r = client.post("/api/users", headers=admin_headers, json={"name": "Sin correo", "password": "x"})
    assert r.status_code == 400


def test_delete_user(client, admin_headers):
    created = client.post("/api/users", headers=admin_headers, json=NUEVO).json()
    assert client.delete(f"/api/users/{created['id']}", headers=admin_headers).json() == {"ok": True}
    assert client.delete(f"/api/users/{created['id']}", headers=admin_headers).status_code == 404


def test_session_keeps_role_copied_at_login(client, admin_headers, login_as):
    created = client.post("/api/users", headers=admin_headers, json=dict(NUEVO, role="admin")).json()
    beto = login_as(client, NUEVO["email"], NUEVO["password"])
    client.delete(f"/api/users/{created['id']}", headers=admin_headers)
    # la sesión emitida sigue siendo válida: es una copia, no una referencia
    assert client.get("/api/users", headers=beto).status_code == 200


def test_respaldo(client, admin_headers):
    p = client.post("/api/pedidos", headers=admin_headers, json={"clienteNombre": "Ana"}).json()
    client.post(f"/api/pedidos/{p['id']}/imagen", headers=admin_headers,
                files={"imagen": ("a.png", b"\x89PNG-data", "image/png")})

    r = client.get("/api/respaldo", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert [x["clienteNombre"] for x in body["pedidos"]] == ["Ana"]
    assert len(body["imagenes"]) == 1 and body["imagenes"][0]["pedidoId"] == p["id"]
    assert body["usuarios"] and all("password" not in u for u in body["usuarios"])
    assert body["generatedAt"]


def test_admin_seeded_only_once(make_client, login_as):
    first = make_client("json")
    headers = login_as(first, "admin@bonaparte.com", "admin123")
    first.post("/api/users", headers=headers, json=NUEVO)
    second = make_client("json")
    headers = login_as(second, "admin@bonaparte.com", "admin123")
    assert len(second.get("/api/users", headers=headers).json()) == 2


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["storage"] in ("sql", "json")
