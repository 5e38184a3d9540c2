from academy.core.enum import Role


async def test_register_login_me_logout(client):
    res = await client.post(
        "/api/auth/register",
        json={
            "email": "student@mail.com",
            "password": "secret123",
            "full_name": "New Student",
            "curriculum": "egyptian",
            "level": "primary",
            "language": "arabic",
            "grade": "p1_arabic",
        },
    )
    assert res.status_code == 201
    body = res.json()
    assert body["role"] == "USER"
    assert body["points"] == 0
    assert "password" not in body

    res = await client.post("/api/auth/login", json={"email": "student@mail.com", "password": "secret123"})
    assert res.status_code == 200
    assert res.json()["token_type"] == "bearer"
    assert "access_token" in res.cookies

    # the cookie set by login authenticates the next call
    res = await client.get("/api/auth/me")
    assert res.status_code == 200
    assert res.json()["email"] == "student@mail.com"

    res = await client.post("/api/auth/logout")
    assert res.status_code == 200
    client.cookies.clear()
    assert (await client.get("/api/auth/me")).status_code == 401


async def test_register_rejects_duplicates_and_bad_taxonomy(client, make_user):
    await make_user(Role.USER, email="taken@mail.com")
    res = await client.post(
        "/api/auth/register",
        json={"email": "taken@mail.com", "password": "secret123", "full_name": "Dup"},
    )
    assert res.status_code == 409

    res = await client.post(
        "/api/auth/register",
        json={"email": "other@mail.com", "password": "secret123", "full_name": "X", "curriculum": "mars"},
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid curriculum selection"


async def test_login_failures(client, make_user):
    await make_user(Role.USER, email="frozen@mail.com", is_suspended=True)

    res = await client.post("/api/auth/login", json={"email": "frozen@mail.com", "password": "wrong-one"})
    assert res.status_code == 401
    assert res.json()["detail"]["error_code"] == "INVALID_CREDENTIALS"

    res = await client.post("/api/auth/login", json={"email": "frozen@mail.com", "password": "secret123"})
    assert res.status_code == 403
    assert res.json()["detail"]["error_code"] == "ACCOUNT_SUSPENDED"


async def test_bearer_header_and_role_guard(client, make_user):
    _, headers = await make_user(Role.USER)
    assert (await client.get("/api/auth/me", headers=headers)).status_code == 200
    assert (await client.get("/api/admin/users", headers=headers)).status_code == 403
    assert (await client.get("/api/auth/me", headers={"Authorization": "Bearer junk"})).status_code == 401


async def test_request_id_is_echoed(client):
    res = await client.get("/", headers={"X-Request-ID": "abc123"})
    assert res.headers["x-request-id"] == "abc123"
    assert (await client.get("/")).headers["x-request-id"]
