from conftest import register


def test_register_signs_user_in(client):
    res = register(client, username="nimal", firstName="Nimal", lastName="Silva")
    assert res.status_code == 201
    body = res.json()
    assert body["username"] == "nimal"
    assert body["isAdmin"] is False
    assert "password" not in body and "passwordHash" not in body

    me = client.get("/api/user")
    assert me.status_code == 200
    assert me.json()["id"] == body["id"]


def test_register_ignores_is_admin_flag(client):
    res = register(client, username="mallory", isAdmin=True)
    assert res.status_code == 201
    assert res.json()["isAdmin"] is False
    assert client.get("/api/admin/orders").status_code == 403


def test_duplicate_username_or_email(client):
    assert register(client, username="nimal").status_code == 201
    assert register(client, username="NIMAL", email="other@example.com").status_code == 409
    assert register(client, username="someone", email="nimal@example.com").status_code == 409


def test_register_validation(client):
    res = register(client, username="ab", email="not-an-email", password="123")
    assert res.status_code == 400
    fields = {e["field"] for e in res.json()["errors"]}
    assert {"username", "email", "password"} <= fields


def test_login_with_username_or_email(client):
    register(client, username="nimal")
    client.post("/api/logout")

    res = client.post("/api/login", json={"usernameOrEmail": "nimal", "password": "secret123"})
    assert res.status_code == 200
    assert res.json()["redirectTo"] == "/"
    assert res.json()["user"]["username"] == "nimal"

    client.post("/api/logout")
    res = client.post("/api/login", json={"usernameOrEmail": "NIMAL@example.com", "password": "secret123"})
    assert res.status_code == 200


def test_admin_login_redirects_to_dashboard(admin_client):
    admin_client.post("/api/logout")
    res = admin_client.post("/api/login", json={"usernameOrEmail": "admin@velvetcrumbs.lk", "password": "Complex123@"})
    assert res.status_code == 200
    assert res.json()["redirectTo"] == "/admin/dashboard"
    assert res.json()["user"]["isAdmin"] is True


def test_bad_credentials(client):
    register(client, username="nimal")
    client.post("/api/logout")

    res = client.post("/api/login", json={"usernameOrEmail": "nimal", "password": "wrong-password"})
    assert res.status_code == 401
    res = client.post("/api/login", json={"usernameOrEmail": "ghost", "password": "secret123"})
    assert res.status_code == 401


def test_logout_ends_session(user_client):
    assert user_client.post("/api/logout").status_code == 200
    assert user_client.get("/api/user").status_code == 401


def test_update_profile(user_client):
    res = user_client.put("/api/user/profile", json={
        "firstName": "Jane",
        "address": "  45 Kandy Road, Kadawatha ",
        "dateOfBirth": "1994-03-21",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["firstName"] == "Jane"
    assert body["address"] == "45 Kandy Road, Kadawatha"
    assert body["dateOfBirth"] == "1994-03-21"


def test_update_profile_rejects_bad_date(user_client):
    res = user_client.put("/api/user/profile", json={"dateOfBirth": "21/03/1994"})
    assert res.status_code == 400


def test_profile_requires_login(client):
    assert client.put("/api/user/profile", json={"firstName": "X"}).status_code == 401


def test_password_length_follows_settings(client, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "PASSWORD_MIN_LENGTH", 10)
    res = register(client, username="nimal", password="secret123")
    assert res.status_code == 400
    assert [e["field"] for e in res.json()["errors"]] == ["password"]

    assert register(client, username="nimal", password="secret1234").status_code == 201
