from conftest import ADMIN_EMAIL, PASSWORD


def test_user_admin_routes_require_admin(client, headers):
    res = client.get("/api/users", headers=headers)
    assert res.status_code == 403
    assert res.json() == {"message": "Admin access required"}


def test_list_and_search_users(client, register, admin_headers):
    register(email="alice@example.com", name="Alice")
    register(email="bob@example.com", name="Bob")

    body = client.get("/api/users", headers=admin_headers).json()
    assert body["pagination"]["totalCount"] == 3

    body = client.get("/api/users", headers=admin_headers, params={"search": "ali"}).json()
    assert [u["email"] for u in body["users"]] == ["alice@example.com"]


def test_get_and_update_user(client, register, admin_headers):
    register(email="alice@example.com", name="Alice")
    users = client.get("/api/users", headers=admin_headers, params={"search": "alice"}).json()["users"]
    user_id = users[0]["id"]

    res = client.get(f"/api/users/{user_id}", headers=admin_headers)
    assert res.json()["user"]["name"] == "Alice"

    res = client.put(f"/api/users/{user_id}", headers=admin_headers, json={"role": "admin", "name": "Alicja"})
    assert res.status_code == 200
    assert res.json()["user"]["role"] == "admin"
    assert res.json()["user"]["name"] == "Alicja"

    res = client.put(f"/api/users/{user_id}", headers=admin_headers, json={"email": ADMIN_EMAIL})
    assert res.status_code == 409

    assert client.get("/api/users/nope", headers=admin_headers).status_code == 404


def test_admin_soft_deletes_user(client, register, admin_headers):
    alice = register(email="alice@example.com", name="Alice")
    user_id = client.get("/api/auth/me", headers=alice).json()["user"]["id"]

    res = client.delete(f"/api/users/{user_id}", headers=admin_headers)
    assert res.status_code == 200

    res = client.get(f"/api/users/{user_id}", headers=admin_headers)
    assert res.json()["user"]["isActive"] is False

    res = client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
    assert res.status_code == 401


def test_users_profile_routes_match_auth_routes(client, headers):
    res = client.get("/api/users/profile", headers=headers)
    assert res.status_code == 200
    assert res.json()["user"]["email"] == "user@example.com"

    res = client.put("/api/users/profile", headers=headers, json={"name": "Renamed User"})
    assert res.status_code == 200
    assert res.json()["user"]["name"] == "Renamed User"
    assert client.get("/api/auth/me", headers=headers).json()["user"]["name"] == "Renamed User"


def test_users_change_password(client, headers):
    res = client.post(
        "/api/users/change-password",
        headers=headers,
        json={"currentPassword": "Nope1234", "newPassword": "Newpass123"},
    )
    assert res.status_code == 400

    res = client.post(
        "/api/users/change-password",
        headers=headers,
        json={"currentPassword": PASSWORD, "newPassword": "Newpass123"},
    )
    assert res.status_code == 200
    res = client.post("/api/auth/login", json={"email": "user@example.com", "password": "Newpass123"})
    assert res.status_code == 200


def test_users_profile_requires_token(client):
    res = client.get("/api/users/profile")
    assert res.status_code == 401
