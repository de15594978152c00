from datetime import timedelta

from kushalwear.utils.security import create_access_token

from conftest import PASSWORD, bearer


def test_signup_returns_token_and_profile(client):
    res = client.post(
        "/api/auth/signup",
        json={"name": "Jane Doe", "email": "Jane@Example.com", "password": PASSWORD},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "User registered successfully"
    assert body["token"]
    assert body["user"]["email"] == "jane@example.com"
    assert body["user"]["role"] == "user"
    assert "password" not in body["user"]
    assert "passwordHash" not in body["user"]


def test_signup_duplicate_email_conflicts(client, register):
    register(email="dup@example.com")
    res = client.post(
        "/api/auth/signup",
        json={"name": "Other", "email": "dup@example.com", "password": PASSWORD},
    )
    assert res.status_code == 409
    assert res.json()["message"] == "User with this email already exists"


def test_signup_weak_password_fails_validation(client):
    res = client.post(
        "/api/auth/signup",
        json={"name": "Jane", "email": "jane@example.com", "password": "alllowercase"},
    )
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation failed"
    assert body["errors"][0]["field"] == "password"


def test_wrong_password_and_unknown_email_look_the_same(client, register):
    register(email="user@example.com")

    wrong = client.post("/api/auth/login", json={"email": "user@example.com", "password": "Wrong1234"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "Wrong1234"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"message": "Invalid credentials"}


def test_login_sets_last_login(client, register):
    register(email="user@example.com")
    res = client.post("/api/auth/login", json={"email": "user@example.com", "password": PASSWORD})

    assert res.status_code == 200
    assert res.json()["message"] == "Login successful"
    assert res.json()["user"]["lastLogin"] is not None


def test_me_requires_token(client):
    res = client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json() == {"message": "Access token required"}


def test_me_rejects_bad_and_expired_tokens(client, register):
    register()
    res = client.get("/api/auth/me", headers=bearer("not-a-jwt"))
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid token"

    expired = create_access_token("someone", "user", expires_delta=timedelta(seconds=-5))
    res = client.get("/api/auth/me", headers=bearer(expired))
    assert res.status_code == 401
    assert res.json()["message"] == "Token expired"


def test_me_returns_profile(client, headers):
    res = client.get("/api/auth/me", headers=headers)
    assert res.status_code == 200
    assert res.json()["user"]["name"] == "Test User"


def test_update_profile_only_touches_given_fields(client, headers):
    res = client.put(
        "/api/auth/profile",
        headers=headers,
        json={"phone": "+48 600 100 200", "address": {"city": "Krakow", "zipCode": "30-001"}},
    )
    assert res.status_code == 200
    user = res.json()["user"]
    assert user["name"] == "Test User"
    assert user["phone"] == "+48 600 100 200"
    assert user["address"]["zipCode"] == "30-001"


def test_change_password(client, headers):
    res = client.post(
        "/api/auth/change-password",
        headers=headers,
        json={"currentPassword": "Nope1234", "newPassword": "Newpass123"},
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Current password is incorrect"

    res = client.post(
        "/api/auth/change-password",
        headers=headers,
        json={"currentPassword": PASSWORD, "newPassword": "Newpass123"},
    )
    assert res.status_code == 200

    res = client.post("/api/auth/login", json={"email": "user@example.com", "password": "Newpass123"})
    assert res.status_code == 200


def test_logout_is_stateless(client, headers):
    res = client.post("/api/auth/logout", headers=headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Logout successful"}


def test_deactivated_account_cannot_log_in(client, headers):
    assert client.delete("/api/users/account", headers=headers).status_code == 200

    res = client.post("/api/auth/login", json={"email": "user@example.com", "password": PASSWORD})
    assert res.status_code == 401
    assert res.json()["message"] == "Account is deactivated"

    res = client.get("/api/auth/me", headers=headers)
    assert res.status_code == 401
