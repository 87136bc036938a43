from datetime import timedelta

from security import TokenSigner


def test_login_returns_token(client, register):
    register()
    resp = client.post("/api/auth", json={"email": "ada@example.com", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.json()["token"]


def test_login_rejects_wrong_password_and_unknown_email_alike(client, register):
    register()
    wrong_password = client.post("/api/auth", json={"email": "ada@example.com", "password": "nope-nope"})
    unknown_email = client.post("/api/auth", json={"email": "bob@example.com", "password": "secret123"})

    assert wrong_password.status_code == 400
    assert wrong_password.json() == unknown_email.json() == {"errors": [{"msg": "Invalid Credentials"}]}


def test_login_requires_password(client):
    resp = client.post("/api/auth", json={"email": "ada@example.com", "password": ""})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["msg"] == "Password is required"


def test_current_user_hides_password_hash(client, auth_headers):
    resp = client.get("/api/auth", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["email"] == "ada@example.com"
    assert data["name"] == "Ada Lovelace"
    assert data["avatar"].startswith("https://www.gravatar.com/avatar/")
    assert "password_hash" not in data


def test_x_auth_token_header_is_accepted(client, register):
    token = register()
    resp = client.get("/api/auth", headers={"x-auth-token": token})
    assert resp.status_code == 200


def test_missing_token_is_unauthorized(client):
    resp = client.get("/api/profile/me")
    assert resp.status_code == 401
    assert resp.json() == {"msg": "No token, authorization denied"}


def test_garbage_token_is_unauthorized(client):
    resp = client.get("/api/profile/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json() == {"msg": "Token is not valid"}


def test_token_signed_with_other_secret_is_rejected(client, mongo_db, register):
    register()
    user_id = str(mongo_db["user"].find_one()["_id"])
    forged = TokenSigner("another-secret").issue(user_id)

    resp = client.get("/api/auth", headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 401


def test_expired_token_is_rejected(client, mongo_db, register):
    register()
    user_id = str(mongo_db["user"].find_one()["_id"])
    expired = TokenSigner("test-secret").issue(user_id, expires_delta=timedelta(seconds=-10))

    resp = client.get("/api/auth", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.json() == {"msg": "Token is not valid"}
