import time

import jwt

from security import gravatar_url


def test_register_returns_token_for_new_user(client, mongo_db):
    resp = client.post(
        "/api/users",
        json={"name": "Ada Lovelace", "email": "ada@example.com", "password": "secret123"},
    )
    assert resp.status_code == 200
    token = resp.json()["token"]

    user = mongo_db["user"].find_one({"email": "ada@example.com"})
    payload = jwt.decode(token, "test-secret", algorithms=["HS256"])
    assert payload["sub"] == str(user["_id"])
    assert 359990 <= payload["exp"] - time.time() <= 360000


def test_register_stores_hash_and_gravatar(client, mongo_db):
    client.post("/api/users", json={"name": "Ada", "email": "ada@example.com", "password": "secret123"})

    user = mongo_db["user"].find_one({"email": "ada@example.com"})
    assert user["name"] == "Ada"
    assert "password" not in user
    assert user["password_hash"] != "secret123"
    assert user["password_hash"].startswith("$2")
    assert user["avatar"] == gravatar_url("ada@example.com")
    assert user["date"] is not None


def test_distinct_emails_register_independently(client, mongo_db):
    for index in range(3):
        resp = client.post(
            "/api/users",
            json={"name": f"User {index}", "email": f"user{index}@example.com", "password": "secret123"},
        )
        assert resp.status_code == 200
    assert mongo_db["user"].count_documents({}) == 3


def test_register_duplicate_email_is_rejected(client, mongo_db):
    body = {"name": "Ada", "email": "ada@example.com", "password": "secret123"}
    assert client.post("/api/users", json=body).status_code == 200

    resp = client.post("/api/users", json={**body, "name": "Other Ada"})
    assert resp.status_code == 400
    assert resp.json() == {"errors": [{"msg": "User already exists in system"}]}
    assert mongo_db["user"].count_documents({"email": "ada@example.com"}) == 1


def test_register_validation_errors(client, mongo_db):
    resp = client.post("/api/users", json={"name": "", "email": "not-an-email", "password": "123"})
    assert resp.status_code == 400

    errors = {error["param"]: error for error in resp.json()["errors"]}
    assert errors["name"]["msg"] == "Name is required"
    assert errors["email"]["msg"] == "Please use a valid email"
    assert errors["password"]["msg"] == "Please enter a password with 6 or more characters"
    assert "value" not in errors["password"]
    assert mongo_db["user"].count_documents({}) == 0


def test_register_missing_fields(client):
    resp = client.post("/api/users", json={})
    assert resp.status_code == 400
    params = {error["param"] for error in resp.json()["errors"]}
    assert params == {"name", "email", "password"}
