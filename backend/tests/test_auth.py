from datetime import datetime, timedelta, timezone

from jose import jwt

from carebridge.errors import AuthError
from carebridge.services.auth_service import (
    Identity, create_access_token, verify_access_token, hash_password, verify_password
)
from conftest import PASSWORD, register


def test_register_returns_public_user(client):
    r = client.post(
        "/register",
        json={"username": "pat", "password": PASSWORD, "name": "Pat", "role": "patient"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["username"] == "pat"
    assert body["user"]["role"] == "patient"
    assert "passwordHash" not in body["user"]
    assert "password" not in body["user"]


def test_register_duplicate_username_is_conflict(client):
    register(client, "alice", "caregiver")
    r = client.post(
        "/register",
        json={"username": "alice", "password": PASSWORD, "name": "Other", "role": "patient"},
    )
    assert r.status_code == 409
    assert r.json() == {"error": "username already exists"}


def test_register_rejects_unknown_role(client):
    r = client.post(
        "/register",
        json={"username": "bob", "password": PASSWORD, "name": "Bob", "role": "admin"},
    )
    assert r.status_code == 400
    assert "error" in r.json()


def test_login_returns_token_role_and_user_id(client):
    user = register(client, "pat", "patient")
    r = client.post("/login", json={"username": "pat", "password": PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["token"]
    assert body["role"] == "patient"
    assert body["userId"] == user["id"]


def test_login_failures_are_indistinguishable(client):
    register(client, "pat", "patient")
    wrong_password = client.post("/login", json={"username": "pat", "password": "nope-nope"})
    unknown_user = client.post("/login", json={"username": "ghost", "password": PASSWORD})
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"error": "invalid_credentials"}


def test_me_requires_token(client):
    r = client.get("/me")
    assert r.status_code == 401
    assert r.json() == {"error": "missing_token"}
    assert r.headers["www-authenticate"] == "Bearer"


def test_me_with_token(client, make_user):
    user, headers = make_user("pat", "patient")
    r = client.get("/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["id"] == user["id"]


def test_token_for_deleted_or_unknown_user_is_rejected(client, settings):
    token = create_access_token(settings, {"sub": "999", "role": "patient"})
    r = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_verify_access_token_returns_identity(settings):
    token = create_access_token(settings, {"sub": "42", "role": "caregiver"})
    assert verify_access_token(settings, token) == Identity(user_id=42, role="caregiver")


def test_verify_access_token_returns_error_values(settings):
    missing = verify_access_token(settings, None)
    assert isinstance(missing, AuthError) and missing.message == "missing_token"

    garbage = verify_access_token(settings, "not-a-jwt")
    assert isinstance(garbage, AuthError) and garbage.message == "invalid_token"

    expired_token = create_access_token(settings, {"sub": "1"}, expires_delta=timedelta(seconds=-5))
    expired = verify_access_token(settings, expired_token)
    assert isinstance(expired, AuthError) and expired.message == "token_expired"

    other_key = settings.model_copy(update={"secret_key": "someone-else"})
    forged = create_access_token(other_key, {"sub": "1"})
    assert isinstance(verify_access_token(settings, forged), AuthError)


def test_default_token_lifetime_is_seven_days(settings):
    assert settings.access_token_expire_minutes == 7 * 24 * 60


def test_password_is_hashed():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)


def test_token_expiry_follows_settings_and_leaves_claims_untouched(settings):
    claims = {"sub": "7", "role": "patient"}
    before = datetime.now(timezone.utc)
    token = create_access_token(settings, claims)

    assert claims == {"sub": "7", "role": "patient"}
    exp = datetime.fromtimestamp(jwt.get_unverified_claims(token)["exp"], timezone.utc)
    lifetime = timedelta(minutes=settings.access_token_expire_minutes)
    assert before + lifetime - timedelta(seconds=5) <= exp <= before + lifetime + timedelta(seconds=5)
