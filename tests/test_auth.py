import pytest

from app.core.errors import AuthError
from app.core.security import decode_token
from app.models.refresh_token import RefreshToken
from app.services import token_service

from conftest import API, auth_headers, make_user

REGISTER = {"name": "Ana Cruz", "email": "Ana@Example.com", "password": "Secret123!"}


def _refresh_cookie_header(resp) -> str:
    cookies = [v for k, v in resp.headers.multi_items() if k.lower() == "set-cookie"]
    matching = [c for c in cookies if c.startswith("refreshToken=")]
    assert len(matching) == 1, cookies
    return matching[0]


def test_register_sets_refresh_cookie(client, db):
    r = client.post(f"{API}/auth/register", json=REGISTER)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["user"]["email"] == "ana@example.com"
    assert decode_token(body["token"])["id"] == body["user"]["id"]
    # refresh token travels only in the cookie
    assert "refreshToken" not in body

    cookie = _refresh_cookie_header(r)
    lowered = cookie.lower()
    assert "httponly" in lowered
    assert "samesite=strict" in lowered
    assert "path=/api/v1/auth/refresh-token" in lowered
    assert "max-age=2592000" in lowered
    assert "secure" not in lowered  # only set in production

    assert db.query(RefreshToken).count() == 1


def test_register_duplicate_email(client, db):
    make_user(db, email="ana@example.com")
    r = client.post(f"{API}/auth/register", json=REGISTER)
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "User already exists", "code": "USER_EXISTS"}


def test_register_validation_error_shape(client, db):
    r = client.post(f"{API}/auth/register", json={"name": "x", "email": "x@example.com", "password": "123"})
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"
    assert r.json()["success"] is False


def test_login_and_me(client, db, guest):
    r = client.post(f"{API}/auth/login", json={"email": "guest@example.com", "password": "Secret123!"})
    assert r.status_code == 200
    token = r.json()["token"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == guest.id


def test_login_wrong_password(client, db, guest):
    r = client.post(f"{API}/auth/login", json={"email": "guest@example.com", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json()["code"] == "INVALID_CREDENTIALS"


def test_refresh_via_cookie(client, db):
    reg = client.post(f"{API}/auth/register", json=REGISTER)
    user_id = reg.json()["user"]["id"]

    r = client.post(f"{API}/auth/refresh-token")
    assert r.status_code == 200
    assert decode_token(r.json()["token"])["id"] == user_id

    # not rotated: the same cookie works again
    again = client.post(f"{API}/auth/refresh-token")
    assert again.status_code == 200


def test_refresh_without_cookie(client, db):
    r = client.post(f"{API}/auth/refresh-token")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Refresh token not found", "code": "REFRESH_TOKEN_MISSING"}


def _raw_refresh_token(resp) -> str:
    return _refresh_cookie_header(resp).split(";", 1)[0].split("=", 1)[1]


def test_logout_revokes_token(client, db):
    reg = client.post(f"{API}/auth/register", json=REGISTER)
    raw = _raw_refresh_token(reg)
    r = client.post(f"{API}/auth/logout", headers={"Authorization": f"Bearer {reg.json()['token']}"})
    assert r.status_code == 200
    assert r.json()["revoked"] is True

    db.expire_all()
    assert db.query(RefreshToken).filter(RefreshToken.is_revoked.is_(False)).count() == 0
    assert client.post(f"{API}/auth/refresh-token").status_code == 401

    # a copied cookie no longer works either
    with pytest.raises(AuthError) as exc:
        token_service.refresh_access_token(db, raw)
    assert exc.value.code == "INVALID_REFRESH_TOKEN"


def test_logout_signs_out_every_session(client, db, guest):
    token_service.issue_refresh_token(db, guest.id, user_agent="phone")
    token_service.issue_refresh_token(db, guest.id, user_agent="laptop")
    r = client.post(f"{API}/auth/logout", headers=auth_headers(guest))
    assert r.json()["sessions"] == 2

    db.expire_all()
    assert db.query(RefreshToken).filter(RefreshToken.is_revoked.is_(False)).count() == 0


def test_logout_requires_access_token(client, db):
    client.post(f"{API}/auth/register", json=REGISTER)
    assert client.post(f"{API}/auth/logout").status_code == 401


def test_end_session_uses_the_scoped_cookie(client, db):
    reg = client.post(f"{API}/auth/register", json=REGISTER)
    raw = _raw_refresh_token(reg)
    other = token_service.issue_refresh_token(db, reg.json()["user"]["id"], user_agent="other device")

    r = client.delete(f"{API}/auth/refresh-token")
    assert r.status_code == 200
    assert r.json()["revoked"] is True
    cleared = _refresh_cookie_header(r).lower()
    assert "path=/api/v1/auth/refresh-token" in cleared
    assert "max-age=0" in cleared

    db.expire_all()
    assert token_service.find_refresh_token(db, raw).is_revoked is True
    # only this browser's session ends
    assert token_service.find_refresh_token(db, other).is_revoked is False
    assert client.post(f"{API}/auth/refresh-token").status_code == 401


def test_me_requires_token(client, db):
    r = client.get(f"{API}/auth/me")
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_me_rejects_garbage_token(client, db):
    r = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert r.status_code == 401


def test_update_profile(client, db, guest):
    r = client.put(f"{API}/auth/profile", json={"name": "Ana Maria", "phone": "+63 911"},
                   headers=auth_headers(guest))
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Ana Maria"
    assert r.json()["data"]["phone"] == "+63 911"


def test_update_profile_email_taken(client, db, guest):
    make_user(db, email="other@example.com")
    r = client.put(f"{API}/auth/profile", json={"email": "other@example.com"}, headers=auth_headers(guest))
    assert r.status_code == 400
    assert r.json()["code"] == "USER_EXISTS"
