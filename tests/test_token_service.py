"""Refresh token lifecycle."""
from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from app.core import errors
from app.core.clock import as_utc, utcnow
from app.core.errors import AuthError
from app.core.security import decode_token, hash_refresh_token
from app.models.refresh_token import RefreshToken
from app.services import token_service

from conftest import make_user


def _row(db: Session, raw: str) -> RefreshToken:
    db.expire_all()
    return token_service.find_refresh_token(db, raw)


class TestIssue:
    def test_persists_hashed_token_with_expiry(self, db: Session, guest):
        fixed = utcnow()
        raw = token_service.issue_refresh_token(db, guest.id, "pytest-agent", "10.0.0.1", now=lambda: fixed)

        assert len(raw) == 80  # 40 random bytes, hex encoded
        row = _row(db, raw)
        assert row.token_hash == hash_refresh_token(raw)
        assert row.token_hash != raw
        assert row.is_revoked is False
        assert row.user_agent == "pytest-agent"
        assert row.ip_address == "10.0.0.1"
        assert as_utc(row.expires_at) == fixed + timedelta(days=30)

    def test_tokens_are_unique(self, db: Session, guest):
        a = token_service.issue_refresh_token(db, guest.id)
        b = token_service.issue_refresh_token(db, guest.id)
        assert a != b


class TestRefresh:
    def test_round_trip_without_rotation(self, db: Session, guest):
        raw = token_service.issue_refresh_token(db, guest.id)

        access, user = token_service.refresh_access_token(db, raw)
        assert user.id == guest.id
        assert decode_token(access)["id"] == guest.id

        # same refresh token keeps working
        again, _ = token_service.refresh_access_token(db, raw)
        assert decode_token(again)["id"] == guest.id
        assert _row(db, raw).is_revoked is False

    def test_missing_token(self, db: Session):
        with pytest.raises(AuthError) as exc:
            token_service.refresh_access_token(db, None)
        assert exc.value.code == errors.REFRESH_TOKEN_MISSING

    def test_garbage_token_is_invalid_and_changes_nothing(self, db: Session, guest):
        raw = token_service.issue_refresh_token(db, guest.id)

        with pytest.raises(AuthError) as exc:
            token_service.refresh_access_token(db, "not-a-real-token")
        assert exc.value.code == errors.INVALID_REFRESH_TOKEN

        assert db.query(RefreshToken).count() == 1
        assert _row(db, raw).is_revoked is False

    def test_expired_token_is_revoked_on_use(self, db: Session, guest):
        raw = token_service.issue_refresh_token(db, guest.id, now=lambda: utcnow() - timedelta(days=31))

        with pytest.raises(AuthError) as exc:
            token_service.refresh_access_token(db, raw)
        assert exc.value.code == errors.REFRESH_TOKEN_EXPIRED
        assert _row(db, raw).is_revoked is True

        # once revoked it reads as invalid
        with pytest.raises(AuthError) as exc:
            token_service.refresh_access_token(db, raw)
        assert exc.value.code == errors.INVALID_REFRESH_TOKEN

    def test_injected_clock_drives_expiry(self, db: Session, guest):
        raw = token_service.issue_refresh_token(db, guest.id)
        later = lambda: utcnow() + timedelta(days=31)  # noqa: E731

        with pytest.raises(AuthError) as exc:
            token_service.refresh_access_token(db, raw, now=later)
        assert exc.value.code == errors.REFRESH_TOKEN_EXPIRED

    def test_revoked_token_is_invalid(self, db: Session, guest):
        raw = token_service.issue_refresh_token(db, guest.id)
        assert token_service.revoke_refresh_token(db, raw) is True

        with pytest.raises(AuthError) as exc:
            token_service.refresh_access_token(db, raw)
        assert exc.value.code == errors.INVALID_REFRESH_TOKEN

    def test_deleted_user(self, db: Session):
        ghost = make_user(db, email="ghost@example.com")
        raw = token_service.issue_refresh_token(db, ghost.id)
        db.delete(ghost)
        db.commit()

        with pytest.raises(AuthError) as exc:
            token_service.refresh_access_token(db, raw)
        assert exc.value.code == errors.USER_NOT_FOUND

    def test_deactivated_user(self, db: Session, guest):
        raw = token_service.issue_refresh_token(db, guest.id)
        guest.is_active = False
        db.commit()

        with pytest.raises(AuthError) as exc:
            token_service.refresh_access_token(db, raw)
        assert exc.value.code == errors.USER_NOT_FOUND


class TestRevokeAndPurge:
    def test_revoke_user_tokens(self, db: Session, guest):
        raws = [token_service.issue_refresh_token(db, guest.id) for _ in range(3)]
        assert token_service.revoke_user_tokens(db, guest.id) == 3
        assert all(_row(db, r).is_revoked for r in raws)

    def test_revoke_unknown_token(self, db: Session):
        assert token_service.revoke_refresh_token(db, "nope") is False
        assert token_service.revoke_refresh_token(db, None) is False

    def test_purge_removes_only_expired(self, db: Session, guest):
        stale = token_service.issue_refresh_token(db, guest.id, now=lambda: utcnow() - timedelta(days=40))
        fresh = token_service.issue_refresh_token(db, guest.id)

        assert token_service.purge_expired(db) == 1
        assert _row(db, stale) is None
        assert _row(db, fresh) is not None
