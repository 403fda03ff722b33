"""
Tests for the token blacklist service and token management routes
"""
from datetime import datetime, timedelta

from jose import jwt

from app.core.security import create_token
from app.models.token_blacklist import BlacklistedToken
from app.services.token_blacklist_service import (DEFAULT_BLACKLIST_TTL,
                                                  TokenBlacklistService,
                                                  hash_token)


def add_entry(db, token_hash, expires_at, reason="logout", user_id=None):
    entry = BlacklistedToken(
        token_hash=token_hash,
        user_id=user_id,
        reason=reason,
        expires_at=expires_at,
        blacklisted_at=datetime.utcnow(),
    )
    db.add(entry)
    db.commit()
    return entry


def test_hash_token_is_sha256_hex():
    digest = hash_token("abc")
    assert len(digest) == 64
    assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_blacklist_token_uses_exp_claim(db, make_user):
    user = make_user()
    token = create_token(user)
    exp = jwt.get_unverified_claims(token)["exp"]

    entry = TokenBlacklistService(db).blacklist_token(token, user.id)

    assert entry.expires_at == datetime.utcfromtimestamp(exp)
    assert entry.reason == "logout"
    assert TokenBlacklistService(db).is_token_blacklisted(token)


def test_blacklist_undecodable_token_defaults_to_24h(db):
    before = datetime.utcnow()
    entry = TokenBlacklistService(db).blacklist_token("not-a-jwt")
    assert before + DEFAULT_BLACKLIST_TTL <= entry.expires_at <= datetime.utcnow() + DEFAULT_BLACKLIST_TTL


def test_blacklist_is_idempotent(db, make_user):
    user = make_user()
    token = create_token(user)
    service = TokenBlacklistService(db)

    first = service.blacklist_token(token, user.id)
    second = service.blacklist_token(token, user.id, reason="logout_all")

    assert first.id == second.id
    assert db.query(BlacklistedToken).count() == 1


def test_expired_entry_is_not_blacklisted(db):
    add_entry(db, hash_token("old-token"), datetime.utcnow() - timedelta(minutes=1))
    assert not TokenBlacklistService(db).is_token_blacklisted("old-token")


def test_cleanup_respects_grace_period(db):
    now = datetime.utcnow()
    add_entry(db, hash_token("ancient"), now - timedelta(days=45))
    add_entry(db, hash_token("recent"), now - timedelta(days=2))
    add_entry(db, hash_token("active"), now + timedelta(hours=1))
    service = TokenBlacklistService(db)

    assert service.cleanup_expired_tokens() == 1
    assert service.get_blacklist_stats() == {"total": 2, "expired": 1, "active": 1}

    assert service.cleanup_all_expired_tokens() == 1
    assert service.get_blacklist_stats() == {"total": 1, "expired": 0, "active": 1}


def test_blacklist_all_user_tokens_stamps_logout(db, make_user):
    user = make_user()
    stamped = TokenBlacklistService(db).blacklist_all_user_tokens(user.id)
    db.refresh(user)
    assert user.last_logout_at == stamped


def test_history_and_user_stats(db, make_user):
    user = make_user()
    now = datetime.utcnow()
    add_entry(db, hash_token("a"), now + timedelta(hours=1), user_id=user.id)
    add_entry(db, hash_token("b"), now - timedelta(hours=1), reason="logout_all", user_id=user.id)
    service = TokenBlacklistService(db)

    history = service.get_blacklist_history(days=7)
    assert len(history) == 2
    assert {item["status"] for item in history} == {"active", "expired"}

    stats = service.get_blacklist_stats_by_user(user.id)
    assert stats == {"total": 2, "active": 1, "expired": 1, "reasons": {"logout": 1, "logout_all": 1}}


def test_health_warns_when_expired_dominates(db):
    now = datetime.utcnow()
    for i in range(3):
        add_entry(db, hash_token(f"expired-{i}"), now - timedelta(hours=1))

    health = TokenBlacklistService(db).check_health()

    assert health["status"] == "warning"
    assert health["stats"]["expired"] == 3
    assert health["recommendations"]


def test_health_empty_blacklist_is_healthy(db):
    health = TokenBlacklistService(db).check_health()
    assert health["status"] == "healthy"
    assert health["recommendations"] == []


def test_token_management_routes(client, make_user, auth_headers):
    user = make_user()

    response = client.get("/api/v1/token-management/blacklist/stats", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json() == {"total": 0, "expired": 0, "active": 0}

    response = client.post("/api/v1/token-management/blacklist/cleanup", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["deleted"] == 0


def test_admin_routes(client, db, make_user, auth_headers):
    user = make_user()
    add_entry(db, hash_token("t"), datetime.utcnow() + timedelta(hours=1), user_id=user.id)
    headers = auth_headers(user)

    response = client.get("/api/v1/admin/tokens/blacklist/stats", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["stats"]["active"] == 1
    assert set(body["schedules"]) == {"every_6_hours", "daily_midnight"}

    response = client.get(f"/api/v1/admin/tokens/blacklist/user/{user.id}", headers=headers)
    assert response.json()["total"] == 1

    response = client.get("/api/v1/admin/tokens/blacklist/health", headers=headers)
    assert response.json()["status"] == "healthy"

    response = client.get("/api/v1/admin/tokens/blacklist/history?days=0", headers=headers)
    assert response.status_code == 400
