"""
Tests for sign-in, OTP flows, logout and the token guard
"""
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from app.core.errors import UnauthorizedError
from app.core.security import REFRESH_TOKEN, create_token, verify_password
from app.models.profile import AttemptLog
from app.services.auth_service import AuthService, OtpType, generate_otp
from app.services.email_service import EmailTemplate
from conftest import TEST_PASSWORD


@pytest.fixture
def mailer():
    return MagicMock()


def test_generate_otp_is_zero_padded_digits():
    for _ in range(20):
        code = generate_otp(6)
        assert len(code) == 6
        assert code.isdigit()


def test_sign_in_success_records_attempt(db, make_user):
    user = make_user()
    tokens = AuthService(db).sign_in(user.email, TEST_PASSWORD, "10.0.0.1")

    assert set(tokens) == {"token", "refresh_token"}
    attempt = db.query(AttemptLog).filter(AttemptLog.user_id == user.id).one()
    assert attempt.success is True
    assert attempt.ip_address == "10.0.0.1"


def test_sign_in_wrong_password(db, make_user):
    user = make_user()
    with pytest.raises(UnauthorizedError) as exc:
        AuthService(db).sign_in(user.email, "Wrong!Pass1")
    assert exc.value.message == "Invalid credentials"
    assert db.query(AttemptLog).filter(AttemptLog.success.is_(False)).count() == 1


def test_sign_in_unknown_email(db):
    with pytest.raises(UnauthorizedError):
        AuthService(db).sign_in("nobody@venturelink.io", TEST_PASSWORD)
    assert db.query(AttemptLog).count() == 0


def test_sign_in_unverified(db, make_user):
    user = make_user(is_email_verified=False)
    with pytest.raises(UnauthorizedError):
        AuthService(db).sign_in(user.email, TEST_PASSWORD)


def test_refresh_token_requires_refresh_type(db, make_user):
    user = make_user()
    service = AuthService(db)

    with pytest.raises(UnauthorizedError):
        service.refresh_token(create_token(user))

    refreshed = service.refresh_token(create_token(user, REFRESH_TOKEN))
    assert refreshed["token"]


def test_verify_otp_flow(db, make_user, mailer):
    user = make_user(is_email_verified=False)
    service = AuthService(db, email_service=mailer)
    service.resend_otp(user.email, OtpType.VERIFY)

    db.refresh(user)
    code = user.otp_code
    mailer.send_otp.assert_called_once_with(user.email, user.name, code, EmailTemplate.VERIFY_ACCOUNT)

    with pytest.raises(UnauthorizedError):
        service.verify_otp(user.email, "0000" if code != "0000" else "1111")

    result = service.verify_otp(user.email, code)
    db.refresh(user)
    assert result["message"] == "Email verified successfully"
    assert user.is_email_verified is True
    assert user.otp_code is None


def test_verify_expired_otp(db, make_user):
    user = make_user(is_email_verified=False, otp_code="1234",
                     otp_code_expires_at=datetime.utcnow() - timedelta(minutes=1))
    with pytest.raises(UnauthorizedError) as exc:
        AuthService(db).verify_otp(user.email, "1234")
    assert "expired" in exc.value.message


def test_verify_already_verified(db, make_user):
    user = make_user(otp_code="1234", otp_code_expires_at=datetime.utcnow() + timedelta(minutes=5))
    with pytest.raises(UnauthorizedError):
        AuthService(db).verify_otp(user.email, "1234", OtpType.VERIFY)


def test_forget_and_reset_password(db, make_user, mailer):
    user = make_user()
    service = AuthService(db, email_service=mailer)

    service.forget_password(user.email)
    db.refresh(user)
    assert user.otp_code is not None
    assert mailer.send_otp.call_args[0][3] == EmailTemplate.RESET_PASSWORD

    service.verify_otp(user.email, user.otp_code, OtpType.RESET)
    service.reset_password(user.email, "N3w!Password")
    db.refresh(user)
    assert verify_password("N3w!Password", user.password)
    assert user.otp_code is None


def test_forget_password_unknown_user(db):
    with pytest.raises(UnauthorizedError):
        AuthService(db).forget_password("ghost@venturelink.io")


def test_sign_in_route(client, make_user):
    user = make_user()
    response = client.post("/api/v1/auth/sign-in", json={"email": user.email, "password": TEST_PASSWORD})
    assert response.status_code == 200
    assert response.json()["token"]

    response = client.post("/api/v1/auth/sign-in", json={"email": user.email, "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"statusCode": 401, "message": "Invalid credentials", "error": "Unauthorized"}


def test_token_guard_messages(client, make_user, auth_headers):
    response = client.get("/api/v1/discussion/my-discussions")
    assert response.status_code == 401
    assert response.json()["message"] == "Access token is required"

    response = client.get("/api/v1/discussion/my-discussions", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_logout_revokes_token(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)

    response = client.post("/api/v1/auth/logout", headers=headers)
    assert response.status_code == 200
    assert response.json()["logout_from_all_devices"] is False

    response = client.get("/api/v1/discussion/my-discussions", headers=headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Token has been revoked"


def test_logout_all_devices_rejects_older_tokens(client, db, make_user, auth_headers):
    user = make_user()
    other_device = auth_headers(user)
    current = auth_headers(user)

    response = client.post("/api/v1/auth/logout", headers=current, json={"logout_from_all_devices": True})
    assert response.status_code == 200

    response = client.get("/api/v1/discussion/my-discussions", headers=other_device)
    assert response.status_code == 401
    assert response.json()["message"] == "Token was issued before last logout"

    # A token signed after the logout is accepted
    response = client.get("/api/v1/discussion/my-discussions", headers=auth_headers(user))
    assert response.status_code == 200


def test_refresh_token_is_not_an_access_token(client, make_user, auth_headers):
    user = make_user()

    response = client.get("/api/v1/discussion/my-discussions", headers=auth_headers(user, REFRESH_TOKEN))

    assert response.status_code == 401
    assert response.json()["message"] == "Refresh tokens cannot be used as access tokens"


def test_validate_token_route(client, make_user, auth_headers):
    user = make_user()
    response = client.get("/api/v1/auth/validate-token", headers=auth_headers(user))
    body = response.json()
    assert body["valid"] is True
    assert body["user_id"] == str(user.id)

    response = client.get("/api/v1/auth/validate-token")
    assert response.json()["valid"] is False


def test_verify_otp_route_rejects_bad_type(client, make_user):
    user = make_user()
    response = client.post("/api/v1/auth/verify-otp", json={"email": user.email, "otp_code": "1234", "type": "other"})
    assert response.status_code == 400
