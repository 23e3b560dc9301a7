import pytest

from config import settings
from errors import Conflict, Expired, NotFound, Unauthorized, ValidationError
from services import auth as auth_service


@pytest.fixture
def user(store):
    return auth_service.sign_up(store, {
        "name": "Asha Rao",
        "email": "a@x.com",
        "phone": "9999999999",
        "addressLine1": "12 MG Road",
        "district": "Bengaluru Urban",
        "state": "Karnataka",
        "pincode": "560001",
        "password": "secret1",
    })


def _issue_otp(store, email="a@x.com"):
    auth_service.request_password_reset(store, email)
    return store.load("otps")[-1]


def test_signup_returns_public_fields(user):
    assert set(user) == {"id", "name", "email"}
    assert user["id"].startswith("user-")


def test_password_is_stored_hashed(store, user):
    stored = store.find("users", id=user["id"])
    assert "password" not in stored
    assert stored["passwordHash"] != "secret1"


def test_duplicate_email_conflicts(store, user):
    with pytest.raises(Conflict):
        auth_service.sign_up(store, {"name": "Other", "email": "A@X.com ", "password": "pw1234"})


def test_signup_requires_name_email_password(store):
    with pytest.raises(ValidationError):
        auth_service.sign_up(store, {"name": "Asha", "email": "a@x.com"})


def test_login(store, user):
    assert auth_service.login(store, "a@x.com", "secret1")["id"] == user["id"]

    with pytest.raises(Unauthorized):
        auth_service.login(store, "a@x.com", "wrong")
    with pytest.raises(Unauthorized):
        auth_service.login(store, "nobody@x.com", "secret1")
    with pytest.raises(ValidationError):
        auth_service.login(store, "a@x.com", "")


def test_legacy_plaintext_password_is_upgraded(store):
    store.save("users", [{"id": "user-old", "name": "Old", "email": "old@x.com", "password": "legacy1"}])

    assert auth_service.login(store, "old@x.com", "legacy1")["id"] == "user-old"

    stored = store.find("users", id="user-old")
    assert "password" not in stored
    assert auth_service.login(store, "old@x.com", "legacy1")["id"] == "user-old"


def test_user_info_has_no_credentials(store, user):
    profile = auth_service.get_user_info(store, user["id"])

    assert profile["pincode"] == "560001"
    assert "passwordHash" not in profile
    with pytest.raises(NotFound):
        auth_service.get_user_info(store, "user-missing")


def test_otp_is_six_digits_with_ten_minute_expiry(store, user):
    record = _issue_otp(store)

    assert len(record["otp"]) == 6 and record["otp"].isdigit()
    assert record["expiresAt"] - record["createdAt"] == 10 * 60 * 1000


def test_reset_request_for_unknown_email(store):
    with pytest.raises(NotFound):
        auth_service.request_password_reset(store, "ghost@x.com")


def test_full_reset_flow(store, user):
    record = _issue_otp(store)

    token = auth_service.verify_otp(store, "a@x.com", record["otp"])
    auth_service.reset_password(store, "a@x.com", token, "newsecret")

    assert store.load("otps") == []
    assert auth_service.login(store, "a@x.com", "newsecret")["id"] == user["id"]
    with pytest.raises(Unauthorized):
        auth_service.login(store, "a@x.com", "secret1")


def test_wrong_code_is_invalid(store, user):
    record = _issue_otp(store)
    wrong = "000000" if record["otp"] != "000000" else "111111"

    with pytest.raises(Unauthorized) as excinfo:
        auth_service.verify_otp(store, "a@x.com", wrong)
    assert excinfo.type is Unauthorized
    assert len(store.load("otps")) == 1


def test_expired_code_is_reported_then_removed(store, user):
    record = _issue_otp(store)
    with store.update("otps") as otps:
        otps[0]["expiresAt"] = otps[0]["createdAt"] - 1

    with pytest.raises(Expired):
        auth_service.verify_otp(store, "a@x.com", record["otp"])
    assert store.load("otps") == []

    # The record is gone, so the same code is now just invalid
    with pytest.raises(Unauthorized) as excinfo:
        auth_service.verify_otp(store, "a@x.com", record["otp"])
    assert excinfo.type is Unauthorized


def test_reset_token_is_single_use(store, user):
    token = auth_service.verify_otp(store, "a@x.com", _issue_otp(store)["otp"])
    auth_service.reset_password(store, "a@x.com", token, "newsecret")

    with pytest.raises(Unauthorized):
        auth_service.reset_password(store, "a@x.com", token, "another1")


def test_reset_token_is_bound_to_email(store, user):
    auth_service.sign_up(store, {"name": "Ravi", "email": "b@x.com", "password": "ravi123"})
    token = auth_service.verify_otp(store, "a@x.com", _issue_otp(store)["otp"])

    with pytest.raises(Unauthorized):
        auth_service.reset_password(store, "b@x.com", token, "hijacked")


def test_reset_rejects_forged_token(store, user):
    with pytest.raises(Unauthorized):
        auth_service.reset_password(store, "a@x.com", "reset-1700000000000-a@x.com", "newsecret")


def test_reset_checks_password_length_first(store, user):
    with pytest.raises(ValidationError):
        auth_service.reset_password(store, "a@x.com", "not-even-a-token", "abc")


def test_minimum_password_length_is_configurable(store, user, monkeypatch):
    monkeypatch.setattr(settings, "MIN_PASSWORD_LENGTH", 10)
    token = auth_service.verify_otp(store, "a@x.com", _issue_otp(store)["otp"])

    with pytest.raises(ValidationError):
        auth_service.reset_password(store, "a@x.com", token, "ninechars")
