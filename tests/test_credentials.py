from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from quill.models.user import Role
from quill.services.credentials import (
    CredentialService,
    ExpiredToken,
    InvalidToken,
    hash_password,
    verify_password,
)


def test_hash_is_salted_and_verifies():
    first = hash_password("secret1")
    second = hash_password("secret1")

    assert first != second
    assert first != "secret1"
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)
    assert not verify_password("secret2", first)


def test_verify_rejects_non_bcrypt_hash():
    assert not verify_password("secret1", "plain-text")


def test_issued_token_round_trips():
    service = CredentialService(secret_key="k")

    claims = service.verify(service.issue(42, Role.ADMIN))

    assert claims.user_id == 42
    assert claims.role is Role.ADMIN


def test_token_payload_carries_user_role_and_expiry():
    service = CredentialService(secret_key="k")

    payload = jwt.get_unverified_claims(service.issue(7, Role.USER))

    assert payload["userId"] == 7
    assert payload["role"] == "USER"
    assert "exp" in payload


def test_token_signed_with_other_secret_is_invalid():
    token = CredentialService(secret_key="other").issue(1, Role.USER)

    with pytest.raises(InvalidToken):
        CredentialService(secret_key="k").verify(token)


def test_tampered_token_is_invalid():
    service = CredentialService(secret_key="k")
    header, payload, signature = service.issue(1, Role.USER).split(".")
    forged = jwt.encode({"userId": 1, "role": "ADMIN"}, "guess").split(".")[1]

    with pytest.raises(InvalidToken):
        service.verify(".".join([header, forged, signature]))


def test_expired_token():
    service = CredentialService(secret_key="k", expire_minutes=-1)

    with pytest.raises(ExpiredToken):
        service.verify(service.issue(1, Role.USER))


@pytest.mark.parametrize("claims", [
    {"role": "USER"},
    {"userId": "1", "role": "USER"},
    {"userId": 1},
    {"userId": 1, "role": "ROOT"},
])
def test_missing_or_bad_claims_are_invalid(claims):
    claims = dict(claims, exp=datetime.now(timezone.utc) + timedelta(hours=1))
    token = jwt.encode(claims, "k", algorithm="HS256")

    with pytest.raises(InvalidToken):
        CredentialService(secret_key="k").verify(token)


def test_token_without_expiry_is_invalid():
    token = jwt.encode({"userId": 1, "role": "USER"}, "k", algorithm="HS256")

    with pytest.raises(InvalidToken):
        CredentialService(secret_key="k").verify(token)


def test_garbage_token_is_invalid():
    with pytest.raises(InvalidToken):
        CredentialService(secret_key="k").verify("not-a-jwt")
