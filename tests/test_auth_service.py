from datetime import timedelta

from whisperbox.services.auth import (
    Principal,
    create_access_token,
    hash_password,
    verify_password,
    verify_token,
)


PRINCIPAL = Principal(id=7, username="alice", is_verified=True, is_accepting_messages=False)


def test_password_hash_round_trip():
    hashed = hash_password("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_malformed_hash_does_not_verify():
    assert not verify_password("secret1", "not-a-bcrypt-hash")


def test_token_carries_principal():
    token = create_access_token(PRINCIPAL)
    assert verify_token(token) == PRINCIPAL


def test_expired_token_is_rejected():
    token = create_access_token(PRINCIPAL, expires_delta=timedelta(seconds=-10))
    assert verify_token(token) is None


def test_tampered_token_is_rejected():
    header, _, signature = create_access_token(PRINCIPAL).split(".")
    other = Principal(id=8, username="mallory", is_verified=True, is_accepting_messages=True)
    forged_payload = create_access_token(other).split(".")[1]
    assert verify_token(f"{header}.{forged_payload}.{signature}") is None


def test_claims_missing_fields():
    assert Principal.from_claims({"sub": "1"}) is None
    assert Principal.from_claims({"sub": "x", "username": "a", "is_verified": True,
                                  "is_accepting_messages": True}) is None
