"""Unit tests for password hashing and token helpers."""

from datetime import timedelta

import pytest

from utils.security import (
    hash_password,
    verify_password,
    create_token,
    decode_token,
    TokenError,
)

SECRET = "unit-test-secret-that-is-32-bytes-plus"


def test_password_hash_is_salted_and_verifiable():
    first = hash_password("p1")
    second = hash_password("p1")

    assert first != second
    assert verify_password("p1", first)
    assert not verify_password("p2", first)


def test_verify_against_garbage_hash_is_false():
    assert verify_password("p1", "not-a-hash") is False


def test_token_round_trip_keeps_claims():
    token = create_token("user-1", "access", SECRET, timedelta(minutes=5), claims={"username": "amy"})

    decoded = decode_token(token, SECRET, expected_type="access")

    assert decoded["sub"] == "user-1"
    assert decoded["username"] == "amy"
    assert decoded["type"] == "access"


def test_tokens_minted_together_differ():
    a = create_token("user-1", "refresh", SECRET, timedelta(days=1))
    b = create_token("user-1", "refresh", SECRET, timedelta(days=1))

    assert a != b


def test_expired_token_rejected():
    token = create_token("user-1", "access", SECRET, timedelta(seconds=-10))

    with pytest.raises(TokenError, match="expired"):
        decode_token(token, SECRET)


def test_wrong_type_rejected():
    token = create_token("user-1", "refresh", SECRET, timedelta(minutes=5))

    with pytest.raises(TokenError, match="Wrong token type"):
        decode_token(token, SECRET, expected_type="access")


def test_wrong_secret_rejected():
    token = create_token("user-1", "access", SECRET, timedelta(minutes=5))

    with pytest.raises(TokenError):
        decode_token(token, "another-secret-that-is-32-bytes-plus")
