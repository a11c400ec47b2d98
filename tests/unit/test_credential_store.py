"""Unit tests for password hashing and credential checks"""

import asyncio
import threading
from types import SimpleNamespace

import pytest

from crime_records.core import credential_store
from crime_records.core.credential_store import (
    MAX_PASSWORD_BYTES,
    CredentialStore,
    hash_password,
    verify_password,
)
from crime_records.core.exceptions import ValidationFailed


@pytest.mark.unit
class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("correct-horse")
        assert hashed != "correct-horse"
        assert hashed.startswith("$2")

    def test_salted(self):
        assert hash_password("correct-horse") != hash_password("correct-horse")

    def test_verify(self):
        hashed = hash_password("correct-horse")
        assert verify_password("correct-horse", hashed) is True
        assert verify_password("battery-staple", hashed) is False

    def test_verify_against_garbage_hash(self):
        assert verify_password("correct-horse", "not-a-bcrypt-hash") is False

    def test_overlong_password_rejected(self):
        with pytest.raises(ValidationFailed) as exc_info:
            hash_password("x" * (MAX_PASSWORD_BYTES + 1))
        assert "password" in exc_info.value.errors


def _authenticate_recording_threads(monkeypatch, user):
    """Run authenticate on a fresh loop, returning (result, loop thread, bcrypt threads)"""
    bcrypt_threads = []
    real_verify = credential_store.verify_password

    def recording_verify(plaintext, hashed):
        bcrypt_threads.append(threading.get_ident())
        return real_verify(plaintext, hashed)

    monkeypatch.setattr(credential_store, "verify_password", recording_verify)

    store = CredentialStore()

    async def lookup(db, badge_id):
        return user

    monkeypatch.setattr(store, "find_by_badge_id", lookup)

    async def run():
        result = await store.authenticate(None, "OFFICER123", "correct-horse")
        return result, threading.get_ident()

    result, loop_thread = asyncio.run(run())
    return result, loop_thread, bcrypt_threads


@pytest.mark.unit
class TestAuthenticateOffLoop:
    """bcrypt work never runs on the event loop thread"""

    def test_known_user(self, monkeypatch):
        user = SimpleNamespace(password=hash_password("correct-horse"))
        result, loop_thread, bcrypt_threads = _authenticate_recording_threads(monkeypatch, user)

        assert result is user
        assert len(bcrypt_threads) == 1
        assert bcrypt_threads[0] != loop_thread

    def test_unknown_user(self, monkeypatch):
        result, loop_thread, bcrypt_threads = _authenticate_recording_threads(monkeypatch, None)

        assert result is None
        assert len(bcrypt_threads) == 1
        assert bcrypt_threads[0] != loop_thread
