"""Password hashing and bearer token tests."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from commute_api.exceptions import AuthenticationError
from commute_api.security import PasswordHasher, TokenSigner

SECRET = "unit-test-secret"


class TestPasswordHasher:

    def setup_method(self):
        self.hasher = PasswordHasher()

    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = self.hasher.hash("s3cret!")
        assert hashed != "s3cret!"
        assert hashed.startswith("$argon2")
        assert self.hasher.verify("s3cret!", hashed)

    def test_wrong_password(self):
        hashed = self.hasher.hash("s3cret!")
        assert not self.hasher.verify("guess", hashed)

    def test_garbage_hash_is_a_mismatch(self):
        assert not self.hasher.verify("s3cret!", "not-a-hash")
        assert not self.hasher.verify("s3cret!", None)


class TestTokenSigner:

    def setup_method(self):
        self.signer = TokenSigner(secret=SECRET, algorithm="HS256", expire_minutes=60)

    def test_round_trip_carries_user_id(self):
        token = self.signer.issue("a" * 24)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["id"] == "a" * 24
        assert "exp" in payload
        assert self.signer.decode(token) == "a" * 24

    def test_tampered_token(self):
        token = self.signer.issue("a" * 24)
        other = TokenSigner(secret="someone-else", algorithm="HS256")
        with pytest.raises(AuthenticationError, match="Invalid token"):
            other.decode(token)

    def test_expired_token(self):
        expired = jwt.encode(
            {"id": "a" * 24, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError, match="Invalid token"):
            self.signer.decode(expired)

    def test_token_without_id(self):
        token = jwt.encode({"sub": "x"}, SECRET, algorithm="HS256")
        with pytest.raises(AuthenticationError, match="Invalid token"):
            self.signer.decode(token)
