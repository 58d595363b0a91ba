"""
Commute Match Backend — Credential Hashing & Token Signing
===========================================================

What:  The two collaborators UserService receives for authentication:
       PasswordHasher (argon2) and TokenSigner (HS256 JWT).
Who:   Built by `commute_api.dependencies`; TokenSigner.decode is also used
       by the bearer-token dependency.

Token Format:
    {"id": "<24-hex user id>", "exp": <unix seconds>}
    Signed with settings.jwt_secret; default lifetime one day.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher as Argon2Hasher
from argon2 import exceptions as argon_exc

from commute_api.config import settings
from commute_api.exceptions import AuthenticationError


class PasswordHasher:
    """argon2id hashing with default cost parameters."""

    def __init__(self):
        self._hasher = Argon2Hasher()

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, password: str, hashed: Optional[str]) -> bool:
        if not hashed:
            return False
        try:
            return self._hasher.verify(hashed, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False


class TokenSigner:
    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self._secret = secret or settings.jwt_secret
        self._algorithm = algorithm or settings.jwt_algorithm
        self._expire_minutes = expire_minutes or settings.jwt_expire_minutes

    def issue(self, user_id: str) -> str:
        expires = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)
        return jwt.encode({"id": user_id, "exp": expires}, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> str:
        """
        Return the user id carried by `token`.

        Raises:
            AuthenticationError: signature, expiry or payload is invalid
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError as e:
            raise AuthenticationError(
                message="Invalid token",
                context={"reason": type(e).__name__},
            ) from e

        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise AuthenticationError(message="Invalid token")
        return user_id
