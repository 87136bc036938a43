"""Password hashing, access tokens and avatar URLs."""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import jwt
from passlib.context import CryptContext

GRAVATAR_BASE_URL = "https://www.gravatar.com/avatar/"


class PasswordHasher:
    """Salted bcrypt hashing; the cost factor comes from settings."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain: str, hashed: str) -> bool:
        if not hashed:
            return False
        return self._context.verify(plain, hashed)


class TokenSigner:
    """Issues and checks signed, time-limited bearer tokens carrying a user id."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_seconds: int = 360000):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_delta = timedelta(seconds=expires_seconds)

    def issue(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or self.expires_delta)
        return jwt.encode({"sub": user_id, "exp": expire}, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """Return the token claims; raises jwt.PyJWTError when invalid or expired."""
        return jwt.decode(token, self.secret, algorithms=[self.algorithm])

    def subject(self, token: str) -> Optional[str]:
        try:
            payload = self.decode(token)
        except jwt.PyJWTError:
            return None
        return payload.get("sub")


def gravatar_url(email: str, size: int = 200, rating: str = "pg", default: str = "mm") -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return GRAVATAR_BASE_URL + digest + "?" + urlencode({"s": size, "r": rating, "d": default})
