"""FastAPI dependencies wiring settings, the database and services together."""

from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from config import Settings, get_settings
from database import get_db
from errors import AuthenticationError
from identity import IdentityService
from profiles import ProfileService
from security import PasswordHasher, TokenSigner

bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


def get_token_signer(settings: Settings = Depends(get_settings)) -> TokenSigner:
    return TokenSigner(settings.jwt_secret, settings.jwt_algorithm, settings.token_expire_seconds)


def get_identity_service(
    db: Database = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
) -> IdentityService:
    return IdentityService(db, hasher, signer)


def get_profile_service(db: Database = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_auth_token: Optional[str] = Header(None),
    identity: IdentityService = Depends(get_identity_service),
) -> str:
    """
    Resolve the caller's user id from the access token.

    The token is read from ``Authorization: Bearer`` first, then from the
    ``x-auth-token`` header. Tokens of deleted users are rejected.
    """
    token = (credentials.credentials if credentials else None) or x_auth_token
    if not token:
        raise AuthenticationError("No token, authorization denied")

    user_id = identity.resolve_identity(token)
    if user_id is None:
        raise AuthenticationError("Token is not valid")
    return user_id
