"""Login and current-user lookup."""

from fastapi import APIRouter, Depends

from dependencies import get_current_identity, get_identity_service
from errors import AuthenticationError
from identity import IdentityService, serialize_user
from schemas import LoginPayload, TokenResponse, UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("", response_model=UserResponse)
def me(user_id: str = Depends(get_current_identity), identity: IdentityService = Depends(get_identity_service)):
    user = identity.get_user(user_id)
    if user is None:
        raise AuthenticationError()
    return serialize_user(user)


@router.post("", response_model=TokenResponse)
def login(payload: LoginPayload, identity: IdentityService = Depends(get_identity_service)):
    token = identity.authenticate(str(payload.email), payload.password)
    return {"token": token}
