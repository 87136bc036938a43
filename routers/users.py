"""User registration."""

from fastapi import APIRouter, Depends

from dependencies import get_identity_service
from identity import IdentityService
from schemas import RegisterPayload, TokenResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=TokenResponse)
def register(payload: RegisterPayload, identity: IdentityService = Depends(get_identity_service)):
    token = identity.register(payload.name, str(payload.email), payload.password)
    return {"token": token}
