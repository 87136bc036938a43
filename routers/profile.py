"""
Profile endpoints.

Private routes act on the profile of the authenticated caller only; the
owning user is never taken from the request body or path.
"""

from typing import List

from fastapi import APIRouter, Depends

from dependencies import get_current_identity, get_profile_service
from profiles import ProfileService
from schemas import Experience, MessageResponse, ProfilePayload, ProfileResponse

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(user_id: str = Depends(get_current_identity),
                   profiles: ProfileService = Depends(get_profile_service)):
    return profiles.get_own(user_id)


@router.post("", response_model=ProfileResponse)
def upsert_profile(payload: ProfilePayload,
                   user_id: str = Depends(get_current_identity),
                   profiles: ProfileService = Depends(get_profile_service)):
    return profiles.upsert(user_id, payload.model_dump(exclude_unset=True))


@router.get("", response_model=List[ProfileResponse])
def list_profiles(profiles: ProfileService = Depends(get_profile_service)):
    return profiles.list_all()


@router.get("/user/{user_id}", response_model=ProfileResponse)
def get_profile_by_user(user_id: str, profiles: ProfileService = Depends(get_profile_service)):
    return profiles.get_by_user(user_id)


@router.delete("", response_model=MessageResponse)
def delete_account(user_id: str = Depends(get_current_identity),
                   profiles: ProfileService = Depends(get_profile_service)):
    profiles.delete_account(user_id)
    return {"msg": "User deleted"}


@router.put("/experience", response_model=ProfileResponse)
def add_experience(experience: Experience,
                   user_id: str = Depends(get_current_identity),
                   profiles: ProfileService = Depends(get_profile_service)):
    return profiles.add_experience(user_id, experience)


@router.delete("/experience/{exp_id}", response_model=ProfileResponse)
def remove_experience(exp_id: str,
                      user_id: str = Depends(get_current_identity),
                      profiles: ProfileService = Depends(get_profile_service)):
    return profiles.remove_experience(user_id, exp_id)
