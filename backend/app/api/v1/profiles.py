"""
Profile API endpoints for the signed-in user.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.deps import CurrentClaims, get_profile_service
from app.core.responses import api_response
from app.schemas.profile import PasswordChange, ProfileOut, ProfileUpdate
from app.services.profiles import ProfileService

router = APIRouter()

Service = Annotated[ProfileService, Depends(get_profile_service)]


def _dump(user) -> dict:
    return ProfileOut.model_validate(user).model_dump(mode="json")


@router.patch("")
def update_profile(data: ProfileUpdate, claims: CurrentClaims, service: Service):
    user = service.update_profile(claims["sub"], data)
    return api_response(_dump(user), "Profile updated successfully")


@router.put("/photo")
async def upload_photo(
    claims: CurrentClaims,
    service: Service,
    file: UploadFile = File(...),
):
    """
    Replace the profile photo.

    Accepts a multipart ``file`` field holding a .jpg, .jpeg or .png image.
    """
    content = await file.read()
    user = service.upload_photo(claims["sub"], content, file.filename, file.content_type)
    return api_response(_dump(user), "Profile photo updated successfully")


@router.delete("/photo")
def delete_photo(claims: CurrentClaims, service: Service):
    user = service.delete_photo(claims["sub"])
    return api_response(_dump(user), "Profile photo deleted successfully")


@router.patch("/change-password")
def change_password(data: PasswordChange, claims: CurrentClaims, service: Service):
    service.change_password(claims["sub"], data)
    return api_response(message="Password changed successfully")
