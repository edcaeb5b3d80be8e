"""앱 프로필 라우터 — 내 프로필 조회 API.

App Profile Router — Read the current user's profile, including the
ready-to-work and on-duty flags the app shows on its home screen.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from shiftcare.api.deps import require_user
from shiftcare.models.user import User
from shiftcare.schemas.user import UserResponse
from shiftcare.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("/profile", response_model=UserResponse)
async def get_my_profile(
    current_user: Annotated[User, Depends(require_user)],
) -> UserResponse:
    """내 프로필을 조회합니다.

    Get the current user's profile.
    """
    return user_service.to_response(current_user)
