from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.deps import get_current_user
from models.user import User, UserRole

router = APIRouter()


class UserProfileResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: UserRole
    organization_id: Optional[str] = None
    is_manager: bool


# Lets the client route workers and managers to their dashboards
@router.get("/me", response_model=UserProfileResponse)
def get_my_profile(user: Annotated[User, Depends(get_current_user)]):
    return UserProfileResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        organization_id=user.organization_id,
        is_manager=user.is_manager,
    )
