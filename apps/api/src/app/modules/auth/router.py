"""Authentication router."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import MSG_USER_NOT_FOUND
from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.exceptions import ResourceNotFoundError
from app.core.responses import ApiResponse
from app.modules.auth.schemas import MembershipResponse, MeResponse
from app.modules.schools.repository import SchoolUserRepository
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=ApiResponse[MeResponse])
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MeResponse]:
    """
    Get the authenticated caller's account.

    Args:
        current_user: Caller resolved from the access token
        db: Database session

    Returns:
        Account details and school memberships

    Raises:
        ResourceNotFoundError: The token is valid but no account exists for it
    """
    user = await UserRepository.get_by_id(db, current_user.id)

    if user is None:
        logger.warning(f"Authenticated caller has no account: {current_user.id}")
        raise ResourceNotFoundError(MSG_USER_NOT_FOUND)

    memberships = await SchoolUserRepository.list_for_user(db, user.id)

    me = MeResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        global_role=user.global_role,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
        memberships=[
            MembershipResponse(
                school_id=membership.school_id,
                school_name=membership.school.name,
                role=membership.role,
                status=membership.status,
            )
            for membership in memberships
        ],
    )

    return ApiResponse.ok(me, "User retrieved successfully")
