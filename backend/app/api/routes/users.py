"""User sync route."""

from fastapi import APIRouter

from app.api.deps import CurrentUserId, DbSession
from app.config import get_settings
from app.schemas.user import UserRead, UserSyncRequest, UserSyncResponse
from app.services.subjects import count_subjects, sync_user

router = APIRouter(prefix="/users", tags=["users"])
settings = get_settings()


@router.post("/sync", response_model=UserSyncResponse)
async def sync(
    request: UserSyncRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> UserSyncResponse:
    """
    Upsert the signed-in user.

    Called by the client after every sign-in. has_subjects tells it whether
    to show subject setup or the dashboard.
    """
    user = await sync_user(db, user_id, request.email)
    subject_count = await count_subjects(db, user_id)
    return UserSyncResponse(
        user=UserRead.model_validate(user),
        has_subjects=subject_count >= settings.subjects_per_user,
    )
