"""Subject setup and listing routes."""

from fastapi import APIRouter, status

from app.api.deps import CurrentUserId, DbSession
from app.config import get_settings
from app.schemas.subjects import SubjectInitRequest, SubjectListResponse, SubjectRead, SubjectWithCount
from app.services.subjects import init_subjects, list_subjects_with_counts

router = APIRouter(prefix="/subjects", tags=["subjects"])
settings = get_settings()


@router.post("/init", response_model=dict[str, list[SubjectRead]], status_code=status.HTTP_201_CREATED)
async def initialize_subjects(
    request: SubjectInitRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> dict[str, list[SubjectRead]]:
    """Create the user's subjects. Only allowed once per user."""
    subjects = await init_subjects(
        db,
        user_id,
        request.subjects,
        required=settings.subjects_per_user,
        email=request.email,
    )
    return {"subjects": [SubjectRead.model_validate(s) for s in subjects]}


@router.get("/", response_model=SubjectListResponse)
async def list_subjects(
    user_id: CurrentUserId,
    db: DbSession,
) -> SubjectListResponse:
    """List the user's subjects with note counts."""
    rows = await list_subjects_with_counts(db, user_id)
    return SubjectListResponse(
        subjects=[
            SubjectWithCount(**SubjectRead.model_validate(subject).model_dump(), note_count=count)
            for subject, count in rows
        ]
    )
