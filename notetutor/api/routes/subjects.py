"""Subject CRUD routes."""

from uuid import UUID

from fastapi import APIRouter, status

from notetutor.api.deps import CurrentUid, Store, found_or_404
from notetutor.schemas.subjects import SubjectCreate, SubjectRead

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.get("/", response_model=list[SubjectRead])
async def list_subjects(uid: CurrentUid, store: Store) -> list[SubjectRead]:
    """List the current user's subjects, newest first."""
    subjects = await store.list_subjects(uid)
    return [SubjectRead.model_validate(s) for s in subjects]


@router.post("/", response_model=SubjectRead, status_code=status.HTTP_201_CREATED)
async def create_subject(
    data: SubjectCreate,
    uid: CurrentUid,
    store: Store,
) -> SubjectRead:
    """Create a new subject."""
    subject = await store.create_subject(uid, data.title)  # Owner from auth, NEVER from request
    return SubjectRead.model_validate(subject)


@router.get("/{subject_id}", response_model=SubjectRead)
async def get_subject(subject_id: UUID, uid: CurrentUid, store: Store) -> SubjectRead:
    """Get a specific subject by ID."""
    subject = found_or_404(await store.get_subject(subject_id, uid), "Subject")
    return SubjectRead.model_validate(subject)


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subject(subject_id: UUID, uid: CurrentUid, store: Store) -> None:
    """
    Delete a subject.

    Only the subject itself is removed; notes, chats and quizzes that
    reference it are left in place.
    """
    subject = found_or_404(await store.get_subject(subject_id, uid), "Subject")
    await store.delete_subject(subject)
