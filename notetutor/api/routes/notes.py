"""Notes routes: per-subject CRUD and file text extraction."""

from uuid import UUID

from fastapi import APIRouter, File, UploadFile, status

from notetutor.api.deps import AppSettings, CurrentUid, Store, found_or_404
from notetutor.errors import PayloadTooLarge
from notetutor.schemas.notes import NoteCreate, NoteExtractResponse, NoteRead
from notetutor.services import file_extractor

router = APIRouter(tags=["notes"])


@router.get("/subjects/{subject_id}/notes", response_model=list[NoteRead])
async def list_notes(subject_id: UUID, uid: CurrentUid, store: Store) -> list[NoteRead]:
    """List the subject's notes, newest first."""
    notes = await store.list_notes(subject_id, uid)
    return [NoteRead.model_validate(n) for n in notes]


@router.post(
    "/subjects/{subject_id}/notes",
    response_model=NoteRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_note(
    subject_id: UUID,
    data: NoteCreate,
    uid: CurrentUid,
    store: Store,
) -> NoteRead:
    """Create a note in one of the caller's subjects."""
    found_or_404(await store.get_subject(subject_id, uid), "Subject")
    note = await store.create_note(uid, subject_id, data.title, data.content)
    return NoteRead.model_validate(note)


@router.post("/notes/extract", response_model=NoteExtractResponse)
async def extract_note(
    uid: CurrentUid,
    settings: AppSettings,
    file: UploadFile = File(...),
) -> NoteExtractResponse:
    """
    Extract text from an uploaded PDF, Word (.docx) or text file.

    Nothing is stored: the response prefills the note form, with the title
    taken from the file name.
    """
    data = await file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise PayloadTooLarge(
            f"File exceeds the {settings.max_upload_bytes // (1024 * 1024)}MB upload limit"
        )
    extracted = file_extractor.extract(file.filename or "", data)
    return NoteExtractResponse(title=extracted.title, content=extracted.content)


@router.get("/notes/{note_id}", response_model=NoteRead)
async def get_note(note_id: UUID, uid: CurrentUid, store: Store) -> NoteRead:
    """Get a specific note by ID."""
    note = found_or_404(await store.get_note(note_id, uid), "Note")
    return NoteRead.model_validate(note)


@router.delete("/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(note_id: UUID, uid: CurrentUid, store: Store) -> None:
    """Delete a note."""
    note = found_or_404(await store.get_note(note_id, uid), "Note")
    await store.delete_note(note)
