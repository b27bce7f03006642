import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.database import get_db
from memshelf.dependencies import Ordering, Pagination, get_current_user
from memshelf.models import User
from memshelf.routers.access import authorize_note
from memshelf.schemas.common import PaginatedResponse, PaginationInfo, SuccessResponse
from memshelf.schemas.diff import DiffApplyResponse, DiffCreate, DiffResponse
from memshelf.schemas.link import LinkResponse
from memshelf.schemas.note import NoteCreate, NoteResponse, NoteUpdate, TrashItem
from memshelf.schemas.tag import NoteTagCreate, NoteTagResponse, TagResponse
from memshelf.services import diffs, links, notes, tags
from memshelf.services.permissions import AccessLevel, authorize_workspace

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=PaginatedResponse[NoteResponse])
async def list_notes(
    workspace_id: uuid.UUID = Query(alias="workspaceId"),
    pagination: Pagination = Depends(),
    ordering: Ordering = Depends(),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await authorize_workspace(db, workspace_id, user, AccessLevel.READ)
    page = await notes.list_notes(
        db,
        workspace_id,
        page=pagination.page,
        limit=pagination.limit,
        order_field=ordering.order_field,
        order_dir=ordering.order_dir,
    )
    return PaginatedResponse(
        data=[NoteResponse.model_validate(n) for n in page.items],
        pagination=PaginationInfo.create(page.page, page.limit, page.total),
    )


@router.get("/trash", response_model=SuccessResponse[list[TrashItem]])
async def list_trash(
    workspace_id: uuid.UUID = Query(alias="workspaceId"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Soft-deleted notes of a workspace, most recently deleted first."""
    await authorize_workspace(db, workspace_id, user, AccessLevel.READ)
    result = await notes.list_trash(db, workspace_id)
    return SuccessResponse(data=[TrashItem.model_validate(n) for n in result])


@router.post("", response_model=SuccessResponse[NoteResponse], status_code=status.HTTP_201_CREATED)
async def create_note(
    data: NoteCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await authorize_workspace(db, data.workspace_id, user, AccessLevel.WRITE)
    note = await notes.create_note(db, data.workspace_id, data.title, data.content)
    return SuccessResponse(data=NoteResponse.model_validate(note))


@router.get("/{note_id}", response_model=SuccessResponse[NoteResponse])
async def get_note(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    note = await authorize_note(db, note_id, user, AccessLevel.READ)
    return SuccessResponse(data=NoteResponse.model_validate(note))


@router.put("/{note_id}", response_model=SuccessResponse[NoteResponse])
@router.patch("/{note_id}", response_model=SuccessResponse[NoteResponse])
async def update_note(
    note_id: uuid.UUID,
    data: NoteUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    note = await authorize_note(db, note_id, user, AccessLevel.WRITE)
    note = await notes.update_note(db, note, data)
    return SuccessResponse(data=NoteResponse.model_validate(note))


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Response:
    note = await authorize_note(db, note_id, user, AccessLevel.WRITE)
    await notes.soft_delete_note(db, note)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{note_id}/restore", response_model=SuccessResponse[NoteResponse])
async def restore_note(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    note = await authorize_note(db, note_id, user, AccessLevel.WRITE, include_deleted=True)
    note = await notes.restore_note(db, note)
    return SuccessResponse(data=NoteResponse.model_validate(note))


@router.get("/{note_id}/diffs", response_model=PaginatedResponse[DiffResponse])
async def list_note_diffs(
    note_id: uuid.UUID,
    pagination: Pagination = Depends(),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await authorize_note(db, note_id, user, AccessLevel.READ)
    page = await diffs.list_diffs(db, note_id, page=pagination.page, limit=pagination.limit)
    return PaginatedResponse(
        data=[DiffResponse.model_validate(d) for d in page.items],
        pagination=PaginationInfo.create(page.page, page.limit, page.total),
    )


@router.post("/{note_id}/diffs", response_model=SuccessResponse[DiffApplyResponse], status_code=status.HTTP_201_CREATED)
async def apply_note_diff(
    note_id: uuid.UUID,
    data: DiffCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    note = await authorize_note(db, note_id, user, AccessLevel.WRITE)
    diff, note = await diffs.apply_diff(db, note, data)
    return SuccessResponse(
        data=DiffApplyResponse(
            diff=DiffResponse.model_validate(diff),
            note_id=note.id,
            version=note.version,
            content=note.content,
        )
    )


@router.get("/{note_id}/tags", response_model=SuccessResponse[list[TagResponse]])
async def list_note_tags(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await authorize_note(db, note_id, user, AccessLevel.READ)
    result = await tags.list_note_tags(db, note_id)
    return SuccessResponse(data=[TagResponse.model_validate(t) for t in result])


@router.post("/{note_id}/tags", response_model=SuccessResponse[NoteTagResponse], status_code=status.HTTP_201_CREATED)
async def add_note_tag(
    note_id: uuid.UUID,
    data: NoteTagCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await authorize_note(db, note_id, user, AccessLevel.WRITE)
    note_tag = await tags.add_tag_to_note(db, note_id, data.tag_id)
    return SuccessResponse(data=NoteTagResponse.model_validate(note_tag))


@router.delete("/{note_id}/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_note_tag(
    note_id: uuid.UUID,
    tag_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Response:
    await authorize_note(db, note_id, user, AccessLevel.WRITE)
    await tags.remove_tag_from_note(db, note_id, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{note_id}/links", response_model=SuccessResponse[list[LinkResponse]])
async def list_note_links(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await authorize_note(db, note_id, user, AccessLevel.READ)
    result = await links.list_note_links(db, note_id)
    return SuccessResponse(data=[LinkResponse.model_validate(link) for link in result])
