import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.database import get_db
from memshelf.dependencies import Ordering, Pagination, get_current_user
from memshelf.models import User
from memshelf.schemas.common import PaginatedResponse, PaginationInfo, SuccessResponse
from memshelf.schemas.tag import TagCreate, TagResponse
from memshelf.schemas.workspace import WorkspaceCreate, WorkspaceResponse, WorkspaceUpdate
from memshelf.services import permissions, tags
from memshelf.services.permissions import AccessLevel

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.get("", response_model=PaginatedResponse[WorkspaceResponse])
async def list_workspaces(
    pagination: Pagination = Depends(),
    ordering: Ordering = Depends(),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Workspaces the caller holds a live permission on."""
    page = await permissions.list_workspaces_for_user(
        db,
        user,
        page=pagination.page,
        limit=pagination.limit,
        order_field=ordering.order_field,
        order_dir=ordering.order_dir,
    )
    return PaginatedResponse(
        data=[WorkspaceResponse.model_validate(w) for w in page.items],
        pagination=PaginationInfo.create(page.page, page.limit, page.total),
    )


@router.post("", response_model=SuccessResponse[WorkspaceResponse], status_code=status.HTTP_201_CREATED)
async def create_workspace(
    data: WorkspaceCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    workspace = await permissions.create_workspace(db, user, data.name, data.description)
    return SuccessResponse(data=WorkspaceResponse.model_validate(workspace))


@router.get("/{workspace_id}", response_model=SuccessResponse[WorkspaceResponse])
async def get_workspace(
    workspace_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    workspace = await permissions.authorize_workspace(db, workspace_id, user, AccessLevel.READ)
    return SuccessResponse(data=WorkspaceResponse.model_validate(workspace))


@router.put("/{workspace_id}", response_model=SuccessResponse[WorkspaceResponse])
async def update_workspace(
    workspace_id: uuid.UUID,
    data: WorkspaceUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    workspace = await permissions.authorize_workspace(db, workspace_id, user, AccessLevel.WRITE)
    workspace = await permissions.update_workspace(db, workspace, data)
    return SuccessResponse(data=WorkspaceResponse.model_validate(workspace))


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workspace(
    workspace_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Response:
    workspace = await permissions.authorize_workspace(db, workspace_id, user, AccessLevel.WRITE)
    await permissions.soft_delete_workspace(db, workspace)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{workspace_id}/tags", response_model=SuccessResponse[list[TagResponse]])
async def list_workspace_tags(
    workspace_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await permissions.authorize_workspace(db, workspace_id, user, AccessLevel.READ)
    result = await tags.list_workspace_tags(db, workspace_id)
    return SuccessResponse(data=[TagResponse.model_validate(t) for t in result])


@router.post(
    "/{workspace_id}/tags",
    response_model=SuccessResponse[TagResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_workspace_tag(
    workspace_id: uuid.UUID,
    data: TagCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await permissions.authorize_workspace(db, workspace_id, user, AccessLevel.WRITE)
    tag = await tags.add_tag_to_workspace(db, workspace_id, data)
    return SuccessResponse(data=TagResponse.model_validate(tag))
