"""Workspace-scoped access control.

A live ``Permission`` row is the only thing that grants access: no row means
no access, ``can_write=False`` means read-only. Soft-deleted rows, users and
workspaces grant nothing.
"""

import enum
import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.errors import ForbiddenError, NotFoundError
from memshelf.models import Permission, User, Workspace
from memshelf.schemas.workspace import WorkspaceUpdate
from memshelf.services.repository import Page, Repository, order_clause

logger = logging.getLogger(__name__)

ORDER_FIELDS = {
    "createdAt": Workspace.created_at,
    "updatedAt": Workspace.updated_at,
    "name": Workspace.name,
}


class AccessLevel(str, enum.Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class PermissionCheck:
    has_permission: bool = False
    can_write: bool = False


async def get_permissions_for_user(db: AsyncSession, user_id: uuid.UUID) -> list[Permission]:
    return await Repository(db, Permission).find_many(Permission.user_id == user_id)


async def check_access(db: AsyncSession, workspace: Workspace, user: User) -> PermissionCheck:
    permissions = await get_permissions_for_user(db, user.id)
    for permission in permissions:
        if permission.workspace_id == workspace.id:
            return PermissionCheck(has_permission=True, can_write=permission.can_write)
    return PermissionCheck()


async def require_access(db: AsyncSession, workspace: Workspace, user: User, level: AccessLevel) -> PermissionCheck:
    check = await check_access(db, workspace, user)
    if not check.has_permission:
        logger.info(
            "Workspace access denied",
            extra={"user_id": str(user.id), "workspace_id": str(workspace.id), "level": level.value},
        )
        raise ForbiddenError("You do not have read permissions to the workspace")
    if level is AccessLevel.WRITE and not check.can_write:
        logger.info(
            "Workspace write denied",
            extra={"user_id": str(user.id), "workspace_id": str(workspace.id)},
        )
        raise ForbiddenError("You do not have write permissions to the workspace")
    return check


async def get_workspace_or_404(db: AsyncSession, workspace_id: uuid.UUID) -> Workspace:
    workspace = await Repository(db, Workspace).get(workspace_id)
    if workspace is None:
        raise NotFoundError("Workspace not found")
    return workspace


async def authorize_workspace(
    db: AsyncSession, workspace_id: uuid.UUID, user: User, level: AccessLevel
) -> Workspace:
    """Existence first (404), then permission (403)."""
    workspace = await get_workspace_or_404(db, workspace_id)
    await require_access(db, workspace, user, level)
    return workspace


def accessible_workspace_ids(user_id: uuid.UUID) -> Select:
    return select(Permission.workspace_id).where(
        Permission.user_id == user_id,
        Permission.deleted_at.is_(None),
    )


async def list_workspaces_for_user(
    db: AsyncSession,
    user: User,
    page: int = 1,
    limit: int = 10,
    order_field: str = "createdAt",
    order_dir: str = "DESC",
) -> Page[Workspace]:
    return await Repository(db, Workspace).paginate(
        Workspace.id.in_(accessible_workspace_ids(user.id)),
        page=page,
        limit=limit,
        order_by=[order_clause(ORDER_FIELDS, order_field, order_dir)],
    )


async def grant_permission(
    db: AsyncSession, user_id: uuid.UUID, workspace_id: uuid.UUID, can_write: bool = False
) -> Permission:
    permission = Permission(user_id=user_id, workspace_id=workspace_id, can_write=can_write)
    return await Repository(db, Permission).save(permission)


async def create_workspace(db: AsyncSession, user: User, name: str, description: str | None) -> Workspace:
    """Workspace plus its founding write permission, committed together or not at all."""
    try:
        workspace = await Repository(db, Workspace).save(Workspace(name=name, description=description))
        await grant_permission(db, user.id, workspace.id, can_write=True)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Workspace created", extra={"workspace_id": str(workspace.id), "user_id": str(user.id)})
    return workspace


async def update_workspace(db: AsyncSession, workspace: Workspace, data: WorkspaceUpdate) -> Workspace:
    """Apply the fields present in the request; an explicit null clears the description."""
    if data.name is not None:
        workspace.name = data.name
    if "description" in data.model_fields_set:
        workspace.description = data.description
    await db.commit()
    await db.refresh(workspace)
    return workspace


async def soft_delete_workspace(db: AsyncSession, workspace: Workspace) -> None:
    await Repository(db, Workspace).soft_delete(workspace)
    await db.commit()
    logger.info("Workspace deleted", extra={"workspace_id": str(workspace.id)})
