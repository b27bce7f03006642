"""Seed development users, workspaces, permissions and tags

Revision ID: 002
Revises: 001
Create Date: 2025-09-06

"""
import uuid
from datetime import datetime, timezone
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id(n: int) -> uuid.UUID:
    return uuid.UUID(f"00000000-0000-4000-8000-{n:012d}")


USERS = [
    (_id(1), "Admin User", "dev_admin_key_0123456789abcdef0123456789abcdef01234567"),
    (_id(2), "John Developer", "dev_john_key_fedcba9876543210fedcba9876543210fedcba98"),
    (_id(3), "Jane Designer", "dev_jane_key_abcdef0123456789abcdef0123456789abcdef01"),
]

WORKSPACES = [
    (_id(11), "Default Workspace", "Default workspace for development and testing"),
    (_id(12), "Personal Notes", "Personal knowledge management workspace"),
    (_id(13), "Project Alpha", "Collaborative workspace for Project Alpha development"),
]

# (user, workspace, can_write)
PERMISSIONS = [
    (1, 11, True),
    (1, 12, True),
    (1, 13, True),
    (2, 11, True),
    (2, 13, True),
    (3, 12, False),
    (3, 13, False),
]

TAGS = ["work", "personal", "project", "idea", "research", "meeting", "documentation", "urgent"]

WELCOME_NOTE = """Welcome to your Memshelf knowledge management system!

This is your first note. You can:
- Create and organize notes
- Add tags for better organization
- Link notes together
- Track changes with version history
- Collaborate with team members
"""


def _entity_table(name: str, *columns: sa.Column) -> sa.Table:
    return sa.table(
        name,
        sa.column("id", sa.Uuid()),
        sa.column("created_at", sa.DateTime()),
        sa.column("updated_at", sa.DateTime()),
        *columns,
    )


def upgrade() -> None:
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    stamps = {"created_at": now, "updated_at": now}

    users = _entity_table("users", sa.column("name", sa.String()), sa.column("api_key", sa.String()))
    op.bulk_insert(users, [{"id": i, "name": n, "api_key": k, **stamps} for i, n, k in USERS])

    workspaces = _entity_table(
        "workspaces", sa.column("name", sa.String()), sa.column("description", sa.Text())
    )
    op.bulk_insert(workspaces, [{"id": i, "name": n, "description": d, **stamps} for i, n, d in WORKSPACES])

    permissions = _entity_table(
        "user_permissions",
        sa.column("user_id", sa.Uuid()),
        sa.column("workspace_id", sa.Uuid()),
        sa.column("can_write", sa.Boolean()),
    )
    op.bulk_insert(
        permissions,
        [
            {"id": uuid.uuid4(), "user_id": _id(u), "workspace_id": _id(w), "can_write": c, **stamps}
            for u, w, c in PERMISSIONS
        ],
    )

    tags = _entity_table("tags", sa.column("name", sa.String()), sa.column("display_name", sa.String()))
    op.bulk_insert(
        tags,
        [{"id": _id(21 + i), "name": name, "display_name": name.title(), **stamps} for i, name in enumerate(TAGS)],
    )

    workspace_tags = sa.table(
        "workspace_tags",
        sa.column("workspace_id", sa.Uuid()),
        sa.column("tag_id", sa.Uuid()),
        sa.column("created_at", sa.DateTime()),
    )
    op.bulk_insert(
        workspace_tags,
        [{"workspace_id": _id(11), "tag_id": _id(21 + i), "created_at": now} for i in range(len(TAGS))],
    )

    notes = _entity_table(
        "notes",
        sa.column("workspace_id", sa.Uuid()),
        sa.column("title", sa.String()),
        sa.column("content", sa.Text()),
        sa.column("version", sa.Integer()),
    )
    op.bulk_insert(
        notes,
        [
            {
                "id": _id(31),
                "workspace_id": _id(11),
                "title": "Welcome to Memshelf",
                "content": WELCOME_NOTE,
                "version": 1,
                **stamps,
            }
        ],
    )


def downgrade() -> None:
    user_ids = [u[0] for u in USERS]
    workspace_ids = [w[0] for w in WORKSPACES]
    tag_ids = [_id(21 + i) for i in range(len(TAGS))]

    notes = sa.table("notes", sa.column("id", sa.Uuid()))
    workspace_tags = sa.table("workspace_tags", sa.column("workspace_id", sa.Uuid()))
    tags = sa.table("tags", sa.column("id", sa.Uuid()))
    permissions = sa.table("user_permissions", sa.column("user_id", sa.Uuid()))
    workspaces = sa.table("workspaces", sa.column("id", sa.Uuid()))
    users = sa.table("users", sa.column("id", sa.Uuid()))

    op.execute(notes.delete().where(notes.c.id == _id(31)))
    op.execute(workspace_tags.delete().where(workspace_tags.c.workspace_id == _id(11)))
    op.execute(tags.delete().where(tags.c.id.in_(tag_ids)))
    op.execute(permissions.delete().where(permissions.c.user_id.in_(user_ids)))
    op.execute(workspaces.delete().where(workspaces.c.id.in_(workspace_ids)))
    op.execute(users.delete().where(users.c.id.in_(user_ids)))
