"""Initial schema: users, workspaces, permissions, notes, diffs, tags, links

Revision ID: 001
Revises:
Create Date: 2025-09-04

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _entity_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        *_entity_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("api_key", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_api_key"), "users", ["api_key"], unique=True)
    op.create_index(op.f("ix_users_created_at"), "users", ["created_at"], unique=False)

    op.create_table(
        "workspaces",
        *_entity_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workspaces_name"), "workspaces", ["name"], unique=True)
    op.create_index(op.f("ix_workspaces_created_at"), "workspaces", ["created_at"], unique=False)

    op.create_table(
        "user_permissions",
        *_entity_columns(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("can_write", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "workspace_id", name="uq_user_permission"),
    )
    op.create_index(op.f("ix_user_permissions_user_id"), "user_permissions", ["user_id"], unique=False)
    op.create_index(op.f("ix_user_permissions_workspace_id"), "user_permissions", ["workspace_id"], unique=False)
    op.create_index(op.f("ix_user_permissions_created_at"), "user_permissions", ["created_at"], unique=False)

    op.create_table(
        "notes",
        *_entity_columns(),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_notes_workspace_id"), "notes", ["workspace_id"], unique=False)
    op.create_index(op.f("ix_notes_title"), "notes", ["title"], unique=False)
    op.create_index(op.f("ix_notes_created_at"), "notes", ["created_at"], unique=False)

    op.create_table(
        "diffs",
        *_entity_columns(),
        sa.Column("note_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("length", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("new_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("applied_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_diffs_note_id"), "diffs", ["note_id"], unique=False)
    op.create_index(op.f("ix_diffs_created_at"), "diffs", ["created_at"], unique=False)

    op.create_table(
        "tags",
        *_entity_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tags_name"), "tags", ["name"], unique=True)
    op.create_index(op.f("ix_tags_created_at"), "tags", ["created_at"], unique=False)

    op.create_table(
        "workspace_tags",
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("tag_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("workspace_id", "tag_id"),
    )
    op.create_index(op.f("ix_workspace_tags_tag_id"), "workspace_tags", ["tag_id"], unique=False)

    op.create_table(
        "note_tags",
        sa.Column("note_id", sa.Uuid(), nullable=False),
        sa.Column("tag_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("note_id", "tag_id"),
    )
    op.create_index(op.f("ix_note_tags_tag_id"), "note_tags", ["tag_id"], unique=False)

    op.create_table(
        "links",
        *_entity_columns(),
        sa.Column("source_note_id", sa.Uuid(), nullable=False),
        sa.Column("target_note_id", sa.Uuid(), nullable=False),
        sa.Column("link_text", sa.String(500), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["source_note_id"], ["notes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["target_note_id"], ["notes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "source_note_id", "target_note_id", "position", name="uq_link_source_target_position"
        ),
        sa.CheckConstraint("source_note_id <> target_note_id", name="ck_link_no_self_reference"),
    )
    op.create_index(op.f("ix_links_source_note_id"), "links", ["source_note_id"], unique=False)
    op.create_index(op.f("ix_links_target_note_id"), "links", ["target_note_id"], unique=False)
    op.create_index(op.f("ix_links_created_at"), "links", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_table("links")
    op.drop_table("note_tags")
    op.drop_table("workspace_tags")
    op.drop_table("tags")
    op.drop_table("diffs")
    op.drop_table("notes")
    op.drop_table("user_permissions")
    op.drop_table("workspaces")
    op.drop_table("users")
