from memshelf.models.diff import Diff
from memshelf.models.link import Link
from memshelf.models.note import Note
from memshelf.models.permission import Permission
from memshelf.models.tag import NoteTag, Tag, WorkspaceTag
from memshelf.models.user import User
from memshelf.models.workspace import Workspace

__all__ = ["User", "Workspace", "Permission", "Note", "Diff", "Tag", "WorkspaceTag", "NoteTag", "Link"]
