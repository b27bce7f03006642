from memshelf.schemas.common import PaginatedResponse, PaginationInfo, SuccessResponse
from memshelf.schemas.diff import DiffApplyResponse, DiffCreate, DiffResponse
from memshelf.schemas.link import LinkCreate, LinkResponse
from memshelf.schemas.note import NoteCreate, NoteResponse, NoteUpdate, TrashItem
from memshelf.schemas.tag import NoteTagCreate, NoteTagResponse, TagCreate, TagResponse
from memshelf.schemas.workspace import WorkspaceCreate, WorkspaceResponse, WorkspaceUpdate

__all__ = [
    "SuccessResponse",
    "PaginatedResponse",
    "PaginationInfo",
    "WorkspaceCreate",
    "WorkspaceUpdate",
    "WorkspaceResponse",
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "TrashItem",
    "DiffCreate",
    "DiffResponse",
    "DiffApplyResponse",
    "TagCreate",
    "TagResponse",
    "NoteTagCreate",
    "NoteTagResponse",
    "LinkCreate",
    "LinkResponse",
]
