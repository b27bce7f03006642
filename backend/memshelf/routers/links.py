import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.database import get_db
from memshelf.dependencies import get_current_user
from memshelf.errors import NotFoundError
from memshelf.models import User
from memshelf.routers.access import authorize_note
from memshelf.schemas.common import SuccessResponse
from memshelf.schemas.link import LinkCreate, LinkResponse
from memshelf.services import links
from memshelf.services.permissions import AccessLevel

router = APIRouter(prefix="/links", tags=["links"])


@router.post("", response_model=SuccessResponse[LinkResponse], status_code=status.HTTP_201_CREATED)
async def create_link(
    data: LinkCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    # Source is resolved and authorized before the target is looked at.
    await authorize_note(
        db, data.source_note_id, user, AccessLevel.WRITE, not_found_message="Source note not found"
    )
    await authorize_note(
        db, data.target_note_id, user, AccessLevel.READ, not_found_message="Target note not found"
    )
    link = await links.create_link(db, data)
    return SuccessResponse(data=LinkResponse.model_validate(link))


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(
    link_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Response:
    link = await links.get_link(db, link_id)
    if link is None:
        raise NotFoundError("Link not found")
    await authorize_note(
        db, link.source_note_id, user, AccessLevel.WRITE, not_found_message="Source note not found"
    )
    await links.delete_link(db, link)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
