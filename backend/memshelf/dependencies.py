import logging

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.config import settings
from memshelf.database import get_db
from memshelf.errors import ErrorCode, UnauthorizedError
from memshelf.models import User
from memshelf.schemas.common import MAX_INT32
from memshelf.services.auth import get_user_by_api_key

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Authentication required")
    user = await get_user_by_api_key(db, credentials.credentials)
    if user is None:
        logger.warning("Rejected unknown API key")
        raise UnauthorizedError("Invalid API key", code=ErrorCode.AUTH_FAILED)
    return user


class Pagination:
    def __init__(
        self,
        page: int = Query(1, ge=1, le=MAX_INT32),
        limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    ):
        self.page = page
        self.limit = limit


class Ordering:
    def __init__(
        self,
        order_field: str = Query("createdAt", alias="orderField"),
        order_dir: str = Query("DESC", alias="orderDir"),
    ):
        self.order_field = order_field
        self.order_dir = order_dir
