import logging
import secrets

from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.models import User
from memshelf.services.repository import Repository

logger = logging.getLogger(__name__)

API_KEY_BYTES = 32


def generate_api_key() -> str:
    return secrets.token_urlsafe(API_KEY_BYTES)


async def get_user_by_api_key(db: AsyncSession, api_key: str) -> User | None:
    if not api_key:
        return None
    return await Repository(db, User).find_one(User.api_key == api_key)


async def create_user(db: AsyncSession, name: str, api_key: str | None = None) -> User:
    """Create a user with a fresh API key unless one is given. Flushes only; the caller commits."""
    user = await Repository(db, User).save(User(name=name, api_key=api_key or generate_api_key()))
    logger.info("User created", extra={"user_id": str(user.id)})
    return user
