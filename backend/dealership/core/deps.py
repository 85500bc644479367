"""Request dependencies (no authentication)"""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.config import settings
from dealership.db import session as db_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield one database session per request; uncommitted work is rolled back on close
    """
    async with db_session.SessionLocal() as session:
        yield session


def get_actor() -> str:
    """Identity recorded on audit rows"""
    return settings.SYSTEM_ACTOR
