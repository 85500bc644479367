import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from dealership.db import session as db_session
from dealership.db.base import Base

# Import every model so its table is registered on Base.metadata
from dealership.models import CarUnit, Partner, Transaction, AuditLog  # noqa: F401


async def ensure_tables_exist(bind: Optional[AsyncEngine] = None) -> None:
    """
    Create any missing tables (called on application startup)
    """
    bind = bind or db_session.engine
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())
