from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from dealership.core.config import settings


def async_database_url(url: str) -> str:
    """Point a plain sqlite URL at the aiosqlite driver"""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine with SQLite foreign key enforcement switched on
    """
    new_engine = create_async_engine(
        async_database_url(url),
        echo=echo,
        future=True,
    )

    @event.listens_for(new_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return new_engine


def create_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = create_engine_for(settings.SQLITE_DATABASE_URI, echo=settings.SQL_DEBUG)

SessionLocal = create_session_factory(engine)
