"""
Database Connection Module
Handles the SQL connection using the SQLAlchemy async engine.
"""

import logging

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from restaurant_portal.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# SQLite has no connection pool to size
engine_options = {"echo": settings.database_echo}
if not settings.uses_sqlite:
    engine_options.update(pool_size=5, max_overflow=10)

engine = create_async_engine(settings.database_url, **engine_options)

# Session factory - creates new database sessions
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False  # Objects remain accessible after commit
)


# Base class for all our models
class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    """
    Dependency injection for FastAPI routes.
    Yields a database session and ensures cleanup.
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """
    Create all tables in database.
    Called once at application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")
