from __future__ import annotations

import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config import settings
from ..logging_config import setup_logging
from .base import Base


def _build_async_engine(database_url: Optional[str] = None) -> AsyncEngine:
    database_url = database_url or settings.DATABASE_URL
    if database_url.startswith("postgresql://"):
        # Enforce async driver
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return create_async_engine(database_url, echo=False, future=True)


engine: AsyncEngine = _build_async_engine()
# Production session_factory for the services
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def create_all(bind: AsyncEngine = engine) -> None:
    """Create all tables (dev only)."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def main() -> None:
    logger = setup_logging()
    logger.info(f"Creating tables on {engine.url.render_as_string(hide_password=True)}")
    asyncio.run(create_all())


if __name__ == "__main__":
    main()
