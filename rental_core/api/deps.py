from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from rental_core.config import get_settings
from rental_core.infrastructure.db.engine import build_engine, build_sessionmaker

settings = get_settings()

# Sin DATABASE_URL se usa SQLite en memoria (health checks y desarrollo)
if not settings.database_url:
    settings = settings.model_copy(update={"database_url": "sqlite+aiosqlite:///:memory:"})

engine = build_engine(settings)
AsyncSessionLocal = build_sessionmaker(engine)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
