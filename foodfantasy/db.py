from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from foodfantasy.config import settings
from foodfantasy.models.base import Base

DATABASE_URL = settings.database_url

# Create engine
engine = create_async_engine(DATABASE_URL, echo=settings.sql_echo, pool_pre_ping=True)

# Async session maker
async_session = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Dependency
async def get_db():
    async with async_session() as session:
        yield session


async def create_db_and_tables():
    import foodfantasy.models  # registers every model on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping(db: AsyncSession) -> None:
    await db.execute(text("SELECT 1"))
