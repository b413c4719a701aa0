from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from app.core.config import settings

class Base(DeclarativeBase):
    pass

from sqlalchemy.engine.url import make_url

def _get_db_url():
    url = settings.DATABASE_URL
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")

    url_obj = make_url(url)

    # Ensure driver is aiosqlite
    if url_obj.drivername in ("sqlite", "sqlite+pysqlite"):
        url_obj = url_obj.set(drivername="sqlite+aiosqlite")

    return url_obj

engine = create_async_engine(
    _get_db_url(),
    echo=settings.DEBUG_MODE,
    future=True,
)

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session

