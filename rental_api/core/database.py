from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from rental_api.core.config import settings


def get_database_url() -> str:
    """Configured URL; managed PostgreSQL outside development requires TLS."""
    db_url = settings.DATABASE_URL
    if "postgresql" in db_url and "sslmode" not in db_url and settings.ENVIRONMENT != "development":
        separator = "&" if "?" in db_url else "?"
        return f"{db_url}{separator}sslmode=require"
    return db_url


def create_engine_for(url: str) -> AsyncEngine:
    if url.startswith("sqlite"):
        # Writers on a shared SQLite file wait for the lock instead of failing
        return create_async_engine(url, echo=settings.DB_ECHO, connect_args={"timeout": 30})
    return create_async_engine(url, echo=settings.DB_ECHO, pool_pre_ping=True)


engine = create_engine_for(get_database_url())
async_session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
Base = declarative_base()


def get_async_session_maker_instance():
    """Get the async session maker instance."""
    return async_session_maker
