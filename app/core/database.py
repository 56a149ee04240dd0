from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings

engine_args = {"echo": settings.SQL_ECHO, "pool_pre_ping": True}

if "sqlite" not in settings.SQLALCHEMY_DATABASE_URI:
    engine_args.update({"pool_size": 5, "max_overflow": 5, "pool_recycle": 300})

engine = create_async_engine(settings.SQLALCHEMY_DATABASE_URI, **engine_args)
# Entities returned by the repository must stay readable after commit.
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def enable_sqlite_pragmas(async_engine) -> None:
    """WAL to reduce locking, foreign keys so relationship updates are enforced."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.close()


if "sqlite" in settings.SQLALCHEMY_DATABASE_URI:
    enable_sqlite_pragmas(engine)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
