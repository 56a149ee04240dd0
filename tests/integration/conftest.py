import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from support.models import Base

# Docker-backed; deselected by default (see the `integration` marker in pyproject.toml).


@pytest.fixture(scope="session")
def postgres_container():
    """
    Spins up a Postgres container for the duration of the test session.
    """
    postgres = pytest.importorskip("testcontainers.postgres")
    with postgres.PostgresContainer("postgres:16-alpine") as container:
        yield container


@pytest_asyncio.fixture
async def integration_session(postgres_container):
    """
    Fresh schema per test on the shared container.
    """
    db_url = postgres_container.get_connection_url()
    # testcontainers hands out a psycopg2 URL; the repository needs asyncpg
    async_db_url = db_url.replace("postgresql+psycopg2://", "postgresql+asyncpg://")
    if "asyncpg" not in async_db_url:
        async_db_url = async_db_url.replace("postgresql://", "postgresql+asyncpg://")

    engine = create_async_engine(async_db_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session

    await engine.dispose()
