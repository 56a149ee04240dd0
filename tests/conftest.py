import os

import pytest
import pytest_asyncio

# Set test environment variables BEFORE any app imports
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite+aiosqlite:///:memory:")

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.container import Container
from domain.models.query import QuerySet
from support.models import ALL_MODELS, Base
from support.seed import seed_blog

DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_session():
    # StaticPool: every connection must see the same in-memory database
    engine = create_async_engine(DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, expire_on_commit=False)
    async with async_session() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def blog(db_session):
    await seed_blog(db_session)
    return db_session


@pytest.fixture
def container():
    c = Container()
    for model in ALL_MODELS:
        c.register_resource(model)
    return c


@pytest.fixture
def resource_graph(container):
    return container.resource_graph


@pytest.fixture
def make_repository(container):
    """make_repository(session, Model, query_set=None) -> (repository, context)"""

    def _make(session, model_cls, query_set: QuerySet = None):
        context = container.context(session, query_set)
        return container.repository(session, model_cls, context), context

    return _make
