import pytest
import pytest_asyncio

from domain.errors import InvalidSortTarget
from domain.models.query import FilterQuery, SortDirection, SortQuery
from support.models import Person


@pytest_asyncio.fixture
async def people(db_session):
    db_session.add_all(
        [
            Person(id=1, first_name="B", age=30),
            Person(id=2, first_name="A", age=30),
            Person(id=3, first_name="Z", age=20),
            Person(id=4, first_name="A", age=20),
        ]
    )
    await db_session.commit()
    db_session.expunge_all()
    return db_session


async def _rows(repo, stmt):
    return [(p.age, p.first_name) for p in await repo.page(stmt, 0, 1)]


@pytest.mark.asyncio
async def test_secondary_key_breaks_ties_of_primary(people, make_repository):
    repo, _ = make_repository(people, Person)
    sorts = [
        SortQuery(attribute="age", direction=SortDirection.DESC),
        SortQuery(attribute="first-name", direction=SortDirection.ASC),
    ]

    rows = await _rows(repo, repo.sort(repo.get(), sorts))

    assert rows == [(30, "A"), (30, "B"), (20, "A"), (20, "Z")]


@pytest.mark.asyncio
async def test_key_order_defines_priority(people, make_repository):
    repo, _ = make_repository(people, Person)

    rows = await _rows(repo, repo.sort(repo.get(), SortQuery.parse_many("first-name,-age")))

    assert rows == [(30, "A"), (20, "A"), (30, "B"), (20, "Z")]


@pytest.mark.asyncio
async def test_sort_after_filter(people, make_repository):
    repo, _ = make_repository(people, Person)

    stmt = repo.filter(repo.get(), FilterQuery.parse("age", "30"))
    stmt = repo.sort(stmt, SortQuery.parse_many("-first-name"))

    assert await _rows(repo, stmt) == [(30, "B"), (30, "A")]


@pytest.mark.asyncio
@pytest.mark.parametrize("sorts", [None, []])
async def test_empty_sort_is_identity(people, make_repository, sorts):
    repo, _ = make_repository(people, Person)
    stmt = repo.get()

    assert repo.sort(stmt, sorts) is stmt


@pytest.mark.asyncio
async def test_unknown_sort_attribute(people, make_repository):
    repo, _ = make_repository(people, Person)

    with pytest.raises(InvalidSortTarget) as exc_info:
        repo.sort(repo.get(), [SortQuery(attribute="height")])

    assert exc_info.value.entity_name == "people"
    assert exc_info.value.attribute == "height"
