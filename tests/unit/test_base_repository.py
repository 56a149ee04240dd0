import pytest
from sqlalchemy import func, inspect, select

from domain.errors import AttributeNotFound, RelationshipNotFound
from domain.models.query import QuerySet
from support.models import Article, Comment, Person


async def _article_count(session):
    return (await session.execute(select(func.count()).select_from(Article))).scalar_one()


@pytest.mark.asyncio
async def test_get_by_id(blog, make_repository):
    repo, _ = make_repository(blog, Article)

    article = await repo.get_by_id(2)

    assert article.title == "Async Python"
    assert await repo.get_by_id(99) is None


@pytest.mark.asyncio
async def test_get_narrows_to_requested_fields(blog, make_repository):
    repo, _ = make_repository(blog, Article, QuerySet(fields=["title", "word-count"]))

    article = await repo.get_by_id(1)
    unloaded = inspect(article).unloaded

    assert article.id == 1
    assert article.title == "Intro to SQL"
    assert "word_count" not in unloaded
    assert "body" in unloaded


@pytest.mark.asyncio
async def test_unknown_field_selection(blog, make_repository):
    repo, _ = make_repository(blog, Article, QuerySet(fields=["headline"]))

    with pytest.raises(AttributeNotFound):
        repo.get()


@pytest.mark.asyncio
async def test_include_populates_relationship(blog, make_repository):
    repo, _ = make_repository(blog, Article)

    plain = await repo.get_by_id(1)
    assert "comments" in inspect(plain).unloaded

    blog.expunge_all()
    article = await repo.get_and_include(1, "comments")

    assert "comments" not in inspect(article).unloaded
    assert sorted(c.body for c in article.comments) == ["Great read", "Thanks"]


@pytest.mark.asyncio
async def test_include_on_list(blog, make_repository):
    repo, _ = make_repository(blog, Article)

    articles = await repo.page(repo.include(repo.get(), "author"), 0, 1)

    assert {a.author.first_name for a in articles} == {"Jane", "John"}


@pytest.mark.asyncio
async def test_include_unknown_relationship(blog, make_repository):
    repo, _ = make_repository(blog, Article)

    with pytest.raises(RelationshipNotFound) as exc_info:
        repo.include(repo.get(), "unknownRel")

    assert exc_info.value.entity_name == "articles"
    assert exc_info.value.relationship_name == "unknownRel"
    assert exc_info.value.status == 400

    with pytest.raises(RelationshipNotFound):
        await repo.get_and_include(1, "unknownRel")


@pytest.mark.asyncio
async def test_create_assigns_identifier(blog, make_repository):
    repo, _ = make_repository(blog, Article)

    created = await repo.create(Article(title="New post", word_count=10, author_id=1))

    assert created.id is not None
    assert await _article_count(blog) == 5
    blog.expunge_all()
    assert (await repo.get_by_id(created.id)).title == "New post"


@pytest.mark.asyncio
async def test_update_missing_entity_is_a_no_op(blog, make_repository):
    repo, context = make_repository(blog, Article)
    context.mark_attribute_for_update(repo.resource, "title")

    result = await repo.update(99, Article(title="Ghost"))

    assert result is None
    assert await _article_count(blog) == 4
    titles = (await blog.execute(select(Article.title))).scalars().all()
    assert "Ghost" not in titles


@pytest.mark.asyncio
async def test_update_only_touches_marked_attributes(blog, make_repository):
    repo, context = make_repository(blog, Article)
    context.mark_attribute_for_update(repo.resource, "title")
    context.mark_attribute_for_update(repo.resource, "word-count")

    patch = Article(title="Intro to SQL, 2nd ed.", word_count=1200, body="overwritten?")
    updated = await repo.update(1, patch)

    assert updated.title == "Intro to SQL, 2nd ed."

    blog.expunge_all()
    reloaded = await repo.get_by_id(1)
    assert reloaded.title == "Intro to SQL, 2nd ed."
    assert reloaded.word_count == 1200
    assert reloaded.body == "Tables and rows"


@pytest.mark.asyncio
async def test_update_assigns_marked_relationships(blog, make_repository):
    person_repo, _ = make_repository(blog, Person)
    john = await person_repo.get_by_id(2)

    repo, context = make_repository(blog, Article)
    context.mark_relationship_for_update(repo.resource, "author", john)

    await repo.update(3, Article())

    blog.expunge_all()
    reloaded = await repo.get_and_include(3, "author")
    assert reloaded.author.first_name == "John"
    assert reloaded.title == "Draft notes"


@pytest.mark.asyncio
async def test_identifier_cannot_be_marked_for_update(blog, make_repository):
    repo, context = make_repository(blog, Article)

    with pytest.raises(AttributeNotFound):
        context.mark_attribute_for_update(repo.resource, "id")


@pytest.mark.asyncio
async def test_delete(blog, make_repository):
    repo, _ = make_repository(blog, Article)

    assert await repo.delete(99) is False
    assert await _article_count(blog) == 4

    assert await repo.delete(1) is True
    assert await _article_count(blog) == 3
    assert await repo.get_by_id(1) is None
    # delete-orphan cascade
    remaining = (await blog.execute(select(Comment.article_id))).scalars().all()
    assert 1 not in remaining
