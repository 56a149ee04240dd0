import logging
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only, selectinload

from adapters.persistence.sql.filters import apply_filter
from adapters.persistence.sql.sorting import apply_sort
from domain.errors import AttributeNotFound, ConfigurationError, InvalidPageRequest, RelationshipNotFound
from domain.models.context import JsonApiContext
from domain.models.query import FilterQuery, SortQuery
from domain.models.resource import RelationshipDescriptor

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DefaultEntityRepository(Generic[T]):
    """
    SQLAlchemy implementation of domain.ports.repository.EntityRepository.

    The deferred query is a plain ``Select``: filter/sort/include only build it,
    page/get_by_id/count execute it.
    """

    def __init__(self, session: AsyncSession, model_cls: Type[T], context: JsonApiContext):
        self.session = session
        self.model_cls = model_cls
        self.context = context
        self.resource = context.resource_graph.get_resource(model_cls)

    @property
    def _id_column(self):
        return getattr(self.model_cls, self.resource.id_name)

    def get(self) -> Select:
        stmt = select(self.model_cls)
        fields = self.context.query_set.fields if self.context.query_set else None
        if not fields:
            return stmt

        columns = []
        for public_name in fields:
            attr = self.resource.attribute(public_name)
            if attr is None:
                raise AttributeNotFound(self.resource.entity_name, public_name)
            columns.append(getattr(self.model_cls, attr.internal_name))
        # primary key is always loaded by load_only
        return stmt.options(load_only(*columns))

    def filter(self, entities: Select, filter_query: Optional[FilterQuery]) -> Select:
        return apply_filter(entities, self.resource, self.context.resource_graph, filter_query)

    def sort(self, entities: Select, sort_queries: Optional[List[SortQuery]]) -> Select:
        return apply_sort(entities, self.resource, sort_queries)

    def include(self, entities: Select, relationship_name: str) -> Select:
        relationship = self.resource.relationship(relationship_name)
        if relationship is None:
            logger.warning(f"Include of unknown relationship {relationship_name} on {self.resource.entity_name}")
            raise RelationshipNotFound(self.resource.entity_name, relationship_name)
        return entities.options(selectinload(getattr(self.model_cls, relationship.internal_name)))

    async def page(self, entities: Select, page_size: int, page_number: int) -> List[T]:
        if page_size > 0:
            if page_number < 1:
                raise InvalidPageRequest(self.resource.entity_name, page_number)
            entities = entities.offset((page_number - 1) * page_size).limit(page_size)

        result = await self.session.execute(entities)
        return list(result.scalars().all())

    async def count(self, entities: Select) -> int:
        stmt = select(func.count()).select_from(entities.order_by(None).subquery())
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_by_id(self, id: Any) -> Optional[T]:
        return await self._single(self.get(), id)

    async def get_and_include(self, id: Any, relationship_name: str) -> Optional[T]:
        return await self._single(self.include(self.get(), relationship_name), id)

    async def _single(self, entities: Select, id: Any) -> Optional[T]:
        result = await self.session.execute(entities.where(self._id_column == id))
        return result.scalar_one_or_none()

    async def create(self, entity: T) -> T:
        self.session.add(entity)
        await self.session.commit()
        logger.info(f"Created {self.resource.entity_name} {getattr(entity, self.resource.id_name)}")
        return entity

    async def update(self, id: Any, entity: T) -> Optional[T]:
        """
        Partial update: only attributes and relationships marked on the context are copied.
        """
        stmt = self.get()
        # collections must be loaded before they can be replaced under asyncio
        for relationship in self.context.relationships_to_update:
            stmt = stmt.options(selectinload(getattr(self.model_cls, relationship.internal_name)))

        old_entity = await self._single(stmt, id)
        if old_entity is None:
            return None

        for attr in self.context.attributes_to_update:
            if attr.internal_name == self.resource.id_name:
                logger.warning(f"Ignoring update of identifier on {self.resource.entity_name} {id}")
                continue
            attr.set_value(old_entity, attr.get_value(entity))

        for relationship, value in self.context.relationships_to_update.items():
            relationship.set_value(old_entity, value)

        await self.session.commit()
        logger.info(f"Updated {self.resource.entity_name} {id}")
        return old_entity

    async def update_relationships(
        self, parent: Any, relationship: RelationshipDescriptor, related_ids: Iterable[str]
    ) -> None:
        if self.context.processor_factory is None:
            raise ConfigurationError("No relationship processor factory is configured")
        processor = self.context.processor_factory.get_processor(relationship.target_type)
        await processor.update_relationships(parent, relationship, related_ids)

    async def delete(self, id: Any) -> bool:
        entity = await self.get_by_id(id)
        if entity is None:
            return False

        await self.session.delete(entity)
        await self.session.commit()
        logger.info(f"Deleted {self.resource.entity_name} {id}")
        return True
