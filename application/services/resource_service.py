import logging
from typing import Any, Iterable, List, Optional

from domain.errors import RelationshipNotFound
from domain.models.query import PagedResult, PageRequest, QuerySet
from domain.ports.repository import EntityRepository

logger = logging.getLogger(__name__)


class ResourceService:
    """
    Runs the request-level pipeline over one repository:
    base query -> filters -> sort -> includes -> page.
    """

    def __init__(self, repository: EntityRepository, default_page_size: int = 0, max_page_size: int = 0):
        self.repository = repository
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def _page_request(self, query_set: QuerySet) -> PageRequest:
        page_size = query_set.page_size if query_set.page_size is not None else self.default_page_size
        if self.max_page_size > 0 and (page_size <= 0 or page_size > self.max_page_size):
            page_size = self.max_page_size
        return PageRequest(page_size=page_size, page_number=query_set.page_number)

    def _filtered(self, query_set: QuerySet):
        entities = self.repository.get()
        for filter_query in query_set.filters:
            entities = self.repository.filter(entities, filter_query)
        return entities

    def _ordered_with_includes(self, entities, query_set: QuerySet):
        entities = self.repository.sort(entities, query_set.sort_parameters)
        for relationship_name in query_set.include_relationships:
            entities = self.repository.include(entities, relationship_name)
        return entities

    async def get_list(self, query_set: Optional[QuerySet] = None) -> List[Any]:
        query_set = query_set or QuerySet()
        page = self._page_request(query_set)
        entities = self._ordered_with_includes(self._filtered(query_set), query_set)
        return await self.repository.page(entities, page.page_size, page.page_number)

    async def get_page(self, query_set: Optional[QuerySet] = None) -> PagedResult:
        """Like get_list, plus the number of entities the filters match across all pages."""
        query_set = query_set or QuerySet()
        page = self._page_request(query_set)
        filtered = self._filtered(query_set)

        items = await self.repository.page(
            self._ordered_with_includes(filtered, query_set), page.page_size, page.page_number
        )
        total = await self.repository.count(filtered)
        return PagedResult(items=items, total=total, page=page)

    async def get(self, id: Any, include: Optional[str] = None) -> Optional[Any]:
        if include:
            return await self.repository.get_and_include(id, include)
        return await self.repository.get_by_id(id)

    async def get_relationship(self, id: Any, relationship_name: str) -> Optional[Any]:
        """Returns the related entity (or list) of one relationship, None when the parent is absent."""
        relationship = self.repository.resource.relationship(relationship_name)
        if relationship is None:
            raise RelationshipNotFound(self.repository.resource.entity_name, relationship_name)

        entity = await self.repository.get_and_include(id, relationship_name)
        if entity is None:
            return None
        return relationship.get_value(entity)

    async def create(self, entity: Any) -> Any:
        return await self.repository.create(entity)

    async def update(self, id: Any, entity: Any) -> Optional[Any]:
        return await self.repository.update(id, entity)

    async def delete(self, id: Any) -> bool:
        return await self.repository.delete(id)

    async def update_relationships(self, id: Any, relationship_name: str, related_ids: Iterable[str]) -> Optional[Any]:
        relationship = self.repository.resource.relationship(relationship_name)
        if relationship is None:
            raise RelationshipNotFound(self.repository.resource.entity_name, relationship_name)

        parent = await self.repository.get_and_include(id, relationship_name)
        if parent is None:
            logger.info(f"update_relationships: {self.repository.resource.entity_name} {id} not found")
            return None

        await self.repository.update_relationships(parent, relationship, related_ids)
        return parent
