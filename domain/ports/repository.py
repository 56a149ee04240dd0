from typing import Any, Generic, Iterable, List, Optional, Protocol, TypeVar

from domain.models.query import FilterQuery, SortQuery
from domain.models.resource import RelationshipDescriptor, ResourceDescriptor

T = TypeVar("T")
Q = TypeVar("Q")


class EntityRepository(Protocol, Generic[T, Q]):
    """
    Generic Repository Interface.
    T is the entity type, Q the store's deferred query type.
    Composition methods are synchronous; anything touching the store is async.
    """

    resource: ResourceDescriptor

    def get(self) -> Q:
        """Base query, narrowed to the requested fields."""
        ...

    def filter(self, entities: Q, filter_query: Optional[FilterQuery]) -> Q: ...

    def sort(self, entities: Q, sort_queries: Optional[List[SortQuery]]) -> Q: ...

    def include(self, entities: Q, relationship_name: str) -> Q: ...

    async def page(self, entities: Q, page_size: int, page_number: int) -> List[T]:
        """Terminal: executes the query."""
        ...

    async def count(self, entities: Q) -> int:
        """Number of rows the query matches, ignoring ordering and paging."""
        ...

    async def get_by_id(self, id: Any) -> Optional[T]: ...

    async def get_and_include(self, id: Any, relationship_name: str) -> Optional[T]: ...

    async def create(self, entity: T) -> T: ...

    async def update(self, id: Any, entity: T) -> Optional[T]: ...

    async def delete(self, id: Any) -> bool: ...

    async def update_relationships(
        self, parent: Any, relationship: RelationshipDescriptor, related_ids: Iterable[str]
    ) -> None: ...
