from typing import List, Optional

from sqlalchemy import Select

from domain.errors import InvalidSortTarget
from domain.models.query import SortDirection, SortQuery
from domain.models.resource import ResourceDescriptor


def apply_sort(stmt: Select, resource: ResourceDescriptor, sort_queries: Optional[List[SortQuery]]) -> Select:
    """
    First query is the primary key of the ordering, each later one breaks ties of those before it.
    Successive order_by() calls append keys, so the order of the list is the priority.
    """
    if not sort_queries:
        return stmt

    for sort_query in sort_queries:
        attr = resource.attribute(sort_query.attribute)
        if attr is None:
            raise InvalidSortTarget(resource.entity_name, sort_query.attribute)

        column = getattr(resource.entity_type, attr.internal_name)
        if sort_query.direction == SortDirection.DESC:
            stmt = stmt.order_by(column.desc())
        else:
            stmt = stmt.order_by(column.asc())

    return stmt
