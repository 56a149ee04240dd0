import operator
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import Select, String, inspect
from sqlalchemy.sql.elements import ColumnElement

from domain.errors import InvalidFilterOperation, InvalidFilterTarget, InvalidFilterValue
from domain.models.query import FilterOperation, FilterQuery
from domain.models.resource import AttrDescriptor, ResourceDescriptor, ResourceGraph

_OPERATORS = {
    FilterOperation.EQ: operator.eq,
    FilterOperation.NE: operator.ne,
    FilterOperation.LT: operator.lt,
    FilterOperation.LE: operator.le,
    FilterOperation.GT: operator.gt,
    FilterOperation.GE: operator.ge,
    FilterOperation.LIKE: lambda column, value: column.contains(str(value)),
}

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


def _convert(python_type: type, raw: str) -> Any:
    if python_type is bool:
        lowered = raw.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(raw)
    if python_type is datetime:
        return datetime.fromisoformat(raw)
    if python_type is date:
        return date.fromisoformat(raw)
    return python_type(raw)


def _column(resource: ResourceDescriptor, attr: AttrDescriptor):
    return inspect(resource.entity_type).column_attrs[attr.internal_name].columns[0]


def coerce_value(resource: ResourceDescriptor, attr: AttrDescriptor, value: Any) -> Any:
    """
    Query-string values arrive as text; convert them to the column's Python type.
    Non-string values are assumed to be typed already.
    """
    if not isinstance(value, str):
        return value

    column = _column(resource, attr)
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is str:
        return value

    try:
        return _convert(python_type, value)
    except (ValueError, TypeError, ArithmeticError):
        raise InvalidFilterValue(resource.entity_name, attr.public_name, value) from None


def _comparison(resource: ResourceDescriptor, attr: AttrDescriptor, filter_query: FilterQuery) -> ColumnElement:
    column = getattr(resource.entity_type, attr.internal_name)
    if filter_query.operation == FilterOperation.LIKE:
        # substring match is only defined for text columns
        if not isinstance(_column(resource, attr).type, String):
            raise InvalidFilterOperation(resource.entity_name, attr.public_name, filter_query.operation.value)
        value = filter_query.value
    else:
        value = coerce_value(resource, attr, filter_query.value)
    return _OPERATORS[filter_query.operation](column, value)


def _attribute_predicate(resource: ResourceDescriptor, filter_query: FilterQuery) -> ColumnElement:
    attr = resource.attribute(filter_query.attribute)
    if attr is None:
        raise InvalidFilterTarget(resource.entity_name, filter_query.attribute)
    return _comparison(resource, attr, filter_query)


def _related_attribute_predicate(
    resource: ResourceDescriptor, graph: ResourceGraph, filter_query: FilterQuery
) -> ColumnElement:
    relationship = graph.resolve_relationship(resource, filter_query.relationship)
    if relationship is None:
        raise InvalidFilterTarget(
            resource.entity_name, f"{filter_query.relationship}.{filter_query.attribute}"
        )

    # The attribute belongs to the related resource, not the one being queried.
    related = graph.get_resource(relationship.target_type)
    attr = graph.resolve_attribute(related, filter_query.attribute)
    if attr is None:
        raise InvalidFilterTarget(related.entity_name, filter_query.attribute)

    condition = _comparison(related, attr, filter_query)
    rel_attr = getattr(resource.entity_type, relationship.internal_name)
    if relationship.is_has_many:
        return rel_attr.any(condition)
    return rel_attr.has(condition)


def apply_filter(
    stmt: Select, resource: ResourceDescriptor, graph: ResourceGraph, filter_query: Optional[FilterQuery]
) -> Select:
    if filter_query is None:
        return stmt

    if filter_query.is_attribute_of_relationship:
        return stmt.where(_related_attribute_predicate(resource, graph, filter_query))

    return stmt.where(_attribute_predicate(resource, filter_query))
