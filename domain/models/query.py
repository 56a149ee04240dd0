import enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class FilterOperation(str, enum.Enum):
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"
    LIKE = "like"  # substring match


_OPERATIONS = {op.value for op in FilterOperation}


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class FilterQuery(BaseModel):
    """
    One filter clause, e.g. ``filter[author.name]=like:Jane``.
    ``relationship`` is the qualifier before the dot, if any.
    """

    attribute: str
    value: Any
    operation: FilterOperation = FilterOperation.EQ
    relationship: Optional[str] = None

    @property
    def is_attribute_of_relationship(self) -> bool:
        return self.relationship is not None

    @classmethod
    def parse(cls, key: str, raw_value: str) -> "FilterQuery":
        relationship = None
        attribute = key
        if "." in key:
            relationship, attribute = key.split(".", 1)

        operation = FilterOperation.EQ
        value = raw_value
        prefix, sep, rest = raw_value.partition(":")
        if sep and prefix in _OPERATIONS:
            operation = FilterOperation(prefix)
            value = rest

        return cls(attribute=attribute, value=value, operation=operation, relationship=relationship)


class SortQuery(BaseModel):
    attribute: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse_many(cls, raw: str) -> List["SortQuery"]:
        """``-age,name`` -> [(age, desc), (name, asc)]"""
        queries = []
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            if part.startswith("-"):
                queries.append(cls(attribute=part[1:], direction=SortDirection.DESC))
            else:
                queries.append(cls(attribute=part, direction=SortDirection.ASC))
        return queries


class PageRequest(BaseModel):
    page_size: int = 0  # <= 0 disables paging
    page_number: int = 1


class PagedResult(BaseModel):
    """One page of entities plus the total the unpaged query matches."""

    items: List[Any]
    total: int
    page: PageRequest


class QuerySet(BaseModel):
    filters: List[FilterQuery] = Field(default_factory=list)
    sort_parameters: List[SortQuery] = Field(default_factory=list)
    include_relationships: List[str] = Field(default_factory=list)
    fields: List[str] = Field(default_factory=list)
    page_size: Optional[int] = None
    page_number: int = 1
