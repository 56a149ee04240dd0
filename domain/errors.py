from typing import Any, Dict, Optional


class JsonApiError(Exception):
    """
    Base error for the persistence-access layer.
    Carries everything the HTTP boundary needs to render a JSON:API error object.
    """

    status: int = 500
    title: str = "Internal Server Error"

    def __init__(self, detail: str, title: Optional[str] = None, status: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        if title is not None:
            self.title = title
        if status is not None:
            self.status = status

    def to_error_object(self) -> Dict[str, Any]:
        return {"status": str(self.status), "title": self.title, "detail": self.detail}


class ClientInputError(JsonApiError):
    """Raised for bad query/request input. Maps to 400."""

    status = 400

    def __init__(self, entity_name: str, name: str, title: str, detail: str):
        super().__init__(detail, title=title)
        self.entity_name = entity_name
        self.name = name


class InvalidFilterTarget(ClientInputError):
    def __init__(self, entity_name: str, attribute: str):
        super().__init__(
            entity_name,
            attribute,
            title="Invalid filter target",
            detail=f"{entity_name} does not have a filterable attribute named '{attribute}'",
        )
        self.attribute = attribute


class InvalidFilterValue(ClientInputError):
    def __init__(self, entity_name: str, attribute: str, value: Any):
        super().__init__(
            entity_name,
            attribute,
            title="Invalid filter value",
            detail=f"Could not convert '{value}' for filter on {entity_name}.{attribute}",
        )
        self.attribute = attribute
        self.value = value


class InvalidFilterOperation(ClientInputError):
    def __init__(self, entity_name: str, attribute: str, operation: str):
        super().__init__(
            entity_name,
            attribute,
            title="Invalid filter operation",
            detail=f"'{operation}' cannot be applied to {entity_name}.{attribute}",
        )
        self.attribute = attribute
        self.operation = operation


class InvalidSortTarget(ClientInputError):
    def __init__(self, entity_name: str, attribute: str):
        super().__init__(
            entity_name,
            attribute,
            title="Invalid sort target",
            detail=f"{entity_name} does not have a sortable attribute named '{attribute}'",
        )
        self.attribute = attribute


class AttributeNotFound(ClientInputError):
    def __init__(self, entity_name: str, attribute: str):
        super().__init__(
            entity_name,
            attribute,
            title="Invalid attribute",
            detail=f"{entity_name} does not have an attribute named '{attribute}'",
        )
        self.attribute = attribute


class RelationshipNotFound(ClientInputError):
    def __init__(self, entity_name: str, relationship_name: str):
        super().__init__(
            entity_name,
            relationship_name,
            title=f"Invalid relationship {relationship_name} on {entity_name}",
            detail=f"{entity_name} does not have a relationship named {relationship_name}",
        )
        self.relationship_name = relationship_name


class InvalidPageRequest(ClientInputError):
    def __init__(self, entity_name: str, page_number: int):
        super().__init__(
            entity_name,
            "page[number]",
            title="Invalid page request",
            detail=f"Page number must be 1 or greater, got {page_number}",
        )
        self.page_number = page_number


class InvalidRelatedId(ClientInputError):
    def __init__(self, entity_name: str, related_id: Any):
        super().__init__(
            entity_name,
            "id",
            title="Invalid resource identifier",
            detail=f"'{related_id}' is not a valid {entity_name} id",
        )
        self.related_id = related_id


class ConfigurationError(JsonApiError):
    """Setup bug (missing registration). Never retried."""

    status = 500
    title = "Configuration error"
