import logging
from typing import Callable, List, Optional

from sqlalchemy import inspect

from domain.errors import ConfigurationError
from domain.models.resource import AttrDescriptor, RelationshipDescriptor, ResourceDescriptor, ResourceGraph

logger = logging.getLogger(__name__)


def dasherize(name: str) -> str:
    return name.replace("_", "-")


def build_resource(
    model_cls: type,
    entity_name: Optional[str] = None,
    naming: Callable[[str], str] = dasherize,
) -> ResourceDescriptor:
    """
    Derives a ResourceDescriptor from the SQLAlchemy mapper of model_cls.
    Primary key columns are the resource id, not attributes.
    """
    mapper = inspect(model_cls, raiseerr=False)
    if mapper is None:
        raise ConfigurationError(f"{model_cls.__name__} is not a mapped SQLAlchemy class")

    pk_names = {mapper.get_property_by_column(col).key for col in mapper.primary_key}
    if len(pk_names) != 1:
        raise ConfigurationError(f"{model_cls.__name__} must have exactly one primary key column")
    id_name = next(iter(pk_names))

    attributes = [
        AttrDescriptor(public_name=naming(prop.key), internal_name=prop.key)
        for prop in mapper.column_attrs
        if prop.key not in pk_names
    ]
    relationships = [
        RelationshipDescriptor(
            public_name=naming(rel.key),
            internal_name=rel.key,
            target_type=rel.mapper.class_,
            is_has_many=bool(rel.uselist),
        )
        for rel in mapper.relationships
    ]

    return ResourceDescriptor(
        entity_name=entity_name or naming(mapper.local_table.name),
        entity_type=model_cls,
        id_name=id_name,
        attributes=attributes,
        relationships=relationships,
    )


class ResourceGraphBuilder:
    def __init__(self, naming: Callable[[str], str] = dasherize):
        self.naming = naming
        self._resources: List[ResourceDescriptor] = []

    def add_resource(self, model_cls: type, entity_name: Optional[str] = None) -> "ResourceGraphBuilder":
        resource = build_resource(model_cls, entity_name, self.naming)
        logger.debug(
            f"Registered resource {resource.entity_name} "
            f"({len(resource.attributes)} attributes, {len(resource.relationships)} relationships)"
        )
        self._resources.append(resource)
        return self

    def build(self) -> ResourceGraph:
        return ResourceGraph(self._resources)
