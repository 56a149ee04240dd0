from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from domain.errors import AttributeNotFound, RelationshipNotFound
from domain.models.query import QuerySet
from domain.models.resource import AttrDescriptor, RelationshipDescriptor, ResourceDescriptor, ResourceGraph
from domain.ports.processor import ProcessorFactory


@dataclass
class JsonApiContext:
    """
    Per-request state shared by the repository and the service layer.
    Never shared between concurrent requests.
    """

    resource_graph: ResourceGraph
    query_set: Optional[QuerySet] = None
    processor_factory: Optional[ProcessorFactory] = None
    attributes_to_update: Set[AttrDescriptor] = field(default_factory=set)
    relationships_to_update: Dict[RelationshipDescriptor, Any] = field(default_factory=dict)

    def mark_attribute_for_update(self, resource: ResourceDescriptor, public_name: str) -> AttrDescriptor:
        attr = self.resource_graph.resolve_attribute(resource, public_name)
        if attr is None:
            raise AttributeNotFound(resource.entity_name, public_name)
        self.attributes_to_update.add(attr)
        return attr

    def mark_relationship_for_update(
        self, resource: ResourceDescriptor, public_name: str, value: Any
    ) -> RelationshipDescriptor:
        relationship = self.resource_graph.resolve_relationship(resource, public_name)
        if relationship is None:
            raise RelationshipNotFound(resource.entity_name, public_name)
        self.relationships_to_update[relationship] = value
        return relationship
