from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.errors import ConfigurationError


class AttrDescriptor(BaseModel):
    """
    Binds a public (JSON:API) attribute name to the mapped attribute on the entity.
    """

    model_config = ConfigDict(frozen=True)

    public_name: str
    internal_name: str

    def get_value(self, entity: Any) -> Any:
        return getattr(entity, self.internal_name)

    def set_value(self, entity: Any, value: Any) -> None:
        setattr(entity, self.internal_name, value)


class RelationshipDescriptor(BaseModel):
    """
    Binds a public relationship name to its internal storage name and target entity type.
    """

    model_config = ConfigDict(frozen=True)

    public_name: str
    internal_name: str
    target_type: type
    is_has_many: bool = False

    def get_value(self, entity: Any) -> Any:
        return getattr(entity, self.internal_name)

    def set_value(self, entity: Any, value: Any) -> None:
        setattr(entity, self.internal_name, value)


class ResourceDescriptor(BaseModel):
    entity_name: str
    entity_type: type
    id_name: str = "id"
    attributes: List[AttrDescriptor] = Field(default_factory=list)
    relationships: List[RelationshipDescriptor] = Field(default_factory=list)

    def attribute(self, public_name: str) -> Optional[AttrDescriptor]:
        return next((a for a in self.attributes if a.public_name == public_name), None)

    def attribute_by_internal(self, internal_name: str) -> Optional[AttrDescriptor]:
        return next((a for a in self.attributes if a.internal_name == internal_name), None)

    def relationship(self, public_name: str) -> Optional[RelationshipDescriptor]:
        return next((r for r in self.relationships if r.public_name == public_name), None)


class ResourceGraph:
    """
    Read-only view over the registered resources.
    Populated once at startup (see adapters.persistence.sql.resource_graph).
    """

    def __init__(self, resources: Optional[List[ResourceDescriptor]] = None):
        self._by_type: Dict[type, ResourceDescriptor] = {}
        self._by_name: Dict[str, ResourceDescriptor] = {}
        for resource in resources or []:
            self.add(resource)

    def add(self, resource: ResourceDescriptor) -> None:
        self._by_type[resource.entity_type] = resource
        self._by_name[resource.entity_name] = resource

    @property
    def resources(self) -> List[ResourceDescriptor]:
        return list(self._by_type.values())

    def get_resource(self, entity_type: type) -> ResourceDescriptor:
        resource = self._by_type.get(entity_type)
        if resource is None:
            raise ConfigurationError(f"Resource for type {entity_type.__name__} has not been registered")
        return resource

    def get_resource_by_name(self, entity_name: str) -> Optional[ResourceDescriptor]:
        return self._by_name.get(entity_name)

    def resolve_attribute(self, resource: ResourceDescriptor, public_name: str) -> Optional[AttrDescriptor]:
        return resource.attribute(public_name)

    def resolve_relationship(
        self, resource: ResourceDescriptor, public_name: str
    ) -> Optional[RelationshipDescriptor]:
        return resource.relationship(public_name)
