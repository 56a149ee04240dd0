from typing import Any, Iterable, Protocol

from domain.models.resource import RelationshipDescriptor


class RelationshipProcessor(Protocol):
    """
    Updates one relationship of a parent entity, specialised for the relationship's target type.
    """

    async def update_relationships(
        self, parent: Any, relationship: RelationshipDescriptor, related_ids: Iterable[str]
    ) -> None: ...


class ProcessorFactory(Protocol):
    def get_processor(self, target_type: type) -> RelationshipProcessor:
        """Raises ConfigurationError when no processor is registered for target_type."""
        ...
