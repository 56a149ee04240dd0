import logging
from typing import Any, Iterable, List, Optional

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.persistence.sql.resource_graph import dasherize
from domain.errors import InvalidRelatedId
from domain.models.resource import RelationshipDescriptor

logger = logging.getLogger(__name__)


class GenericProcessor:
    """
    Replaces a relationship of ``parent`` with the ``target_type`` entities whose ids are given.
    Ids arrive as strings (JSON:API resource identifiers).
    """

    def __init__(self, session: AsyncSession, target_type: type, entity_name: Optional[str] = None):
        self.session = session
        self.target_type = target_type
        mapper = inspect(target_type)
        self.entity_name = entity_name or dasherize(mapper.local_table.name)
        self._pk = mapper.primary_key[0]

    def _convert_id(self, raw: str) -> Any:
        try:
            python_type = self._pk.type.python_type
        except NotImplementedError:
            return raw
        if isinstance(raw, python_type):
            return raw
        try:
            return python_type(raw)
        except (ValueError, TypeError, ArithmeticError):
            logger.warning(f"Rejected {self.entity_name} id {raw!r}")
            raise InvalidRelatedId(self.entity_name, raw) from None

    async def _load(self, related_ids: List[str]) -> List[Any]:
        if not related_ids:
            return []
        ids = [self._convert_id(raw) for raw in related_ids]
        stmt = select(self.target_type).where(self._pk.in_(ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_relationships(
        self, parent: Any, relationship: RelationshipDescriptor, related_ids: Iterable[str]
    ) -> None:
        entities = await self._load(list(related_ids))

        # the current value must be loaded before it can be replaced
        await self.session.refresh(parent, attribute_names=[relationship.internal_name])

        if relationship.is_has_many:
            relationship.set_value(parent, entities)
        else:
            relationship.set_value(parent, entities[0] if entities else None)

        await self.session.commit()
        logger.info(
            f"Replaced {type(parent).__name__}.{relationship.internal_name} "
            f"with {len(entities)} {self.target_type.__name__}"
        )
