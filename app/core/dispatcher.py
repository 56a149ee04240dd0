import logging
from typing import Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from adapters.persistence.sql.generic_processor import GenericProcessor
from domain.errors import ConfigurationError
from domain.ports.processor import RelationshipProcessor

logger = logging.getLogger(__name__)

ProcessorConstructor = Callable[[AsyncSession], RelationshipProcessor]


class ProcessorRegistry:
    """
    Relationship processor dispatch, keyed by the relationship's target type.
    Filled once at startup; bound to a request's session at call time.
    """

    def __init__(self):
        self._constructors: Dict[type, ProcessorConstructor] = {}

    def register(self, target_type: type, constructor: ProcessorConstructor):
        """Register a processor constructor for relationships pointing at target_type."""
        self._constructors[target_type] = constructor

    def register_generic(self, *target_types: type):
        """Register the default GenericProcessor for each type."""
        for target_type in target_types:
            self.register(target_type, lambda session, t=target_type: GenericProcessor(session, t))

    def constructor_for(self, target_type: type) -> ProcessorConstructor:
        constructor = self._constructors.get(target_type)
        if constructor is None:
            logger.error(f"Dispatcher: no relationship processor registered for {target_type.__name__}")
            raise ConfigurationError(f"No relationship processor registered for type {target_type.__name__}")
        return constructor

    def bind(self, session: AsyncSession) -> "BoundProcessorFactory":
        return BoundProcessorFactory(self, session)


class BoundProcessorFactory:
    """ProcessorFactory for one request; processors are built once per target type."""

    def __init__(self, registry: ProcessorRegistry, session: AsyncSession):
        self.registry = registry
        self.session = session
        self._processors: Dict[type, RelationshipProcessor] = {}

    def get_processor(self, target_type: type) -> RelationshipProcessor:
        processor = self._processors.get(target_type)
        if processor is None:
            processor = self.registry.constructor_for(target_type)(self.session)
            logger.debug(f"Dispatcher: built {type(processor).__name__} for {target_type.__name__}")
            self._processors[target_type] = processor
        return processor


# Singleton Instance
processor_registry = ProcessorRegistry()
