from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from adapters.persistence.sql.base_repository import DefaultEntityRepository
from adapters.persistence.sql.resource_graph import ResourceGraphBuilder
from app.core.config import settings
from app.core.dispatcher import ProcessorRegistry, processor_registry
from application.services.resource_service import ResourceService
from domain.models.context import JsonApiContext
from domain.models.query import QuerySet
from domain.models.resource import ResourceGraph


class Container:
    """
    Composition root. Resources and processors are registered once at startup;
    contexts, repositories and services are built per request around that request's session.
    """

    def __init__(self, registry: Optional[ProcessorRegistry] = None):
        self.processor_registry = registry or ProcessorRegistry()
        self._graph_builder = ResourceGraphBuilder()
        # Lazy Singleton
        self._resource_graph: Optional[ResourceGraph] = None

    def register_resource(self, model_cls: type, entity_name: Optional[str] = None, generic_processor: bool = True):
        self._graph_builder.add_resource(model_cls, entity_name)
        if generic_processor:
            self.processor_registry.register_generic(model_cls)
        self._resource_graph = None

    @property
    def resource_graph(self) -> ResourceGraph:
        if not self._resource_graph:
            self._resource_graph = self._graph_builder.build()
        return self._resource_graph

    def context(self, session: AsyncSession, query_set: Optional[QuerySet] = None) -> JsonApiContext:
        return JsonApiContext(
            resource_graph=self.resource_graph,
            query_set=query_set,
            processor_factory=self.processor_registry.bind(session),
        )

    def repository(
        self, session: AsyncSession, model_cls: type, context: Optional[JsonApiContext] = None
    ) -> DefaultEntityRepository:
        return DefaultEntityRepository(session, model_cls, context or self.context(session))

    def resource_service(
        self, session: AsyncSession, model_cls: type, context: Optional[JsonApiContext] = None
    ) -> ResourceService:
        return ResourceService(
            self.repository(session, model_cls, context),
            default_page_size=settings.DEFAULT_PAGE_SIZE,
            max_page_size=settings.MAX_PAGE_SIZE,
        )


# Global Container Instance
container = Container(processor_registry)


def get_resource_graph() -> ResourceGraph:
    """FastAPI dependency for the application's resource graph."""
    return container.resource_graph
