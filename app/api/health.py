import logging

from fastapi import APIRouter, Depends
from sqlalchemy import literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.container import get_resource_graph
from app.core.database import get_db
from domain.errors import JsonApiError
from domain.models.resource import ResourceGraph

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db), resource_graph: ResourceGraph = Depends(get_resource_graph)
):
    """
    Reports whether the store answers and which resources are exposed over it.
    """
    try:
        await db.execute(select(literal(1)))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Store unreachable: {e}")
        raise JsonApiError("The backing store did not answer", title="Store unavailable", status=503)

    return {
        "status": "ok",
        "store": "reachable",
        "version": settings.VERSION,
        "resources": sorted(r.entity_name for r in resource_graph.resources),
    }
