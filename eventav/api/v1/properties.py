"""
Read-only property endpoints.

Endpoints:
    GET /api/v1/properties                        — all properties, by name
    GET /api/v1/properties/code/{property_code}   — one property by its code
    GET /api/v1/properties/{property_id}/context  — property + rooms + inventory summary + labor rules

The listing feeds the UI's property picker, which is how a client obtains the
property_id every chat request is scoped to. The context endpoint shows what
the assistant will see for a property.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from eventav.models.property import Property, PropertyContext
from eventav.services.property_repository import PropertyRepository, get_property_context

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/properties", tags=["properties"])


def get_repository(request: Request) -> PropertyRepository:
    """FastAPI dependency returning the repository created at startup."""
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise HTTPException(status_code=503, detail="Property store unavailable")
    return repository


@router.get("", response_model=list[Property])
async def list_properties(
    repository: PropertyRepository = Depends(get_repository),
) -> list[Property]:
    properties = await repository.list_properties()
    logger.info("properties_listed", count=len(properties))
    return properties


@router.get("/code/{property_code}", response_model=Property)
async def property_by_code(
    property_code: str,
    repository: PropertyRepository = Depends(get_repository),
) -> Property:
    prop = await repository.get_property_by_code(property_code)
    if prop is None:
        raise HTTPException(status_code=404, detail=f"Property {property_code} not found")
    return prop


@router.get("/{property_id}/context", response_model=PropertyContext)
async def property_context(
    property_id: int,
    repository: PropertyRepository = Depends(get_repository),
) -> PropertyContext:
    context = await get_property_context(repository, property_id)
    if context is None:
        raise HTTPException(status_code=404, detail=f"Property {property_id} not found")
    return context
