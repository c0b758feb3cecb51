"""Resource catalog endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from labhub.api.deps import (
    get_resource_catalog,
    require_resource_manager,
    require_resource_viewer,
)
from labhub.core.exceptions import NotFoundError
from labhub.models.resource import Resource
from labhub.schemas.resource import (
    ResourceCreate,
    ResourceKind,
    ResourceResponse,
    ResourceStatus,
    ResourceStatusUpdate,
)
from labhub.schemas.user import Requester
from labhub.services.booking_store import SqlAlchemyResourceCatalog

router = APIRouter()

Catalog = Annotated[SqlAlchemyResourceCatalog, Depends(get_resource_catalog)]


@router.post("/", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    resource_data: ResourceCreate,
    current_user: Annotated[Requester, Depends(require_resource_manager)],
    catalog: Catalog,
) -> Resource:
    """Add a lab, equipment item or classroom to the catalog."""
    resource = Resource(**resource_data.model_dump(mode="json"))
    return await catalog.add_resource(resource)


@router.get("/", response_model=list[ResourceResponse])
async def list_resources(
    current_user: Annotated[Requester, Depends(require_resource_viewer)],
    catalog: Catalog,
    kind: ResourceKind | None = None,
    status_filter: ResourceStatus | None = Query(default=None, alias="status"),
) -> list[Resource]:
    return await catalog.list_resources(
        kind=kind.value if kind else None,
        status=status_filter.value if status_filter else None,
    )


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: UUID,
    current_user: Annotated[Requester, Depends(require_resource_viewer)],
    catalog: Catalog,
) -> Resource:
    resource = await catalog.get_resource(resource_id)
    if not resource:
        raise NotFoundError("Resource", str(resource_id))
    return resource


@router.patch("/{resource_id}/status", response_model=ResourceResponse)
async def update_resource_status(
    resource_id: UUID,
    request: ResourceStatusUpdate,
    current_user: Annotated[Requester, Depends(require_resource_manager)],
    catalog: Catalog,
) -> Resource:
    """Set the maintenance/availability flag of a resource."""
    return await catalog.set_status(resource_id, request.status.value)
