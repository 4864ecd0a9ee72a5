"""
Router factory for organization-scoped CRUD resources.

Every entity resource exposes the same surface:
  GET    /            paginated, searchable listing
  GET    /all         every active row of the organization
  GET    /{id}        single row
  POST   /            create
  PUT    /{id}        partial update
  DELETE /{id}        soft delete
  DELETE /{id}/hard   permanent delete (admins)

Annotations are evaluated eagerly here (no postponed evaluation) so the
per-resource payload models bound in the closure reach FastAPI.
"""

from typing import List, Optional, Sequence, Type

from fastapi import APIRouter, Depends, Path, Query, status
from pydantic import BaseModel

from recruitment_api.core.deps import provide_service, require_roles
from recruitment_api.core.errors import NotFoundError
from recruitment_api.schemas.common import ApiResponse, Filter
from recruitment_api.services.base import BaseService

ADMIN = "Admin"
MANAGER = "Manager"


# PUBLIC_INTERFACE
def build_crud_router(
    *,
    prefix: str,
    tags: List[str],
    label: str,
    service_cls: Type[BaseService],
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    read_model: Type[BaseModel],
    detail_model: Optional[Type[BaseModel]] = None,
    write_roles: Sequence[str] = (ADMIN, MANAGER),
    dependencies: Optional[list] = None,
    exclude: Sequence[str] = (),
) -> APIRouter:
    """
    Build the standard CRUD router for one entity service.

    ``detail_model`` shapes GET /{id} when the single-row view is richer than
    the listing (nested children). ``exclude`` drops write endpoints a
    resource does not offer: any of "create", "update", "delete" and
    "hard_delete".
    """
    unknown = set(exclude) - {"create", "update", "delete", "hard_delete"}
    if unknown:
        raise ValueError(f"Unknown CRUD endpoints to exclude: {sorted(unknown)}")
    router = APIRouter(prefix=prefix, tags=tags, dependencies=dependencies or [])
    get_service = provide_service(service_cls)
    write_guard = [Depends(require_roles(*write_roles))]

    # PUBLIC_INTERFACE
    @router.get(
        "",
        response_model=ApiResponse[List[read_model]],
        summary=f"List {label}s",
        description=f"Paginated {label.lower()} listing for the caller's organization.",
    )
    async def list_items(
        page: Optional[int] = Query(None, ge=1, description="1-indexed page"),
        page_size: Optional[int] = Query(None, ge=1, description="Rows per page (clamped to 100)"),
        sort_by: Optional[str] = Query(None, description="Column to sort on (default CreatedOn)"),
        sort_order: Optional[str] = Query(None, description="ASC or DESC"),
        search: Optional[str] = Query(None, description="Search keyword"),
        service: BaseService = Depends(get_service),
    ):
        filters = Filter(
            page=page,
            page_size=page_size,
            sort_by=sort_by,
            sort_order=sort_order,
            search_keyword=search,
        )
        result = await service.get_list_async(filters)
        return ApiResponse(data=result.data, pagination=result.pagination)

    # PUBLIC_INTERFACE
    @router.get(
        "/all",
        response_model=ApiResponse[List[read_model]],
        summary=f"All {label}s",
        description=f"Every active {label.lower()} of the caller's organization, unpaginated.",
    )
    async def list_all(service: BaseService = Depends(get_service)):
        result = await service.get_all_async()
        return ApiResponse(data=result.result.records or [])

    # PUBLIC_INTERFACE
    @router.get("/{id}", response_model=ApiResponse[detail_model or read_model], summary=f"Get {label}")
    async def get_item(
        id: str = Path(..., description=f"{label} ID"),
        service: BaseService = Depends(get_service),
    ):
        result = await service.get_by_id_async(id)
        return ApiResponse(data=result.entity)

    if "create" not in exclude:

        # PUBLIC_INTERFACE
        @router.post(
            "",
            response_model=ApiResponse[read_model],
            status_code=status.HTTP_201_CREATED,
            summary=f"Create {label}",
            dependencies=write_guard,
        )
        async def create_item(
            payload: create_model,
            service: BaseService = Depends(get_service),
        ):
            result = await service.create_async(payload)
            return ApiResponse(message=f"{label} created", data=result.entity)

    if "update" not in exclude:

        # PUBLIC_INTERFACE
        @router.put(
            "/{id}",
            response_model=ApiResponse[read_model],
            summary=f"Update {label}",
            description="Only the fields present in the request body are changed.",
            dependencies=write_guard,
        )
        async def update_item(
            payload: update_model,
            id: str = Path(..., description=f"{label} ID"),
            service: BaseService = Depends(get_service),
        ):
            result = await service.update_async(payload, id)
            return ApiResponse(message=f"{label} updated", data=result.entity)

    if "delete" not in exclude:

        # PUBLIC_INTERFACE
        @router.delete(
            "/{id}",
            response_model=ApiResponse[None],
            summary=f"Delete {label}",
            description="Soft delete: the row is flagged and hidden from every read.",
            dependencies=write_guard,
        )
        async def delete_item(
            id: str = Path(..., description=f"{label} ID"),
            service: BaseService = Depends(get_service),
        ):
            if not await service.delete_async(id):
                raise NotFoundError(f"{label} not found")
            return ApiResponse(message=f"{label} deleted")

    if "hard_delete" not in exclude:

        # PUBLIC_INTERFACE
        @router.delete(
            "/{id}/hard",
            response_model=ApiResponse[None],
            summary=f"Permanently delete {label}",
            dependencies=[Depends(require_roles(ADMIN))],
        )
        async def hard_delete_item(
            id: str = Path(..., description=f"{label} ID"),
            service: BaseService = Depends(get_service),
        ):
            if not await service.hard_delete_async(id):
                raise NotFoundError(f"{label} not found")
            return ApiResponse(message=f"{label} permanently deleted")

    return router
