"""
Router factory exposing a CrudService over HTTP.

    router = build_resource_router(
        prefix="/user-roles",
        dto_model=UserRoleDTO,
        service_dependency=get_user_role_service,
        tags=["user-roles"],
    )
    app.include_router(router, prefix="/api/v1")

| Method | Path      | Service call          | Success |
| ------ | --------- | --------------------- | ------- |
| GET    | /         | find_all(query)       | 200     |
| GET    | /lookup   | find_by(query)        | 200     |
| GET    | /{id}     | find(id)              | 200     |
| POST   | /         | create(body)          | 201     |
| PATCH  | /{id}     | patch(body + id)      | 200     |
| PUT    | /{id}     | put(body + id)        | 200     |
| DELETE | /{id}     | delete(id)            | 204     |

Query parameters are passed through as the criteria map, so filters and
pagination keys (`size`, `page`, `sortBy`, `sortDirection`) share one query
string. Errors are rendered by the handlers in `error_handlers.py`.
"""
from typing import Any, Callable, Generic, Type, TypeVar
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel

from resourcekit.services.crud_service import CrudService
from resourcekit.services.pagination import Page

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page[Any]) -> "PageResponse[T]":
        return cls(
            items=page.items,
            total=page.total,
            page=page.page,
            size=page.size,
            total_pages=page.total_pages,
        )


def build_resource_router(
    *,
    prefix: str,
    dto_model: Type[BaseModel],
    service_dependency: Callable[..., CrudService],
    tags: list[str] | None = None,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=tags or [])
    page_model = PageResponse[dto_model]

    # /lookup is registered before /{entity_id} so it is never parsed as an id.
    @router.get("/lookup", response_model=dto_model)
    async def find_by(request: Request, service: CrudService = Depends(service_dependency)):
        return await service.find_by(dict(request.query_params))

    @router.get("", response_model=page_model)
    async def find_all(request: Request, service: CrudService = Depends(service_dependency)):
        page = await service.find_all(dict(request.query_params))
        return page_model.from_page(page)

    @router.get("/{entity_id}", response_model=dto_model)
    async def find(entity_id: UUID, service: CrudService = Depends(service_dependency)):
        return await service.find(entity_id)

    @router.post("", response_model=dto_model, status_code=status.HTTP_201_CREATED)
    async def create(payload: dto_model, service: CrudService = Depends(service_dependency)):
        return await service.create(payload)

    @router.patch("/{entity_id}", response_model=dto_model)
    async def patch(entity_id: UUID, payload: dto_model, service: CrudService = Depends(service_dependency)):
        # The path decides which row is updated, whatever the body says.
        return await service.patch(payload.model_copy(update={"id": entity_id}))

    @router.put("/{entity_id}", response_model=dto_model)
    async def put(entity_id: UUID, payload: dto_model, service: CrudService = Depends(service_dependency)):
        return await service.put(payload.model_copy(update={"id": entity_id}))

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
    async def delete(entity_id: UUID, service: CrudService = Depends(service_dependency)):
        await service.delete(entity_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
