"""API route handlers for dictionary endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from dictionary.api.schemas import ErrorResponse, HealthResponse, SystemInfoResponse
from dictionary.config import Settings
from dictionary.errors import QueryError
from dictionary.models.documents import EntityKind
from dictionary.models.tenant import TenantContext
from dictionary.retrieval.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from dictionary.retrieval.query import EntityQueryService
from dictionary.retrieval.types import Pagination
from dictionary.utils.logging import bind_context
from dictionary.utils.metrics import get_content_type, get_metrics

logger = logging.getLogger(__name__)

router = APIRouter()


def tenant_context(
    language: str | None = None,
    client_id: str | None = None,
    role_id: str | None = None,
    user_id: str | None = None,
) -> TenantContext:
    """Build the tenant context from query parameters."""
    return TenantContext(
        language=language, client_id=client_id, role_id=role_id, user_id=user_id
    )


def pagination(
    page_number: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> Pagination:
    return Pagination(page_number=page_number, page_size=page_size)


def get_query_service(request: Request, kind: EntityKind) -> EntityQueryService:
    """Look up the query service for ``kind`` from app state.

    Raises:
        QueryError: If the search engine was not initialized at startup.
    """
    bind_context(kind=kind.value)
    services = getattr(request.app.state, "query_services", None)
    if not services:
        raise QueryError("Search service unavailable: search engine not initialized")
    return services[kind]


def not_found(kind: EntityKind, document_id: int) -> JSONResponse:
    body = ErrorResponse(
        status=status.HTTP_404_NOT_FOUND,
        message=f"{kind.value.capitalize()} {document_id} not found",
    )
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=body.model_dump())


async def options_response() -> Response:
    """Answer ``OPTIONS`` on every route with no content."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/", response_model=SystemInfoResponse)
async def system_info(request: Request) -> SystemInfoResponse:
    """Report version and queue consumer configuration."""
    settings: Settings = request.app.state.settings
    return SystemInfoResponse(
        version=settings.version,
        is_kafka_enabled=settings.kafka_enabled,
        kafka_queues=settings.kafka_queues,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check search engine connectivity and consumer state."""
    settings: Settings = request.app.state.settings
    gateway = getattr(request.app.state, "gateway", None)
    consumer = getattr(request.app.state, "consumer", None)

    search_connected = False
    if gateway is not None:
        try:
            search_connected = await gateway.health_check()
        except Exception as e:
            logger.error(f"Health check error: {e}")

    return HealthResponse(
        status="healthy" if search_connected else "degraded",
        version=settings.version,
        search_connected=search_connected,
        consumer_running=bool(consumer is not None and consumer.running),
    )


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type=get_content_type())


async def get_document(
    request: Request, kind: EntityKind, document_id: int, context: TenantContext
) -> Any:
    bind_context(**context.model_dump(exclude_none=True))
    service = get_query_service(request, kind)
    document = await service.get_by_id(document_id, context)
    if document is None:
        return not_found(kind, document_id)
    return document.to_body()


async def list_documents(
    request: Request,
    kind: EntityKind,
    context: TenantContext,
    search_value: str | None,
    page: Pagination | None = None,
) -> dict[str, list[dict[str, Any]]]:
    bind_context(**context.model_dump(exclude_none=True))
    service = get_query_service(request, kind)
    documents = await service.list(context, search_value=search_value, pagination=page)
    logger.info(f"Listed {len(documents)} {kind.value} documents")
    return {service.document_type.plural: [document.to_body() for document in documents]}


# /api/security/menus
@router.get("/security/menus")
async def get_menus(
    request: Request,
    context: TenantContext = Depends(tenant_context),
    search_value: str | None = None,
    page: Pagination = Depends(pagination),
) -> dict[str, list[dict[str, Any]]]:
    """List or search menus for the tenant context, paginated."""
    return await list_documents(request, EntityKind.MENU, context, search_value, page)


@router.get("/security/menus/{id}")
async def get_menu(
    request: Request, id: int, context: TenantContext = Depends(tenant_context)
) -> Any:
    """Get one menu by id."""
    return await get_document(request, EntityKind.MENU, id, context)


def _add_dictionary_routes(path: str, kind: EntityKind) -> None:
    """Register list and get-by-id routes for one dictionary kind."""

    async def list_kind(
        request: Request,
        context: TenantContext = Depends(tenant_context),
        search_value: str | None = None,
    ) -> dict[str, list[dict[str, Any]]]:
        return await list_documents(request, kind, context, search_value)

    async def get_kind(
        request: Request, id: int, context: TenantContext = Depends(tenant_context)
    ) -> Any:
        return await get_document(request, kind, id, context)

    router.add_api_route(
        f"/dictionary/{path}",
        list_kind,
        methods=["GET"],
        name=f"list_{path}",
        summary=f"List or search {path}",
    )
    router.add_api_route(
        f"/dictionary/{path}/{{id}}",
        get_kind,
        methods=["GET"],
        name=f"get_{path}",
        summary=f"Get one of {path} by id",
    )


for _path, _kind in (
    ("browsers", EntityKind.BROWSER),
    ("forms", EntityKind.FORM),
    ("processes", EntityKind.PROCESS),
    ("windows", EntityKind.WINDOW),
):
    _add_dictionary_routes(_path, _kind)


for _route_path in [route.path for route in router.routes]:
    router.add_api_route(
        _route_path,
        options_response,
        methods=["OPTIONS"],
        status_code=status.HTTP_204_NO_CONTENT,
        include_in_schema=False,
    )
