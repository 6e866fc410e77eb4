"""
FastAPI Endpoints for URL Shortener Service

Two routers:
- admin_router: list / create / get / delete entries, mounted under
  settings.api_prefix and guarded by the admin token
- redirect_router: public redirects, mounted under settings.redirect_prefix

Endpoints stay thin: they translate HTTP to URLService calls and service
results (None / False / exceptions) back to status codes.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse

from shortlink.api.schemas import CreateUrlRequest
from shortlink.api.security import require_admin
from shortlink.core.exceptions import GenerationExhaustedError
from shortlink.db.models import UrlEntry
from shortlink.services.url_service import URLService


admin_router = APIRouter(dependencies=[Depends(require_admin)])
redirect_router = APIRouter()


def get_url_service(request: Request) -> URLService:
    """Return the URLService built for this application by create_app()."""
    return request.app.state.url_service


def _not_found(short_url: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Short code '{short_url}' not found"
    )


@admin_router.get(
    "/urls",
    response_model=list[UrlEntry],
    summary="List short URLs",
    description="Returns every entry in the registry, in no particular order"
)
async def list_urls(url_service: URLService = Depends(get_url_service)) -> list[UrlEntry]:
    return await url_service.list_entries()


@admin_router.post(
    "/urls",
    response_model=UrlEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description="Stores the long URL under a new random short code"
)
async def create_url(
    body: CreateUrlRequest,
    url_service: URLService = Depends(get_url_service)
) -> UrlEntry:
    """
    Create a new short URL.

    Raises:
        HTTPException 503: If no free short code could be generated
    """
    try:
        return await url_service.create(body.long_url, body.note)
    except GenerationExhaustedError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )


@admin_router.get(
    "/urls/{short_url}",
    response_model=UrlEntry,
    summary="Get a short URL",
    description="Returns one entry including its visit statistics"
)
async def get_url(
    short_url: str,
    url_service: URLService = Depends(get_url_service)
) -> UrlEntry:
    entry = await url_service.get(short_url)
    if entry is None:
        raise _not_found(short_url)
    return entry


@admin_router.delete(
    "/urls/{short_url}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a short URL"
)
async def delete_url(
    short_url: str,
    url_service: URLService = Depends(get_url_service)
) -> Response:
    if not await url_service.delete(short_url):
        raise _not_found(short_url)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@redirect_router.get(
    "/{short_url}",
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    response_class=RedirectResponse,
    summary="Redirect to original URL",
    description="Permanently redirects to the long URL and counts the visit"
)
async def redirect_to_long_url(
    short_url: str,
    url_service: URLService = Depends(get_url_service)
) -> RedirectResponse:
    """
    Raises:
        HTTPException 404: If the short code is unknown
    """
    long_url = await url_service.redirect(short_url)
    if long_url is None:
        raise _not_found(short_url)
    return RedirectResponse(url=long_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
