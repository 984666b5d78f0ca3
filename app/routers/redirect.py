from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import HTMLResponse, RedirectResponse

from app.dependencies import get_resolver
from app.services import pages
from app.services.cancellation_links import CancellationLinkResolver

router = APIRouter(prefix="/redirect", tags=["redirect"])


@router.get("")
async def redirect_to_cancellation(
    service: Optional[str] = Query(default=None, description="Free-text service name"),
    hash: Optional[str] = Query(default=None, description="Magic hash, for tracking only"),
    resolver: CancellationLinkResolver = Depends(get_resolver),
):
    """Send the user to the service's own cancellation page, or to search help."""
    if not service or not service.strip():
        return HTMLResponse(
            pages.error_page("Service name is required."),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    cancellation_url = resolver.resolve(service)
    if cancellation_url:
        return RedirectResponse(cancellation_url, status_code=status.HTTP_302_FOUND)

    service = service.strip()
    return HTMLResponse(pages.cancellation_help_page(service, resolver.search_urls(service)))
