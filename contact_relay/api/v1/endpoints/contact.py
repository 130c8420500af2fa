import httpx
from fastapi import APIRouter, Depends, Request
from contact_relay.core.config import Settings, get_settings
from contact_relay.core.relay import handle_contact_request

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared client opened in the application lifespan"""
    return request.app.state.http_client


@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def contact(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Contact form endpoint. Path-agnostic: the website may post to any path.
    """
    return await handle_contact_request(request, settings, client)
