from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from dotenv import load_dotenv
from typing import Optional
import httpx
import logging
from contact_relay.api.api_router import api_router
from contact_relay.api.v1.endpoints.contact import get_http_client
from contact_relay.core.config import Settings, get_settings
from contact_relay.core.logging_config import setup_logging
from contact_relay.core.relay import MSG_METHOD_NOT_ALLOWED, render
from contact_relay.models.contact import HandlerResult

# Load environment variables from .env file
load_dotenv()

setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open one HTTP client for SendGrid calls and close it on shutdown"""
    settings = get_settings()
    if not settings.is_mail_configured:
        logger.warning("⚠️ SENDGRID_API_KEY or SENDER_EMAIL missing - contact submissions will be refused")

    app.state.http_client = httpx.AsyncClient()
    logger.info(f"🚀 Contact relay started, delivering to {settings.recipient_email}")
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        logger.info("HTTP client closed")


async def method_not_allowed(request: Request, exc):
    """
    Methods outside the contact route's list (TRACE, PROPFIND, ...) are refused
    by the router before the handler runs; answer them in the handler's shape.
    """
    settings = request.app.dependency_overrides.get(get_settings, get_settings)()
    return render(
        HandlerResult(success=False, message=MSG_METHOD_NOT_ALLOWED, http_status=405),
        settings,
    )


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the relay application.

    Args:
        settings: Explicit configuration, used instead of the environment
        http_client: Client for SendGrid calls, used instead of the lifespan one

    Returns:
        FastAPI: Application with the health route and the catch-all contact route
    """
    # No /docs, /redoc or /openapi.json: every path except /api/health belongs to the contact form
    app = FastAPI(
        title="SYNOTEC Contact Relay",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        exception_handlers={405: method_not_allowed},
    )
    app.include_router(api_router)

    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: settings
    if http_client is not None:
        app.dependency_overrides[get_http_client] = lambda: http_client
    return app


app = create_app()
