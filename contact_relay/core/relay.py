"""
Contact form relay.

Takes one website contact submission and forwards it to SendGrid:
decode form -> validate fields -> check configuration -> send -> map status.
Each step can end the request early with a fixed Spanish message. The
handler keeps no state between calls and never retries.
"""

import httpx
import logging
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from typing import Dict, Optional
from contact_relay.core.config import Settings
from contact_relay.core.sendgrid import build_email_request, send_email
from contact_relay.models.contact import ContactSubmission, HandlerResult

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("nombre", "email", "mensaje")
FORM_MEDIA_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")

# SendGrid answers 202 Accepted when the message is queued
SENDGRID_ACCEPTED = 202

MSG_METHOD_NOT_ALLOWED = "Method Not Allowed"
MSG_INVALID_CONTENT_TYPE = "Invalid content type. Expected FormData."
MSG_MISSING_FIELDS = "Por favor, complete todos los campos requeridos."
MSG_MISSING_CONFIG = "Error de configuración del Worker: Faltan claves API o email del remitente."
MSG_SUCCESS = "¡Gracias! Su mensaje ha sido enviado con éxito."
MSG_PROVIDER_ERROR = "Error al enviar el correo. Intente más tarde."
MSG_NETWORK_ERROR = "Error de red al intentar enviar el correo."


def cors_headers(settings: Settings) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.cors_allow_origin,
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def render(result: HandlerResult, settings: Settings) -> JSONResponse:
    return JSONResponse(
        content=result.body(),
        status_code=result.http_status,
        headers=cors_headers(settings),
    )


async def decode_submission(request: Request) -> Optional[Dict[str, object]]:
    """
    Read the request body as form data.

    Returns:
        dict: Raw form values keyed by field name, or None when the body is
        not a form (wrong content type or unparseable multipart)
    """
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";")[0].strip().lower()
    if media_type not in FORM_MEDIA_TYPES:
        logger.warning(f"Rejected contact submission with content type '{content_type}'")
        return None

    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException) as e:
        logger.warning(f"Could not parse contact form body: {str(e)}")
        return None

    # A repeated field counts by its first value, like the browser FormData.get
    values = {}
    for field in REQUIRED_FIELDS:
        submitted = form.getlist(field)
        values[field] = submitted[0] if submitted else None
    await form.close()
    return values


def validate_submission(values: Dict[str, object]) -> Optional[ContactSubmission]:
    """Build a ContactSubmission if every required field is a non-empty string"""
    for field in REQUIRED_FIELDS:
        value = values.get(field)
        if not isinstance(value, str) or not value:
            logger.warning(f"Contact submission missing required field '{field}'")
            return None

    return ContactSubmission(**values)


async def relay_submission(
    submission: ContactSubmission,
    settings: Settings,
    client: httpx.AsyncClient,
) -> HandlerResult:
    """
    Send a validated submission through SendGrid and map the outcome.

    Args:
        submission: Validated contact form fields
        settings: Credentials, sender and recipient
        client: Shared HTTP client

    Returns:
        HandlerResult: 200 on 202 Accepted, 500 on rejection or network failure
    """
    email_request = build_email_request(submission, settings)

    try:
        response = await send_email(
            client,
            email_request,
            api_key=settings.sendgrid_api_key,
            endpoint=settings.sendgrid_endpoint,
            timeout=settings.sendgrid_timeout,
        )
    except httpx.RequestError as e:
        logger.error(f"SendGrid network error: {type(e).__name__}: {str(e)}")
        return HandlerResult(success=False, message=MSG_NETWORK_ERROR, http_status=500)

    if response.status_code == SENDGRID_ACCEPTED:
        logger.info(f"Contact message from {submission.nombre} <{submission.email}> accepted by SendGrid")
        return HandlerResult(success=True, message=MSG_SUCCESS, http_status=200)

    logger.error(f"SendGrid Error: {response.status_code} {response.text}")
    return HandlerResult(success=False, message=MSG_PROVIDER_ERROR, http_status=500)


async def handle_contact_request(
    request: Request,
    settings: Settings,
    client: httpx.AsyncClient,
) -> Response:
    """
    Handle one request to the contact endpoint.

    OPTIONS answers the CORS preflight, POST relays the form, anything else
    is refused. Every response carries the CORS headers.
    """
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=cors_headers(settings))

    if request.method != "POST":
        return render(
            HandlerResult(success=False, message=MSG_METHOD_NOT_ALLOWED, http_status=405),
            settings,
        )

    values = await decode_submission(request)
    if values is None:
        return render(
            HandlerResult(success=False, message=MSG_INVALID_CONTENT_TYPE, http_status=400),
            settings,
        )

    submission = validate_submission(values)
    if submission is None:
        return render(
            HandlerResult(success=False, message=MSG_MISSING_FIELDS, http_status=400),
            settings,
        )

    # Configuration is only checked once the input is valid
    if not settings.is_mail_configured:
        logger.warning("SENDGRID_API_KEY or SENDER_EMAIL is not configured")
        return render(
            HandlerResult(success=False, message=MSG_MISSING_CONFIG, http_status=500),
            settings,
        )

    result = await relay_submission(submission, settings, client)
    return render(result, settings)
