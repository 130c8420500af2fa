from fastapi import APIRouter, Depends
from contact_relay.core.config import Settings, get_settings
from contact_relay.api.v1.endpoints import contact

api_router = APIRouter()


@api_router.get("/api/health", tags=["Health"])
def health_check(settings: Settings = Depends(get_settings)):
    """
    Health check endpoint.

    Only reports whether the SendGrid secrets are present, never their values.

    GET /api/health is answered here instead of by the contact form, so the
    website must not point its form at /api/health with GET. A POST to the same
    path still reaches the contact handler.
    """
    return {
        "status": "ok",
        "config": {
            "sendgrid_api_key": bool(settings.sendgrid_api_key),
            "sender_email": bool(settings.sender_email),
        },
    }


# Catch-all contact route, registered last so it does not shadow the routes above
api_router.include_router(contact.router, tags=["Contact"])
