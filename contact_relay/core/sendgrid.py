"""
SendGrid v3 mail/send client used by the contact relay.

Builds the fixed-shape email for a contact submission and performs the
single outbound POST. No retries: the caller decides what a non-202 or a
network error means for the visitor.
"""

import httpx
import logging
from contact_relay.core.config import Settings
from contact_relay.models.contact import (
    ContactSubmission,
    EmailAddress,
    EmailContent,
    EmailSendRequest,
    Personalization,
)

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "[SYNOTEC Contacto]"


def build_email_body(submission: ContactSubmission) -> str:
    """Plain-text body delivered to the SYNOTEC mailbox"""
    return (
        "Nuevo mensaje de contacto de SYNOTEC:\n"
        "\n"
        f"Nombre: {submission.nombre}\n"
        f"Email: {submission.email}\n"
        "Mensaje:\n"
        "---\n"
        f"{submission.mensaje}\n"
        "---\n"
    )


def build_email_request(submission: ContactSubmission, settings: Settings) -> EmailSendRequest:
    """
    Build the SendGrid payload for a validated submission.

    Replies from the mailbox go straight back to the visitor through reply_to.

    Args:
        submission: Validated contact form fields
        settings: Sender identity and recipient address

    Returns:
        EmailSendRequest: Immutable mail/send body
    """
    return EmailSendRequest(
        personalizations=[
            Personalization(
                to=[EmailAddress(email=settings.recipient_email)],
                subject=f"{SUBJECT_PREFIX} Nuevo mensaje de {submission.nombre}",
            )
        ],
        from_=EmailAddress(email=settings.sender_email, name=settings.sender_name),
        content=[EmailContent(type="text/plain", value=build_email_body(submission))],
        reply_to=EmailAddress(email=submission.email, name=submission.nombre),
    )


async def send_email(
    client: httpx.AsyncClient,
    email_request: EmailSendRequest,
    api_key: str,
    endpoint: str,
    timeout: float,
) -> httpx.Response:
    """
    POST the email to SendGrid once and hand back the raw response.

    httpx.RequestError (timeouts, DNS, refused connections) is not caught here.
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    response = await client.post(
        endpoint,
        json=email_request.to_payload(),
        headers=headers,
        timeout=timeout,
    )
    logger.debug(f"SendGrid responded with status {response.status_code}")
    return response
