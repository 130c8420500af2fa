"""
Unit tests for the relay handler called as a plain coroutine, without FastAPI routing.
"""

import httpx
import pytest
from starlette.requests import Request

from contact_relay.core.relay import (
    MSG_NETWORK_ERROR,
    MSG_PROVIDER_ERROR,
    MSG_SUCCESS,
    handle_contact_request,
    relay_submission,
    validate_submission,
)
from contact_relay.models.contact import ContactSubmission
from tests.conftest import FakeSendGrid


def make_request(method: str, body: bytes = b"", content_type: str = None) -> Request:
    headers = []
    if content_type:
        headers.append((b"content-type", content_type.encode()))

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    scope = {
        "type": "http",
        "method": method,
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "headers": headers,
    }
    return Request(scope, receive)


class TestValidateSubmission:

    def test_valid_values(self):
        submission = validate_submission({"nombre": "Ana", "email": "ana@example.com", "mensaje": "Hola"})
        assert submission == ContactSubmission(nombre="Ana", email="ana@example.com", mensaje="Hola")

    @pytest.mark.parametrize(
        "values",
        [
            {},
            {"nombre": "Ana", "email": "ana@example.com"},
            {"nombre": "", "email": "ana@example.com", "mensaje": "Hola"},
            {"nombre": "Ana", "email": None, "mensaje": "Hola"},
        ],
    )
    def test_invalid_values(self, values):
        assert validate_submission(values) is None

    def test_whitespace_is_kept(self):
        submission = validate_submission({"nombre": " ", "email": "ana@example.com", "mensaje": "Hola"})
        assert submission.nombre == " "


class TestRelaySubmission:

    @pytest.mark.asyncio
    async def test_accepted(self, settings):
        sendgrid = FakeSendGrid(status_code=202)
        async with httpx.AsyncClient(transport=httpx.MockTransport(sendgrid)) as client:
            submission = ContactSubmission(nombre="Ana", email="ana@example.com", mensaje="Hola")
            result = await relay_submission(submission, settings, client)

        assert result.success is True
        assert result.http_status == 200
        assert result.message == MSG_SUCCESS

    @pytest.mark.asyncio
    async def test_rejected(self, settings):
        sendgrid = FakeSendGrid(status_code=403, body="forbidden")
        async with httpx.AsyncClient(transport=httpx.MockTransport(sendgrid)) as client:
            submission = ContactSubmission(nombre="Ana", email="ana@example.com", mensaje="Hola")
            result = await relay_submission(submission, settings, client)

        assert result.body() == {"success": False, "message": MSG_PROVIDER_ERROR}
        assert result.http_status == 500

    @pytest.mark.asyncio
    async def test_network_error(self, settings):
        sendgrid = FakeSendGrid(error=httpx.ConnectError)
        async with httpx.AsyncClient(transport=httpx.MockTransport(sendgrid)) as client:
            submission = ContactSubmission(nombre="Ana", email="ana@example.com", mensaje="Hola")
            result = await relay_submission(submission, settings, client)

        assert result.body() == {"success": False, "message": MSG_NETWORK_ERROR}
        assert result.http_status == 500


class TestHandleContactRequest:

    @pytest.mark.asyncio
    async def test_urlencoded_post(self, settings):
        sendgrid = FakeSendGrid()
        request = make_request(
            "POST",
            body=b"nombre=Ana&email=ana%40example.com&mensaje=Hola",
            content_type="application/x-www-form-urlencoded",
        )
        async with httpx.AsyncClient(transport=httpx.MockTransport(sendgrid)) as client:
            response = await handle_contact_request(request, settings, client)

        assert response.status_code == 200
        assert sendgrid.payloads[0]["reply_to"] == {"email": "ana@example.com", "name": "Ana"}

    @pytest.mark.asyncio
    async def test_options(self, settings):
        async with httpx.AsyncClient(transport=httpx.MockTransport(FakeSendGrid())) as client:
            response = await handle_contact_request(make_request("OPTIONS"), settings, client)

        assert response.status_code == 204
        assert response.body == b""
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
