"""
Pytest configuration and shared fixtures for the contact relay tests.
"""

import json
import httpx
import pytest
from fastapi.testclient import TestClient

from contact_relay.main import app
from contact_relay.api.v1.endpoints.contact import get_http_client
from contact_relay.core.config import Settings, get_settings


class FakeSendGrid:
    """Records outbound calls and answers with a canned status (or raises)"""

    def __init__(self, status_code=202, body="", error=None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f"simulated {self.error.__name__}", request=request)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        sendgrid_api_key="SG.test-key",
        sender_email="no-reply@synotec.cl",
        recipient_email="nvidal@synotec.cl",
        sender_name="SYNOTEC Contacto",
        cors_allow_origin="*",
    )


@pytest.fixture
def sendgrid():
    return FakeSendGrid()


@pytest.fixture
def client(settings, sendgrid):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(sendgrid))
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = lambda: http_client
    yield TestClient(app)
    app.dependency_overrides.clear()
