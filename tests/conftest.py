"""Common test fixtures: settings, a recording mail transport and the app wired to it."""

import pytest
from fastapi.testclient import TestClient

from formrelay.api.v1.endpoints.forms import get_transport
from formrelay.core.config import Settings
from formrelay.main import create_app
from tests.fakes import RecordingTransport, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def app(settings, transport):
    application = create_app(settings)
    application.dependency_overrides[get_transport] = lambda: transport
    return application


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def rsvp_payload():
    return {"name": "Ada", "email": "ada@example.com", "role": "Researcher"}


@pytest.fixture
def contact_payload():
    return {
        "firstName": "Grace",
        "lastName": "Hopper",
        "email": "grace@example.com",
        "company": "Navy",
        "message": "Interested in a pilot.",
    }
