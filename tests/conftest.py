"""Pytest fixtures for the webhook proxy.

Each test gets a fresh application with its own rate limiters, a fake clock
driving them, and a recorder standing in for requests.post so nothing ever
leaves the machine.
"""

import pytest

import forwarder
from app import create_app
from config import Settings

from tests.helpers import AVIS_URL, CONNEXION_URL, FakeClock, WebhookRecorder


@pytest.fixture
def settings():
    return Settings(webhook_connexions=CONNEXION_URL, webhook_avis=AVIS_URL)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(settings, clock):
    return create_app(settings, clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def webhook(monkeypatch):
    recorder = WebhookRecorder()
    monkeypatch.setattr(forwarder.requests, "post", recorder)
    return recorder
