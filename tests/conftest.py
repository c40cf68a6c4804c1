"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, Mock

import pytest
from returns.result import Success

from screenkit.actions import ActionEngine, CallbackRegistry
from screenkit.context import RenderContext
from screenkit.core import DiagnosticReporter, Settings
from screenkit.models import Response, Session
from screenkit.rendering import Renderer, create_default_registry
from screenkit.state import FormStore, ViewStateStore


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["SCREENKIT_LOG_LEVEL"] = "DEBUG"
    os.environ["SCREENKIT_BACKEND_URL"] = "http://backend.test"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Fresh settings (bypasses the cached instance)."""
    return Settings()


@pytest.fixture
def registry():
    """Registry with the built-in widget set."""
    return create_default_registry()


@pytest.fixture
def diagnostics():
    return DiagnosticReporter()


@pytest.fixture
def store():
    return ViewStateStore()


@pytest.fixture
def forms():
    return FormStore()


@pytest.fixture
def renderer():
    return Renderer()


@pytest.fixture
def engine():
    return ActionEngine()


@pytest.fixture
def callbacks():
    return CallbackRegistry()


# ============================================================================
# Effect Fixtures
# ============================================================================

@pytest.fixture
def navigator():
    """Navigator recording navigate() calls."""
    return Mock(spec=["navigate"])


@pytest.fixture
def auth():
    """Auth backend whose login succeeds."""
    mock = Mock(spec=["login", "logout"])
    mock.login = AsyncMock(return_value=Success(Session(user_id="u-1", token="tok")))
    mock.logout = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def network():
    """Network backend whose requests succeed."""
    mock = Mock(spec=["request"])
    mock.request = AsyncMock(return_value=Success(Response(status_code=200, data={"ok": True})))
    return mock


@pytest.fixture
def ctx(registry, store, forms, engine, navigator, auth, network, callbacks, diagnostics, settings):
    """Fully wired render context."""
    return RenderContext(
        registry=registry,
        store=store,
        forms=forms,
        engine=engine,
        navigator=navigator,
        auth=auth,
        network=network,
        callbacks=callbacks,
        diagnostics=diagnostics,
        settings=settings,
    )


# ============================================================================
# Document Fixtures
# ============================================================================

@pytest.fixture
def login_document():
    """Login screen: a form with two fields and a submit button."""
    return {
        "id": "login",
        "name": "Login",
        "state": {"title": "Welcome"},
        "rootWidget": {
            "type": "Column",
            "children": [
                {"type": "Text", "id": "title", "properties": {"text": "${title}"}},
                {
                    "type": "Form",
                    "id": "loginForm",
                    "children": [
                        {
                            "type": "TextField",
                            "id": "email",
                            "properties": {"label": "Email", "validators": {"required": True, "email": True}},
                        },
                        {
                            "type": "TextField",
                            "id": "password",
                            "properties": {"label": "Password", "obscureText": True, "required": True},
                        },
                    ],
                },
                {
                    "type": "ElevatedButton",
                    "id": "submit",
                    "properties": {"label": "Sign in"},
                    "events": {
                        "onPressed": {
                            "action": "login",
                            "emailField": "email",
                            "passwordField": "password",
                            "onSuccess": {"action": "navigate", "target": "/home", "replace": True},
                            "onError": {"action": "setState", "updates": {"error": "Login failed"}},
                        }
                    },
                },
            ],
        },
    }
