# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API integration tests.

The test app mounts the v1 router without AuthMiddleware. A small
middleware puts the user from `auth_state` on request.state, so the real
require_auth and require_admin dependencies run unchanged.
"""

import time
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from src.api.dependencies import get_db, get_notifications
from src.api.middleware.auth import CurrentUser
from src.api.v1 import router as v1_router
from src.domains.auth.jwt import TokenPayload


def make_current_user(
    user_id: str = "user-1",
    role: str = "student",
    organization_id: str | None = "org-1",
) -> CurrentUser:
    """Build a CurrentUser the way AuthMiddleware does."""
    now = int(time.time())
    payload = TokenPayload(
        sub=user_id,
        role=role,
        organization_id=organization_id,
        exp=now + 600,
        iat=now,
    )
    return CurrentUser(payload)


@pytest.fixture
def auth_state() -> dict:
    """Holds the user injected into each request (None = anonymous)."""
    return {"user": make_current_user()}


@pytest.fixture
def api_db() -> AsyncMock:
    """Session handed to endpoints through get_db."""
    return AsyncMock()


@pytest.fixture
def api_notifications() -> MagicMock:
    """Notification service handed to endpoints through get_notifications."""
    return MagicMock()


@pytest.fixture
def app(auth_state, api_db, api_notifications) -> FastAPI:
    """Create test FastAPI app."""
    app = FastAPI()

    @app.middleware("http")
    async def inject_user(request: Request, call_next):
        request.state.user = auth_state["user"]
        return await call_next(request)

    async def override_get_db():
        yield api_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifications] = lambda: api_notifications
    app.include_router(v1_router)
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def make_user():
    """Factory for CurrentUser objects."""
    return make_current_user
