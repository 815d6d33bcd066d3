"""Fixtures for API tests.

The DAO dependencies are overridden with the in-memory DAOs from the root
conftest, so no Supabase instance is needed.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from recordboard.api.app import create_app
from recordboard.api.auth import get_current_user
from recordboard.api.dependencies import (
    get_club_dao,
    get_membership_dao,
    get_record_dao,
    get_record_list_dao,
    get_supabase,
)
from recordboard.models import AuthUser, Club, MemberRole


def _user(membership_dao, email: str) -> AuthUser:
    return AuthUser(id=membership_dao.register_user(email), email=email)


@pytest.fixture
def owner(membership_dao, club: Club) -> AuthUser:
    user = _user(membership_dao, "owner@example.com")
    membership_dao.add_owner(club.id, user.id)
    return user


@pytest.fixture
def editor(membership_dao, club: Club) -> AuthUser:
    user = _user(membership_dao, "editor@example.com")
    membership_dao.add(club.id, user.id, MemberRole.EDITOR)
    return user


@pytest.fixture
def viewer(membership_dao, club: Club) -> AuthUser:
    user = _user(membership_dao, "viewer@example.com")
    membership_dao.add(club.id, user.id, MemberRole.VIEWER)
    return user


@pytest.fixture
def outsider(membership_dao) -> AuthUser:
    """Signed in, but not a member of the test club."""
    return _user(membership_dao, "outsider@example.com")


@pytest.fixture
def make_client(club_dao, membership_dao, record_list_dao, record_dao):
    """Build a test client, optionally authenticated as `user`."""

    def _make(user: AuthUser | None = None) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_club_dao] = lambda: club_dao
        app.dependency_overrides[get_membership_dao] = lambda: membership_dao
        app.dependency_overrides[get_record_list_dao] = lambda: record_list_dao
        app.dependency_overrides[get_record_dao] = lambda: record_dao
        app.dependency_overrides[get_supabase] = lambda: MagicMock()

        if user is not None:

            async def mock_get_current_user():
                return user

            app.dependency_overrides[get_current_user] = mock_get_current_user

        return TestClient(app)

    return _make


@pytest.fixture
def client_as_owner(make_client, owner) -> TestClient:
    return make_client(owner)


@pytest.fixture
def client_as_editor(make_client, editor) -> TestClient:
    return make_client(editor)


@pytest.fixture
def client_as_viewer(make_client, viewer) -> TestClient:
    return make_client(viewer)


@pytest.fixture
def client_as_outsider(make_client, outsider) -> TestClient:
    return make_client(outsider)


@pytest.fixture
def client_unauthenticated(make_client) -> TestClient:
    """No bearer token: public routes work, everything else is 401."""
    return make_client()
