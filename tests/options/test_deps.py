"""
Tests for API dependencies module.

Tests session, option kind, service and write-guard dependencies.
"""
import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from services.options.app.api.deps import (
    get_db_session,
    get_option_kind_param,
    get_option_service,
    require_writer,
)
from services.options.app.core.auth import WRITE_SCOPE, create_access_token
from services.options.app.core.config import get_settings
from services.options.app.core.errors import UnknownOptionKindError
from services.options.app.models.catalog import get_option_kind


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def auth_enabled():
    os.environ["AUTH_ENABLED"] = "true"
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestGetDbSession:
    """Test get_db_session dependency."""

    def test_yields_and_closes_session(self):
        with patch("services.options.app.api.deps.get_sessionmaker") as mock_get_sessionmaker:
            mock_session = Mock()
            mock_context = MagicMock()
            mock_context.__enter__ = Mock(return_value=mock_session)
            mock_context.__exit__ = Mock(return_value=None)
            mock_get_sessionmaker.return_value = Mock(return_value=mock_context)

            gen = get_db_session()
            assert next(gen) is mock_session

            with pytest.raises(StopIteration):
                next(gen)
            mock_context.__exit__.assert_called_once()


class TestOptionDependencies:
    """Tests for kind resolution and service construction."""

    def test_known_kind(self):
        assert get_option_kind_param("gender_option").slug == "gender_option"

    def test_unknown_kind(self):
        with pytest.raises(UnknownOptionKindError):
            get_option_kind_param("nope")

    def test_service_uses_bulk_limit(self, db_session, monkeypatch):
        monkeypatch.setenv("MAX_BULK_ITEMS", "7")
        get_settings.cache_clear()

        service = get_option_service(kind=get_option_kind("gender_option"), session=db_session)

        assert service.kind.slug == "gender_option"
        assert service._max_batch_size == 7


class TestRequireWriter:
    """Test the write guard."""

    def test_auth_disabled_returns_anonymous(self):
        assert require_writer(None) == {"sub": "anonymous", "auth_disabled": True}

    def test_missing_credentials(self, auth_enabled):
        with pytest.raises(HTTPException) as exc_info:
            require_writer(None)
        assert exc_info.value.status_code == 401

    def test_invalid_token(self, auth_enabled):
        with pytest.raises(HTTPException) as exc_info:
            require_writer(_bearer("garbage"))
        assert exc_info.value.status_code == 401

    def test_missing_scope(self, auth_enabled):
        token = create_access_token("viewer@ppa.example", scopes=["options:read"])
        with pytest.raises(HTTPException) as exc_info:
            require_writer(_bearer(token))
        assert exc_info.value.status_code == 403

    def test_write_scope(self, auth_enabled):
        token = create_access_token("admin@ppa.example", scopes=[WRITE_SCOPE])
        assert require_writer(_bearer(token))["sub"] == "admin@ppa.example"
