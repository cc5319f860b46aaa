from __future__ import annotations

import pytest
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session
from unittest.mock import Mock, patch

from authors_api.core.config import settings
from authors_api.db.session import get_db, engine, SessionLocal


class TestDatabaseSession:
    """Test database session functionality."""

    def test_session_local_configuration(self):
        """Test that SessionLocal is properly configured."""
        assert hasattr(SessionLocal, '__call__')
        assert SessionLocal.kw.get('autoflush') is False

    def test_engine_configuration(self):
        """Test that engine is built from the configured URL."""
        assert engine is not None
        assert engine.url == make_url(settings.DATABASE_URL)

    @patch('authors_api.db.session.SessionLocal')
    def test_get_db_closes_on_success(self, mock_session_local):
        mock_db = Mock(spec=Session)
        mock_session_local.return_value = mock_db

        generator = get_db()
        session = next(generator)

        assert session is mock_db
        mock_db.close.assert_not_called()

        with pytest.raises(StopIteration):
            next(generator)
        mock_db.close.assert_called_once()

    @patch('authors_api.db.session.SessionLocal')
    def test_get_db_closes_on_failure(self, mock_session_local):
        """The session is released even when the request handler fails."""
        mock_db = Mock(spec=Session)
        mock_session_local.return_value = mock_db

        generator = get_db()
        next(generator)

        with pytest.raises(RuntimeError):
            generator.throw(RuntimeError("handler failed"))
        mock_db.close.assert_called_once()

    @patch('authors_api.db.session.SessionLocal')
    def test_each_request_gets_its_own_session(self, mock_session_local):
        mock_session_local.side_effect = [Mock(spec=Session), Mock(spec=Session)]

        first = next(get_db())
        second = next(get_db())

        assert first is not second
