"""Shared test fixtures."""

import pytest

from rindang.database.connection import DatabaseConnection
from rindang.database.repository import OfflineRepository
from rindang.database.schema import initialize_database


@pytest.fixture
def db_path(tmp_path):
    """Provide a temporary offline cache path."""
    return tmp_path / "offline.db"


@pytest.fixture
def db(db_path):
    """Provide an initialized database connection."""
    conn = DatabaseConnection(db_path)
    initialize_database(conn)
    return conn


@pytest.fixture
def repo(db):
    """Provide a repository with an initialized database."""
    return OfflineRepository(db)
