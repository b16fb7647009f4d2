import sqlite3

import pytest

from vaultseed.config import Config


@pytest.fixture
def small_config(tmp_path):
    """Three accounts, two documents each, two documents per batch"""
    config = Config()
    config.store.database_file = str(tmp_path / "test.sqlite")
    config.fixture.path = str(tmp_path / "TestDoc.txt")
    config.generation.num_accounts = 3
    config.generation.documents_per_account = 2
    config.generation.batch_size = 2
    config.generation.progress_interval = 2
    config.generation.seed = 7
    return config


@pytest.fixture
def fixture_file(small_config):
    from vaultseed.utils import FileHandler

    return FileHandler.write_fixture_document(
        small_config.fixture.path, small_config.fixture.line, small_config.fixture.repeat
    )


@pytest.fixture
def connection(tmp_path):
    """Manual-transaction connection with foreign keys on"""
    conn = sqlite3.connect(str(tmp_path / "scratch.sqlite"), isolation_level=None)
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def row_count():
    """Count rows of a table in a store file using a separate connection"""
    def count(database_file, table):
        conn = sqlite3.connect(str(database_file))
        try:
            return conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]
        finally:
            conn.close()

    return count
