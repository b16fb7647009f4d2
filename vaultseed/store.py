"""
Store Handle Module

Resolves the target SQLite store from the configured connection-string
template and provides scoped acquisition of the connection and of the
single load transaction.
"""

import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Tuple, Union

from .config import StoreConfig
from .utils import PathManager

logger = logging.getLogger(__name__)


def resolve_database_path(template: str, database_file: str) -> Tuple[str, bool]:
    """
    Resolve a connection-string template to a sqlite3 target

    The template may use ``{0}`` or ``{database}`` for the database file.
    ``Data Source=...;`` strings yield their data source, ``file:`` strings
    are passed through as SQLite URIs.

    Returns:
        Tuple of (target, is_uri)
    """
    if not template:
        return database_file, False

    formatted = template.format(database_file, database=database_file).strip()

    if formatted.startswith("file:"):
        return formatted, True

    if "=" in formatted:
        parts = [p for p in formatted.split(";") if "=" in p]
        settings = {k.strip().lower(): v.strip() for k, v in (p.split("=", 1) for p in parts)}
        source = settings.get("data source") or settings.get("datasource")
        if not source:
            raise ValueError(f"Connection string has no Data Source: {template}")
        return source, False

    return formatted, False


def store_file_path(config: StoreConfig) -> Path:
    """Filesystem path of the configured store"""
    target, is_uri = resolve_database_path(config.connection_string, config.database_file)
    if is_uri:
        target = target[len("file:"):].split("?", 1)[0]
    return Path(target)


def create_store_file(path: Union[str, Path]) -> Path:
    """
    Create an empty store file, discarding any previous one

    Returns:
        Absolute path of the new store
    """
    path = Path(path)
    if PathManager.remove_file(path):
        logger.info(f"Discarded existing store: {path}")

    PathManager.ensure_dir(path.parent)
    path.touch()
    return path.resolve()


@contextmanager
def open_store(config: StoreConfig) -> Iterator[sqlite3.Connection]:
    """
    Open the configured store for the duration of the block

    The connection is in manual transaction mode; it is closed on every exit path.
    """
    target, is_uri = resolve_database_path(config.connection_string, config.database_file)
    connection = sqlite3.connect(target, uri=is_uri, isolation_level=None)

    try:
        if config.enforce_foreign_keys:
            connection.execute("PRAGMA foreign_keys = ON")
        logger.debug(f"Opened store: {target}")
        yield connection
    finally:
        connection.close()
        logger.debug(f"Closed store: {target}")


@contextmanager
def transaction(connection: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Commit on success; roll back and re-raise on any error"""
    connection.execute("BEGIN")
    try:
        yield connection
    except BaseException:
        # SQLite may already have rolled back on some I/O and memory errors
        if connection.in_transaction:
            connection.execute("ROLLBACK")
        logger.warning("Transaction rolled back")
        raise
    else:
        connection.execute("COMMIT")
        logger.debug("Transaction committed")
