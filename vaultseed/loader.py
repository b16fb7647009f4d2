"""
Batch Loader Module

Persists generated records under a single all-or-nothing transaction.
Accounts and users go in as one bulk statement each; documents are
streamed through fixed-size batches so only one batch is in memory.
"""

import sqlite3
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import Config
from .orchestrator import (
    BatchProcessor, EntityKind, AccountRecord, UserRecord, DocumentRecord,
)
from .store import transaction

logger = logging.getLogger(__name__)

# SQLite's compile-time default before 3.32
LEGACY_VARIABLE_LIMIT = 999


def variable_limit(connection: sqlite3.Connection) -> int:
    """Maximum number of bound parameters per statement"""
    getlimit = getattr(connection, "getlimit", None)
    if getlimit is None:
        return LEGACY_VARIABLE_LIMIT
    return getlimit(sqlite3.SQLITE_LIMIT_VARIABLE_NUMBER)


def build_insert(table: str, columns: Sequence[str], num_rows: int) -> str:
    """Multi-row INSERT with positional placeholders"""
    placeholders = "(" + ", ".join("?" for _ in columns) + ")"
    column_list = ", ".join(columns)
    return f'INSERT INTO "{table}" ({column_list}) VALUES ' + ", ".join([placeholders] * num_rows)


class BatchLoader:
    """
    Transactional bulk loader

    The connection is borrowed from the caller; the loader owns only the
    transaction it opens on it.
    """

    def __init__(self, config: Config, batch_processor: Optional[BatchProcessor] = None):
        self.config = config
        self.include_created_on = config.include_created_on
        self.batch_processor = batch_processor or BatchProcessor(config)

    def bulk_insert(
        self,
        connection: sqlite3.Connection,
        kind: EntityKind,
        records: Sequence[Any]
    ) -> int:
        """
        Insert records as one multi-row statement

        Falls back to consecutive statements only when the row count would
        exceed SQLite's bound-parameter limit.

        Returns:
            Number of rows inserted
        """
        if not records:
            return 0

        columns = kind.columns(self.include_created_on)
        rows_per_statement = max(1, variable_limit(connection) // len(columns))

        for start in range(0, len(records), rows_per_statement):
            chunk = records[start:start + rows_per_statement]
            params: List[Any] = []
            for record in chunk:
                params.extend(record.to_row(self.include_created_on))
            connection.execute(build_insert(kind.table, columns, len(chunk)), params)

        return len(records)

    def load(
        self,
        connection: sqlite3.Connection,
        account_users: Iterable[Tuple[AccountRecord, UserRecord]],
        documents: Iterable[DocumentRecord],
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> Dict[str, int]:
        """
        Insert everything in one transaction

        Args:
            connection: Open store connection in manual transaction mode
            account_users: (Account, User) pairs
            documents: Lazy document stream
            progress_callback: Optional callback for document progress (current, total)

        Returns:
            Rows inserted per table
        """
        counts = {kind.table: 0 for kind in EntityKind}

        try:
            with transaction(connection):
                accounts: List[AccountRecord] = []
                users: List[UserRecord] = []
                for account, user in account_users:
                    accounts.append(account)
                    users.append(user)

                counts[EntityKind.ACCOUNT.table] = self.bulk_insert(connection, EntityKind.ACCOUNT, accounts)
                counts[EntityKind.USER.table] = self.bulk_insert(connection, EntityKind.USER, users)
                logger.info(f"Inserted {len(accounts)} accounts and {len(users)} users")

                counts[EntityKind.DOCUMENT.table] = self.batch_processor.process_batches(
                    documents,
                    total=self.config.total_documents,
                    batch_func=lambda batch: self.bulk_insert(connection, EntityKind.DOCUMENT, batch),
                    progress_callback=progress_callback,
                )
        except Exception as e:
            logger.error(f"Error during data generation: {e}")
            raise

        logger.info(
            "Committed " + ", ".join(f"{count} {table} rows" for table, count in counts.items())
        )
        return counts
