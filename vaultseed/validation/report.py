import sqlite3
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_TABLES = ("Account", "Document", "User")


# =========================
# REPORT TYPES
# =========================

@dataclass
class IntegrityCheck:
    name: str
    passed: bool
    details: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        status = "✓" if self.passed else "✗"
        return f"{status} {self.name}: {self.details}"


@dataclass
class TableReport:
    name: str
    row_count: int
    columns: List[Tuple[str, str]] = field(default_factory=list)
    sample: Optional[pd.DataFrame] = None

    def sample_row(self) -> Dict[str, Any]:
        if self.sample is None or self.sample.empty:
            return {}
        return self.sample.iloc[0].to_dict()


@dataclass
class VerificationReport:
    tables: Dict[str, TableReport] = field(default_factory=dict)
    checks: List[IntegrityCheck] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors and all(c.passed for c in self.checks)

    def row_count(self, table: str) -> int:
        report = self.tables.get(table)
        return report.row_count if report else 0

    def to_dict(self):
        return {
            "passed": self.passed,
            "tables": {
                name: {
                    "row_count": t.row_count,
                    "columns": [{"name": n, "type": ty} for n, ty in t.columns],
                    "sample": t.sample_row(),
                }
                for name, t in self.tables.items()
            },
            "checks": [c.__dict__ for c in self.checks],
            "errors": self.errors,
        }


# =========================
# REPORTER
# =========================

class VerificationReporter:
    """
    Read-only inspection of a seeded store

    Problems found here are recorded in the report and never raised; the
    load they describe has already been committed.
    """

    def __init__(self, tables: Sequence[str] = DEFAULT_TABLES):
        self.tables = list(tables)

    def report(self, connection: sqlite3.Connection) -> VerificationReport:
        report = VerificationReport()

        for table in self.tables:
            try:
                report.tables[table] = self._describe_table(connection, table)
            except (sqlite3.Error, pd.errors.DatabaseError) as e:
                self._record_error(report, f"{table}: {e}")

        for check in (self._orphans_check("User"), self._orphans_check("Document"), self._document_ids_check):
            try:
                report.checks.append(check(connection))
            except (sqlite3.Error, pd.errors.DatabaseError) as e:
                self._record_error(report, f"{getattr(check, '__name__', 'check')}: {e}")

        return report

    @staticmethod
    def _record_error(report: VerificationReport, message: str):
        logger.warning(f"Verification skipped {message}")
        report.errors.append(message)

    def _describe_table(self, connection: sqlite3.Connection, table: str) -> TableReport:
        row_count = connection.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]

        info = pd.read_sql_query(f'PRAGMA table_info("{table}")', connection)
        columns = list(zip(info["name"], info["type"]))

        sample = pd.read_sql_query(f'SELECT * FROM "{table}" LIMIT 1', connection)

        logger.debug(f"{table}: {row_count} rows, {len(columns)} columns")
        return TableReport(name=table, row_count=row_count, columns=columns, sample=sample)

    @staticmethod
    def _orphans_check(table: str):
        """Rows in ``table`` whose AccountId has no Account"""
        def check(connection: sqlite3.Connection) -> IntegrityCheck:
            orphans = connection.execute(
                f'SELECT COUNT(*) FROM "{table}" t '
                f'LEFT JOIN "Account" a ON a.Id = t.AccountId WHERE a.Id IS NULL'
            ).fetchone()[0]
            return IntegrityCheck(
                name=f"{table.lower()}_account_references",
                passed=orphans == 0,
                details={"orphans": orphans},
            )

        check.__name__ = f"{table.lower()}_account_references"
        return check

    @staticmethod
    def _document_ids_check(connection: sqlite3.Connection) -> IntegrityCheck:
        """Document ids form the range [0, count)"""
        count, distinct, low, high = connection.execute(
            'SELECT COUNT(*), COUNT(DISTINCT Id), MIN(Id), MAX(Id) FROM "Document"'
        ).fetchone()

        contiguous = count == 0 or (distinct == count and low == 0 and high == count - 1)
        return IntegrityCheck(
            name="document_ids_contiguous",
            passed=contiguous,
            details={"count": count, "min": low, "max": high},
        )
