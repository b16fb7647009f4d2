"""
Entity Generators Module

Produces the Account, User and Document record streams. All fields are
derived from loop indices except the user's date of birth.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union
import logging

from ..config import Config
from ..orchestrator import (
    RecordGenerator, AccountRecord, UserRecord, DocumentRecord,
    DEMO_PASSWORD_HASH, DATE_FORMAT,
)
from ..utils import FileHandler
from .temporal import RandomDayIterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixtureDocument:
    """Path and byte length shared by every generated Document row"""
    path: str
    length: int

    @classmethod
    def measure(cls, filepath: Union[str, Path]) -> "FixtureDocument":
        """Measure the fixture once; a missing file is fatal"""
        info = FileHandler.get_file_info(filepath)
        if not info['exists']:
            raise FileNotFoundError(f"Fixture document not found: {filepath}")
        return cls(path=info['path'], length=info['size_bytes'])


class AccountUserGenerator(RecordGenerator):
    """
    Co-generates one Account and one User per index

    User ``i`` always references Account ``i``.
    """

    def __init__(self, config: Config, created_on: Optional[str] = None,
                 random_days: Optional[RandomDayIterator] = None):
        super().__init__(config, created_on)
        self.random_days = random_days or RandomDayIterator(
            start=config.generation.date_of_birth_start,
            seed=config.generation.seed,
        )

    def generate(self, num_accounts: int) -> Iterator[Tuple[AccountRecord, UserRecord]]:
        for i in range(num_accounts):
            date_of_birth = next(self.random_days).strftime(DATE_FORMAT)

            account = AccountRecord(id=i, name=f"Account{i}", created_on=self.created_on)
            user = UserRecord(
                id=i,
                first_name=f"FName{i}",
                last_name=f"LName{i}",
                date_of_birth=date_of_birth,
                account_id=i,
                username=f"UserName-{i}",
                password=DEMO_PASSWORD_HASH,
                created_on=self.created_on,
            )
            yield account, user


class DocumentGenerator(RecordGenerator):
    """
    Generates documents for every account

    Ids run across the whole nested loop and are never reset per account.
    All documents point at the same fixture file.
    """

    def __init__(self, config: Config, created_on: Optional[str] = None,
                 fixture: Optional[FixtureDocument] = None):
        super().__init__(config, created_on)
        self.fixture = fixture or FixtureDocument.measure(config.fixture.path)
        logger.info(f"Fixture document: {self.fixture.path} ({self.fixture.length} bytes)")

    def generate(self, num_accounts: int, documents_per_account: int) -> Iterator[DocumentRecord]:
        document_id = 0
        for i in range(num_accounts):
            for j in range(documents_per_account):
                yield DocumentRecord(
                    id=document_id,
                    name=f"Document{i}-{j}.txt",
                    file_path=self.fixture.path,
                    length=self.fixture.length,
                    account_id=i,
                    created_on=self.created_on,
                )
                document_id += 1
