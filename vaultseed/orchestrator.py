"""
Data Generation Orchestrator Module

Main orchestration engine that coordinates fixture creation, schema
bootstrap, record generation and the transactional bulk load.
"""

from typing import Dict, List, Any, Optional, Tuple, Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from itertools import islice
from pathlib import Path
import logging
import time

from .config import Config

logger = logging.getLogger(__name__)

DEMO_PASSWORD_HASH = "e10adc3949ba59abbe56e057f20f883e"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


class EntityKind(Enum):
    """Persisted entity types, one table each"""
    ACCOUNT = "Account"
    USER = "User"
    DOCUMENT = "Document"

    @property
    def table(self) -> str:
        return self.value

    def columns(self, include_created_on: bool) -> List[str]:
        """Column list for the selected schema variant"""
        columns = list(ENTITY_COLUMNS[self])
        if include_created_on:
            columns.append("CreatedOn")
        return columns


ENTITY_COLUMNS: Dict[EntityKind, Tuple[str, ...]] = {
    EntityKind.ACCOUNT: ("Id", "Name"),
    EntityKind.USER: ("Id", "FirstName", "LastName", "DateOfBirth", "AccountId", "Username", "Password"),
    EntityKind.DOCUMENT: ("Id", "Name", "FilePath", "Length", "AccountId"),
}


@dataclass(frozen=True)
class AccountRecord:
    id: int
    name: str
    created_on: Optional[str] = None

    def to_row(self, include_created_on: bool) -> Tuple[Any, ...]:
        row = (self.id, self.name)
        return row + (self.created_on,) if include_created_on else row


@dataclass(frozen=True)
class UserRecord:
    id: int
    first_name: str
    last_name: str
    date_of_birth: str
    account_id: int
    username: str
    password: str
    created_on: Optional[str] = None

    def to_row(self, include_created_on: bool) -> Tuple[Any, ...]:
        row = (self.id, self.first_name, self.last_name, self.date_of_birth,
               self.account_id, self.username, self.password)
        return row + (self.created_on,) if include_created_on else row


@dataclass(frozen=True)
class DocumentRecord:
    id: int
    name: str
    file_path: str
    length: int
    account_id: int
    created_on: Optional[str] = None

    def to_row(self, include_created_on: bool) -> Tuple[Any, ...]:
        row = (self.id, self.name, self.file_path, self.length, self.account_id)
        return row + (self.created_on,) if include_created_on else row


@dataclass
class GenerationResult:
    """Result of a seeding run"""
    database_path: Path
    fixture_path: Path
    counts: Dict[str, int]
    generation_time: float
    business_objects: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class RecordGenerator:
    """
    Base class for record generators

    Generators are pure producers: they yield records lazily and never
    touch the store.
    """

    def __init__(self, config: Config, created_on: Optional[str] = None):
        self.config = config
        self.created_on = created_on if config.include_created_on else None

    def generate(self, *args, **kwargs) -> Iterator[Any]:
        """Yield records"""
        raise NotImplementedError("Subclasses must implement generate()")


class BatchProcessor:
    """
    Splits a record stream into fixed-size batches

    Only one batch is materialized at a time, so peak memory is bounded by
    the batch size rather than the total record count. Progress is reported
    whenever the processed count crosses a multiple of the progress interval.
    """

    def __init__(self, config: Config):
        self.config = config
        self.batch_size = config.generation.batch_size
        self.progress_interval = config.generation.progress_interval

    def iter_batches(self, records: Iterable[Any]) -> Iterator[List[Any]]:
        """Yield consecutive lists of at most ``batch_size`` records"""
        iterator = iter(records)
        while True:
            batch = list(islice(iterator, self.batch_size))
            if not batch:
                return
            yield batch

    def process_batches(
        self,
        records: Iterable[Any],
        total: int,
        batch_func: Callable[[List[Any]], None],
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> int:
        """
        Feed each batch to ``batch_func`` in order

        Args:
            records: Lazy record stream
            total: Expected number of records (for progress reporting)
            batch_func: Consumes one batch; exceptions propagate unchanged
            progress_callback: Optional callback for progress updates (current, total)

        Returns:
            Number of records processed
        """
        num_batches = (total + self.batch_size - 1) // self.batch_size
        logger.info(f"Processing {total} records in {num_batches} batches of {self.batch_size}")

        processed = 0
        for batch in self.iter_batches(records):
            try:
                batch_func(batch)
            except Exception as e:
                logger.error(f"Error processing batch at {processed}: {e}")
                raise

            previous = processed
            processed += len(batch)

            if processed // self.progress_interval > previous // self.progress_interval:
                logger.info(f"Inserted {processed} documents...")

            if progress_callback:
                progress_callback(processed, total)

        return processed


class DataOrchestrator:
    """
    Main orchestrator for a seeding run

    Fixture -> fresh store -> schema bootstrap -> generation -> transactional load
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the orchestrator

        Args:
            config: Configuration object (uses default if None)
        """
        from .config import get_default_config

        self.config = config or get_default_config()
        self.batch_processor = BatchProcessor(self.config)

        logger.info("DataOrchestrator initialized")

    def run(
        self,
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> GenerationResult:
        """
        Create a fresh store and load the complete synthetic dataset

        Args:
            progress_callback: Optional callback for document progress (current, total)

        Returns:
            GenerationResult with committed counts and timing
        """
        from .store import create_store_file, open_store, store_file_path
        from .schema import SchemaBootstrapper
        from .generators import AccountUserGenerator, DocumentGenerator
        from .loader import BatchLoader
        from .utils import FileHandler

        start_time = time.time()
        config = self.config

        fixture_path = FileHandler.write_fixture_document(
            config.fixture.path, config.fixture.line, config.fixture.repeat
        )
        database_path = create_store_file(store_file_path(config.store))

        logger.info(f"Created database at: {database_path}")
        logger.info(f"Created test document at: {fixture_path}")

        bootstrapper = SchemaBootstrapper(config.schema)
        created_on = datetime.now().strftime(TIMESTAMP_FORMAT)

        with open_store(config.store) as connection:
            business_objects = bootstrapper.bootstrap(connection)

            # Fixture is measured here, once, before the transaction opens
            account_users = AccountUserGenerator(config, created_on=created_on)
            documents = DocumentGenerator(config, created_on=created_on)

            loader = BatchLoader(config, self.batch_processor)
            counts = loader.load(
                connection,
                account_users.generate(config.generation.num_accounts),
                documents.generate(
                    config.generation.num_accounts,
                    config.generation.documents_per_account,
                ),
                progress_callback=progress_callback,
            )

        generation_time = time.time() - start_time
        logger.info(f"Data generation completed in {generation_time:.3f} seconds")

        return GenerationResult(
            database_path=database_path,
            fixture_path=fixture_path,
            counts=counts,
            generation_time=generation_time,
            business_objects=business_objects,
            metadata={
                'schema_version': config.schema.version,
                'batch_size': config.generation.batch_size,
                'seed': config.generation.seed,
                'timestamp': created_on,
            }
        )

    def verify(self):
        """
        Report the committed state of the configured store

        Returns:
            VerificationReport
        """
        from .store import open_store, store_file_path
        from .validation import VerificationReporter

        database_path = store_file_path(self.config.store)
        if not database_path.exists():
            raise FileNotFoundError(f"Store not found: {database_path}")

        with open_store(self.config.store) as connection:
            return VerificationReporter().report(connection)
