"""
Schema Bootstrapper

Executes the data-definition script of each business object descriptor,
in descriptor order, against a freshly created store.
"""

import logging
import sqlite3
from typing import List, Optional, Sequence

from ..config import SchemaConfig
from .descriptors import BusinessObject, load_descriptors

logger = logging.getLogger(__name__)


class SchemaExecutionError(RuntimeError):
    """A descriptor's data-definition script failed to execute"""

    def __init__(self, descriptor: BusinessObject, cause: Exception):
        super().__init__(
            f"Schema script for '{descriptor.name}' failed ({descriptor.source}): {cause}"
        )
        self.descriptor = descriptor


class SchemaBootstrapper:
    """
    Creates tables from externally defined business objects

    Scripts are opaque; later descriptors may depend on earlier ones
    (e.g. foreign keys), so order is preserved exactly.
    """

    def __init__(self, config: SchemaConfig, descriptors: Optional[Sequence[BusinessObject]] = None):
        """
        Args:
            config: Schema configuration (directory, version, explicit file order)
            descriptors: Pre-loaded descriptors; loaded from config when omitted
        """
        self.config = config
        self._descriptors = list(descriptors) if descriptors is not None else None

    @property
    def descriptors(self) -> List[BusinessObject]:
        if self._descriptors is None:
            self._descriptors = load_descriptors(
                self.config.resolve_directory(),
                files=self.config.files,
                min_objects=self.config.min_objects,
            )
        return self._descriptors

    def bootstrap(self, connection: sqlite3.Connection) -> List[str]:
        """
        Execute every descriptor script once, in order

        All descriptors are parsed before the first script runs.

        Returns:
            Names of the business objects created
        """
        descriptors = self.descriptors
        created = []

        for descriptor in descriptors:
            try:
                connection.executescript(descriptor.script)
            except sqlite3.Error as e:
                raise SchemaExecutionError(descriptor, e) from e

            logger.info(f"Created business object: {descriptor.name}")
            created.append(descriptor.name)

        return created
