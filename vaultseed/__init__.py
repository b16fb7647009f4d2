"""
vaultseed

Seeds a fresh SQLite store with a large, internally consistent synthetic
dataset of accounts, users and documents: schema bootstrap from business
object descriptors, deterministic record synthesis, and a batched bulk load
under a single transaction.
"""

__version__ = "1.0.0"

from .config import Config, ConfigLoader, ConfigValidator
from .orchestrator import DataOrchestrator, BatchProcessor, GenerationResult
from .loader import BatchLoader

__all__ = [
    "Config",
    "ConfigLoader",
    "ConfigValidator",
    "DataOrchestrator",
    "BatchProcessor",
    "GenerationResult",
    "BatchLoader",
]
