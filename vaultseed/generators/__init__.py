"""
Data Generators Module

Provides the record producers:
- Temporal: bounded random days for dates of birth
- Entities: accounts, users and documents
"""

from .temporal import RandomDayIterator
from .entities import AccountUserGenerator, DocumentGenerator, FixtureDocument

__all__ = [
    "RandomDayIterator",
    "AccountUserGenerator",
    "DocumentGenerator",
    "FixtureDocument",
]
