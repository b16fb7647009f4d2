"""
Validation Module

Read-only verification of a seeded store:
- Row counts per table
- Column metadata and a sample row
- Referential integrity and id contiguity checks
"""

from .report import (
    VerificationReporter,
    VerificationReport,
    TableReport,
    IntegrityCheck,
)

__all__ = [
    "VerificationReporter",
    "VerificationReport",
    "TableReport",
    "IntegrityCheck",
]
