"""
Schema Bootstrap Module

Loads business object descriptors and executes their data-definition
scripts against a fresh store.
"""

from .descriptors import (
    BusinessObject,
    DescriptorError,
    discover_descriptor_files,
    load_descriptor,
    load_descriptors,
)
from .bootstrap import SchemaBootstrapper, SchemaExecutionError

__all__ = [
    "BusinessObject",
    "DescriptorError",
    "discover_descriptor_files",
    "load_descriptor",
    "load_descriptors",
    "SchemaBootstrapper",
    "SchemaExecutionError",
]
