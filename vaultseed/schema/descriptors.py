"""
Business Object Descriptors

A descriptor pairs a business object name with the data-definition script
that creates its table. Descriptors are authored outside this package as
XML, YAML or JSON documents.
"""

import json
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

logger = logging.getLogger(__name__)

DESCRIPTOR_EXTENSIONS = ('.xml', '.yaml', '.yml', '.json')


class DescriptorError(ValueError):
    """A schema descriptor is missing, unreadable or incomplete"""


@dataclass(frozen=True)
class BusinessObject:
    """A named data-definition script"""
    name: str
    script: str
    source: Optional[str] = None


def _field(mapping: Dict[str, Any], key: str) -> Optional[str]:
    """Case-insensitive lookup of a descriptor field"""
    for k, v in mapping.items():
        if str(k).lower() == key:
            return v
    return None


def _parse_xml(data: bytes) -> Dict[str, Any]:
    root = ET.fromstring(data)
    fields = {child.tag: (child.text or "") for child in root}
    # Attributes are accepted too: <BusinessObject Name="Account">
    fields.update(root.attrib)
    return fields


def load_descriptor(path: Union[str, Path]) -> BusinessObject:
    """
    Parse one descriptor file

    Args:
        path: XML, YAML or JSON descriptor

    Returns:
        BusinessObject with a non-empty script

    Raises:
        DescriptorError: file missing, unparsable, or without a script
    """
    path = Path(path)

    if not path.is_file():
        raise DescriptorError(f"Schema descriptor not found: {path}")

    extension = path.suffix.lower()

    try:
        # XML declares its own encoding
        if extension == '.xml':
            fields = _parse_xml(path.read_bytes())
        elif extension in ('.yaml', '.yml'):
            fields = yaml.safe_load(path.read_text(encoding='utf-8-sig'))
        elif extension == '.json':
            fields = json.loads(path.read_text(encoding='utf-8-sig'))
        else:
            raise DescriptorError(f"Unsupported descriptor format: {extension}")
    except (ET.ParseError, yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DescriptorError(f"Could not parse schema descriptor {path}: {e}") from e

    if not isinstance(fields, dict):
        raise DescriptorError(f"Schema descriptor {path} is not a single record")

    script = _field(fields, 'script')
    if not script or not str(script).strip():
        raise DescriptorError(f"Schema descriptor {path} has no script")

    name = _field(fields, 'name') or path.stem
    return BusinessObject(name=str(name).strip(), script=str(script), source=str(path))


def discover_descriptor_files(
    directory: Union[str, Path],
    files: Optional[Sequence[str]] = None
) -> List[Path]:
    """
    List descriptor files in load order

    An explicit ``files`` list is used in its given order (relative entries
    resolve against ``directory``); otherwise the directory is enumerated in
    sorted filename order.
    """
    directory = Path(directory)

    if files:
        return [Path(f) if Path(f).is_absolute() else directory / f for f in files]

    if not directory.is_dir():
        raise DescriptorError(f"Schema directory not found: {directory}")

    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in DESCRIPTOR_EXTENSIONS
    )


def load_descriptors(
    directory: Union[str, Path],
    files: Optional[Sequence[str]] = None,
    min_objects: int = 1
) -> List[BusinessObject]:
    """Load every descriptor up front, in order; any failure aborts the whole set"""
    paths = discover_descriptor_files(directory, files)

    if len(paths) < min_objects:
        raise DescriptorError(
            f"Expected at least {min_objects} schema descriptors in {directory}, found {len(paths)}"
        )

    descriptors = [load_descriptor(p) for p in paths]
    logger.info(f"Loaded {len(descriptors)} schema descriptors: {[d.name for d in descriptors]}")
    return descriptors
