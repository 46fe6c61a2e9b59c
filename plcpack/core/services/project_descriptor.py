"""
Project descriptor reader — pulls package metadata out of a ``.plcproj``.

A ``.plcproj`` is an MSBuild XML file. Only a handful of properties
matter for packaging; they live in ``<PropertyGroup>`` elements, usually
under the MSBuild namespace. The first non-empty occurrence of each
property wins.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from plcpack.core.models.package import ProjectDescriptor
from plcpack.core.services import messages
from plcpack.core.services.errors import DescriptorError

logger = logging.getLogger(__name__)

# descriptor field → MSBuild property name
_PROPERTIES = {
    "title": "Title",
    "author": "Author",
    "version": "ProjectVersion",
    "description": "Description",
    "company": "Company",
}


def _local_name(tag: str) -> str:
    return tag.split("}", 1)[1] if "}" in tag else tag


def read_project_descriptor(project_path: Path) -> ProjectDescriptor:
    """Read the packaging metadata of a PLC project file.

    Raises:
        DescriptorError: If the file is missing or not well-formed XML.
    """
    project_path = Path(project_path)
    if not project_path.is_file():
        raise DescriptorError(messages.INVALID_PROJECT_FILE, project_path, "file not found")

    try:
        root = ET.parse(project_path).getroot()
    except ET.ParseError as e:
        raise DescriptorError(messages.INVALID_PROJECT_FILE, project_path, e) from e

    values: dict[str, str] = {}
    wanted = {prop: field for field, prop in _PROPERTIES.items()}

    for group in root.iter():
        if _local_name(group.tag) != "PropertyGroup":
            continue
        for child in group:
            field = wanted.get(_local_name(child.tag))
            if field is None or field in values:
                continue
            text = (child.text or "").strip()
            if text:
                values[field] = text

    logger.debug("Read %d properties from %s", len(values), project_path)

    return ProjectDescriptor(**values)
