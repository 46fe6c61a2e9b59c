"""
Package builder — wrap an exported PLC library into a NuGet archive.

The archive follows the Open Packaging Conventions layout that NuGet
writes:

    {id}.nuspec
    lib/{library file}
    [Content_Types].xml
    _rels/.rels
    package/services/metadata/core-properties/{hash}.psmdcp

Every part is rendered in memory first. The finished archive is written
to a temp file next to the destination and renamed into place, so a
half-written ``.nupkg`` never appears under its final name.

Part names, relationship ids and zip timestamps are derived from the
package id and version only, so two runs over the same inputs produce
the same archive.
"""

from __future__ import annotations

import io
import logging
import re
import tempfile
import uuid
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path

from plcpack.core.models.package import PACKAGE_EXTENSION, PackageMetadata, ProjectDescriptor
from plcpack.core.models.version import SemanticVersion
from plcpack.core.services import messages
from plcpack.core.services.errors import PackagingError

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY_TARGET = "lib"

NUSPEC_NS = "http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd"
CONTENT_TYPES_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
RELATIONSHIPS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CORE_PROPERTIES_NS = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
DC_NS = "http://purl.org/dc/elements/1.1/"

MANIFEST_RELATIONSHIP = "http://schemas.microsoft.com/packaging/2010/07/manifest"
CORE_PROPERTIES_RELATIONSHIP = (
    "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
)
CORE_PROPERTIES_DIR = "package/services/metadata/core-properties"

# ZIP timestamps cannot represent dates before 1980.
_ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_FILE_MODE = 0o100644

# NuGet package id: word characters joined by single '.', '_' or '-'.
_PACKAGE_ID_RE = re.compile(r"\w+(?:[_.-]\w+)*")
_MAX_PACKAGE_ID_LENGTH = 100


def is_valid_package_id(package_id: str) -> bool:
    return len(package_id) <= _MAX_PACKAGE_ID_LENGTH and bool(_PACKAGE_ID_RE.fullmatch(package_id))


def build_metadata(descriptor: ProjectDescriptor, project_path: Path | str = "") -> PackageMetadata:
    """Derive package manifest metadata from a project descriptor.

    Raises:
        InvalidVersionError: If the project version does not parse.
        PackagingError: If the project has no title, or the title is not
            a valid package id.
    """
    version = SemanticVersion.parse(descriptor.version)
    if not descriptor.title:
        raise PackagingError(messages.MISSING_PACKAGE_ID, project_path)
    if not is_valid_package_id(descriptor.title):
        raise PackagingError(messages.INVALID_PACKAGE_ID, descriptor.title)

    return PackageMetadata(
        id=descriptor.title,
        version=version,
        authors=[descriptor.author or ""],
        owners=[descriptor.company] if descriptor.company else [],
        description=descriptor.description or "",
    )


# ── Part rendering ──────────────────────────────────────────────


def _to_xml(root: ET.Element, default_namespace: str) -> bytes:
    ET.indent(root)
    return ET.tostring(
        root,
        encoding="utf-8",
        xml_declaration=True,
        default_namespace=default_namespace,
    )


def _relationship_id(seed: str) -> str:
    return "R" + uuid.uuid5(uuid.NAMESPACE_URL, seed).hex[:16].upper()


def core_properties_name(metadata: PackageMetadata) -> str:
    """Deterministic part name of the core-properties document."""
    seed = f"{metadata.id}/{metadata.version}"
    return f"{CORE_PROPERTIES_DIR}/{uuid.uuid5(uuid.NAMESPACE_URL, seed).hex}.psmdcp"


def render_nuspec(metadata: PackageMetadata) -> bytes:
    """The ``.nuspec`` manifest document."""
    package = ET.Element(f"{{{NUSPEC_NS}}}package")
    meta = ET.SubElement(package, f"{{{NUSPEC_NS}}}metadata")
    for tag, text in (
        ("id", metadata.id),
        ("version", metadata.version.to_normalized_string()),
        ("authors", ",".join(metadata.authors)),
        ("owners", ",".join(metadata.owners)),
        ("description", metadata.description),
    ):
        if tag == "owners" and not text:
            continue
        ET.SubElement(meta, f"{{{NUSPEC_NS}}}{tag}").text = text
    return _to_xml(package, NUSPEC_NS)


def render_content_types(extensions: list[str]) -> bytes:
    types = ET.Element(f"{{{CONTENT_TYPES_NS}}}Types")
    defaults = {
        "rels": "application/vnd.openxmlformats-package.relationships+xml",
        "psmdcp": "application/vnd.openxmlformats-package.core-properties+xml",
        "nuspec": "application/octet",
    }
    for extension in extensions:
        defaults.setdefault(extension, "application/octet")
    for extension, content_type in defaults.items():
        ET.SubElement(
            types,
            f"{{{CONTENT_TYPES_NS}}}Default",
            Extension=extension,
            ContentType=content_type,
        )
    return _to_xml(types, CONTENT_TYPES_NS)


def render_relationships(nuspec_name: str, properties_name: str) -> bytes:
    rels = ET.Element(f"{{{RELATIONSHIPS_NS}}}Relationships")
    for rel_type, target in (
        (MANIFEST_RELATIONSHIP, f"/{nuspec_name}"),
        (CORE_PROPERTIES_RELATIONSHIP, f"/{properties_name}"),
    ):
        ET.SubElement(
            rels,
            f"{{{RELATIONSHIPS_NS}}}Relationship",
            Type=rel_type,
            Target=target,
            Id=_relationship_id(target),
        )
    return _to_xml(rels, RELATIONSHIPS_NS)


def render_core_properties(metadata: PackageMetadata) -> bytes:
    props = ET.Element(f"{{{CORE_PROPERTIES_NS}}}coreProperties")
    ET.SubElement(props, f"{{{DC_NS}}}creator").text = ",".join(metadata.authors)
    ET.SubElement(props, f"{{{DC_NS}}}description").text = metadata.description
    ET.SubElement(props, f"{{{DC_NS}}}identifier").text = metadata.id
    ET.SubElement(props, f"{{{CORE_PROPERTIES_NS}}}version").text = (
        metadata.version.to_normalized_string()
    )
    ET.SubElement(props, f"{{{CORE_PROPERTIES_NS}}}lastModifiedBy").text = "plcpack"
    return _to_xml(props, CORE_PROPERTIES_NS)


def render_package(metadata: PackageMetadata, files: dict[str, Path]) -> bytes:
    """Render the complete archive in memory.

    Args:
        metadata: Manifest metadata.
        files: Archive path → source file on disk.

    Returns:
        The ``.nupkg`` bytes.
    """
    nuspec_name = f"{metadata.id}.nuspec"
    properties_name = core_properties_name(metadata)
    extensions = sorted({Path(name).suffix.lstrip(".") for name in files if Path(name).suffix})

    parts: list[tuple[str, bytes]] = [("_rels/.rels", render_relationships(nuspec_name, properties_name))]
    parts.append((nuspec_name, render_nuspec(metadata)))
    for name, source in files.items():
        parts.append((name, Path(source).read_bytes()))
    parts.append(("[Content_Types].xml", render_content_types(extensions)))
    parts.append((properties_name, render_core_properties(metadata)))

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in parts:
            info = zipfile.ZipInfo(name, date_time=_ZIP_DATE_TIME)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = (_FILE_MODE & 0xFFFF) << 16
            zf.writestr(info, data)
    return buffer.getvalue()


def _write_atomic(data: bytes, path: Path) -> None:
    _fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".nupkg_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with open(_fd, "wb") as f:
            f.write(data)
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


# ── Builder ─────────────────────────────────────────────────────


class PackageBuilder:
    """Assembles a ``.nupkg`` from a project descriptor and an exported library."""

    def __init__(
        self,
        library_target: str = DEFAULT_LIBRARY_TARGET,
        logger: logging.Logger | None = None,
    ):
        self._library_target = library_target.strip("/")
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def build(
        self,
        descriptor: ProjectDescriptor,
        artifact_path: str | Path,
        output_directory: str | Path,
        project_path: str | Path = "",
    ) -> Path:
        """Build the package archive.

        Args:
            descriptor: Metadata read from the project file.
            artifact_path: The exported library to stage.
            output_directory: Directory receiving ``{id}.nupkg``.
            project_path: Source project, only used in error messages.

        Returns:
            Path of the written archive.

        Raises:
            PackagingError: On invalid metadata or when the archive
                cannot be written.
        """
        if not artifact_path:
            raise ValueError("artifact_path must not be empty")

        metadata = build_metadata(descriptor, project_path)
        artifact = Path(artifact_path)
        files = {f"{self._library_target}/{artifact.name}": artifact}

        output_directory = Path(output_directory)
        output_path = output_directory / f"{metadata.id}{PACKAGE_EXTENSION}"

        try:
            output_directory.mkdir(parents=True, exist_ok=True)
            data = render_package(metadata, files)
            _write_atomic(data, output_path)
        except OSError as e:
            raise PackagingError(messages.FAILED_TO_WRITE_PACKAGE, output_path, e) from e

        self._logger.info(messages.PACK_SUCCESS, output_path)
        return output_path
