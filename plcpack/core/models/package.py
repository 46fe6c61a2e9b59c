"""
Pack models — the request, the project descriptor and the package manifest.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from plcpack.core.models.version import SemanticVersion

PLC_PROJECT_EXTENSION = ".plcproj"
NUSPEC_EXTENSION = ".nuspec"
PACKAGE_EXTENSION = ".nupkg"


class PackRequest(BaseModel):
    """A single pack invocation.

    ``solution`` is empty when the caller did not supply one; the
    parent solution is then discovered next to the project.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: str
    output_directory: str
    solution: str = ""
    logger: logging.Logger | None = None

    @property
    def is_plc_project(self) -> bool:
        return self.path.lower().endswith(PLC_PROJECT_EXTENSION)

    @property
    def is_nuspec(self) -> bool:
        return self.path.lower().endswith(NUSPEC_EXTENSION)


class ProjectDescriptor(BaseModel):
    """Metadata fields read from a ``.plcproj`` file."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    author: str | None = None
    version: str | None = None
    description: str | None = None
    company: str | None = None


class PackageMetadata(BaseModel):
    """Manifest metadata of a package archive."""

    model_config = ConfigDict(frozen=True)

    id: str
    version: SemanticVersion
    authors: list[str] = Field(default_factory=list)
    owners: list[str] = Field(default_factory=list)
    description: str = ""
