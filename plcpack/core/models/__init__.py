"""
Domain models — Pydantic types for the pack pipeline.

All models are re-exported here for convenient access:

    from plcpack.core.models import PackRequest, ProjectDescriptor, PackageMetadata
"""

from plcpack.core.models.package import (
    NUSPEC_EXTENSION,
    PACKAGE_EXTENSION,
    PLC_PROJECT_EXTENSION,
    PackageMetadata,
    PackRequest,
    ProjectDescriptor,
)
from plcpack.core.models.version import SemanticVersion

__all__ = [
    "NUSPEC_EXTENSION",
    "PACKAGE_EXTENSION",
    "PLC_PROJECT_EXTENSION",
    # package.py
    "PackRequest",
    "PackageMetadata",
    "ProjectDescriptor",
    # version.py
    "SemanticVersion",
]
