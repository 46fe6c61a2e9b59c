"""
Package version — NuGet-flavoured semantic versions.

Accepts ``major[.minor[.patch[.revision]]][-prerelease][+metadata]``.
The normalized form follows NuGet: three numeric parts, a fourth only
when non-zero, build metadata dropped.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from plcpack.core.services import messages
from plcpack.core.services.errors import InvalidVersionError

_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_VERSION_RE = re.compile(
    r"^(?P<major>\d+)"
    r"(?:\.(?P<minor>\d+))?"
    r"(?:\.(?P<patch>\d+))?"
    r"(?:\.(?P<revision>\d+))?"
    rf"(?:-(?P<release>{_IDENT}))?"
    rf"(?:\+(?P<metadata>{_IDENT}))?$"
)


class SemanticVersion(BaseModel):
    """A parsed package version. Immutable."""

    model_config = ConfigDict(frozen=True)

    major: int
    minor: int = 0
    patch: int = 0
    revision: int = 0
    release: str = ""
    metadata: str = ""

    @classmethod
    def parse(cls, value: str | None) -> SemanticVersion:
        """Parse a version string.

        Raises:
            InvalidVersionError: If the string is empty or malformed.
        """
        match = _VERSION_RE.match(value or "")
        if match is None:
            raise InvalidVersionError(messages.INVALID_VERSION, value or "")

        parts = match.groupdict()
        return cls(
            major=int(parts["major"]),
            minor=int(parts["minor"] or 0),
            patch=int(parts["patch"] or 0),
            revision=int(parts["revision"] or 0),
            release=parts["release"] or "",
            metadata=parts["metadata"] or "",
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.release)

    def to_normalized_string(self) -> str:
        """The canonical string used in package manifests."""
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            text += f".{self.revision}"
        if self.release:
            text += f"-{self.release}"
        return text

    def __str__(self) -> str:
        return self.to_normalized_string()
