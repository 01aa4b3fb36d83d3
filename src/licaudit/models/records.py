"""Report records produced by the audit pipeline.

Every adapter and stage exchanges these types; nothing downstream of the
collectors and classifiers sees tool-specific output.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class LicenseRecord:
    """One license file found in a repository root.

    Attributes:
        type: Classification tag (SPDX-style identifier or "unrecognized")
        file: Base name of the license file
        text: Raw file contents. Decoded with surrogateescape so that
            ``encode_text`` reproduces the original bytes exactly.
    """

    type: str
    file: str
    text: str = field(default="", repr=False)

    def encode_text(self) -> bytes:
        """Return the license text as the original bytes."""
        return self.text.encode("utf-8", errors="surrogateescape")

    @property
    def label(self) -> str:
        """Return the ``file:type`` label used in tabular output."""
        return f"{self.file}:{self.type}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization (text excluded)."""
        result: dict[str, Any] = {}
        if self.type:
            result["type"] = self.type
        if self.file:
            result["file"] = self.file
        return result


@dataclass(frozen=True)
class ProvenanceInfo:
    """Where a repository root's code came from.

    Attributes:
        revision: Current revision hash ("" when unknown)
        url: Remote origin URL ("" when unknown)
    """

    revision: str = ""
    url: str = ""

    @property
    def is_empty(self) -> bool:
        """Return True when neither field is known."""
        return not self.revision and not self.url


@dataclass(frozen=True)
class ResolvedRepository:
    """Outcome of a successful repository resolution.

    Attributes:
        root: Most specific licensed prefix of the dependency identifier
        licenses: License files found at that root, in file name order
        directory: Directory on disk the root maps to
    """

    root: str
    licenses: tuple[LicenseRecord, ...]
    directory: Path | None = field(default=None, compare=False)


@dataclass(frozen=True)
class ResolutionMiss:
    """Outcome when no ancestor of a dependency carries license material.

    Not an error: the dependency is simply left out of the report.

    Attributes:
        dependency: Dependency identifier that could not be attributed
        reason: Why resolution stopped
        shadowed: True when a licensed ancestor exists but encloses a root
            resolved earlier in the run, so license material was dropped
    """

    dependency: str
    reason: str
    shadowed: bool = False


@dataclass
class PackageRecord:
    """One row of the compliance report.

    Attributes:
        path: Representative dependency identifier (the first one that
            triggered resolution of this repository root)
        repository: Repository root the licenses were found at
        provenance: Revision and origin URL (possibly empty)
        licenses: License files in discovery order
    """

    path: str
    repository: str
    provenance: ProvenanceInfo = field(default_factory=ProvenanceInfo)
    licenses: list[LicenseRecord] = field(default_factory=list)

    @property
    def revision(self) -> str:
        return self.provenance.revision

    @property
    def url(self) -> str:
        return self.provenance.url

    def covers(self, dependency: str) -> bool:
        """Return True if ``dependency`` lives under this record's repository root."""
        return is_path_prefix(self.repository, dependency)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization, omitting empty fields."""
        result: dict[str, Any] = {}
        if self.path:
            result["path"] = self.path
        if self.repository:
            result["repo"] = self.repository
        if self.revision:
            result["rev"] = self.revision
        if self.url:
            result["url"] = self.url
        if self.licenses:
            result["licenses"] = [lic.to_dict() for lic in self.licenses]
        return result


@dataclass(frozen=True)
class AuditIssue:
    """Non-fatal condition encountered during an audit run.

    Attributes:
        component: Stage that reported it (resolver, provenance)
        dependency: Dependency identifier or repository root involved
        message: Human-readable description
    """

    component: str
    dependency: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "dependency": self.dependency,
            "message": self.message,
        }


def is_path_prefix(root: str, dependency: str) -> bool:
    """Return True if ``root`` equals ``dependency`` or is a whole-segment prefix of it.

    >>> is_path_prefix("a/b", "a/b/c")
    True
    >>> is_path_prefix("a/b", "a/bc")
    False
    """
    if not root:
        return False
    if dependency == root:
        return True
    return dependency.startswith(root.rstrip("/") + "/")


def clean_path(dependency: str) -> str:
    """Drop empty, "." and ".." segments from a slash-delimited identifier.

    >>> clean_path("./a//b/")
    'a/b'
    """
    return "/".join(part for part in dependency.split("/") if part not in ("", ".", ".."))


def ancestors(dependency: str) -> list[str]:
    """Return every prefix of ``dependency``, longest first.

    Empty, "." and ".." segments are dropped, so no candidate names the
    source root itself or a directory above it.

    >>> ancestors("a/b/c")
    ['a/b/c', 'a/b', 'a']
    >>> ancestors("./a")
    ['a']
    """
    path = clean_path(dependency)
    parts = path.split("/") if path else []
    return ["/".join(parts[:end]) for end in range(len(parts), 0, -1)]
