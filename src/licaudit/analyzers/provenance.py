"""Version-control provenance for repository roots.

Reads the current revision and the origin remote URL of the directory a
repository root maps to. Commands run with an explicit working directory;
the licaudit process never changes its own.
"""

import logging
import subprocess
from abc import abstractmethod
from pathlib import Path

from licaudit.analyzers.base import ToolAdapter, VCSUnavailable
from licaudit.models import ProvenanceInfo

logger = logging.getLogger(__name__)


class ProvenanceFetcher(ToolAdapter):
    """Abstract interface for version-control metadata queries.

    Implementations:
    - GitProvenanceFetcher: Uses `git log` and `git remote`
    """

    def __init__(self, name: str, timeout: float | None = None) -> None:
        super().__init__(name=name, capability="vcs", timeout=timeout)

    @abstractmethod
    def fetch(self, path: Path) -> ProvenanceInfo:
        """Return revision and origin URL for ``path``.

        Raises:
            VCSUnavailable: If no provenance could be read
        """


class GitProvenanceFetcher(ProvenanceFetcher):
    """Provenance fetcher backed by git."""

    command = "git"

    def __init__(self, name: str = "git", timeout: float | None = None) -> None:
        super().__init__(name=name, timeout=timeout)

    def check_available(self) -> bool:
        try:
            return self.run(["--version"]).returncode == 0
        except (subprocess.TimeoutExpired, OSError):
            return False

    def get_version(self) -> str | None:
        try:
            result = self.run(["--version"])
        except (subprocess.TimeoutExpired, OSError):
            return None
        if result.returncode != 0:
            return None
        # "git version 2.43.0"
        return result.stdout.strip().split()[-1] if result.stdout.strip() else None

    def fetch(self, path: Path) -> ProvenanceInfo:
        """Query revision and origin URL independently.

        A failure of one query keeps the other's value. Only when both fail
        is VCSUnavailable raised.

        Args:
            path: Directory the repository root maps to

        Returns:
            ProvenanceInfo with whatever could be read

        Raises:
            VCSUnavailable: If neither query succeeded
        """
        errors: list[str] = []

        revision = self._query(path, ["log", "-1", "--format=%H"], errors)
        url = self._query(path, ["remote", "get-url", "origin"], errors)

        if revision is None and url is None:
            raise VCSUnavailable(self.name, f"no provenance for {path}: {'; '.join(errors)}")

        if errors:
            logger.debug("Partial provenance for %s: %s", path, "; ".join(errors))

        return ProvenanceInfo(revision=revision or "", url=url or "")

    def _query(self, path: Path, args: list[str], errors: list[str]) -> str | None:
        try:
            result = self.run(args, cwd=path)
        except subprocess.TimeoutExpired:
            errors.append(f"git {args[0]} timed out")
            return None
        except OSError as e:
            errors.append(f"git {args[0]}: {e}")
            return None

        if result.returncode != 0:
            detail = result.stderr.strip().splitlines()[-1] if result.stderr.strip() else ""
            errors.append(f"git {args[0]} exited {result.returncode} {detail}".rstrip())
            return None

        value = result.stdout.strip()
        return value or None
