"""Repository resolution with prefix deduplication.

Turns dependency identifiers into the minimal set of licensed repository
roots. For each identifier the resolver walks from the full path toward the
top, one segment at a time, and stops at the first directory the license
classifier recognizes. Identifiers already covered by a previously resolved
root are skipped before any filesystem work is done.
"""

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from licaudit.analyzers.classifiers.base import LicenseClassifier
from licaudit.models import (
    LicenseRecord,
    ResolutionMiss,
    ResolvedRepository,
    ancestors,
    clean_path,
    is_path_prefix,
)

logger = logging.getLogger(__name__)


class DedupIndex:
    """Running set of repository roots accepted during one run.

    Roots are kept in registration order. Not thread-safe: one pipeline run
    owns one index.
    """

    def __init__(self, roots: Iterable[str] = ()) -> None:
        self._roots: list[str] = []
        for root in roots:
            self.register(root)

    @property
    def roots(self) -> list[str]:
        """Registered roots in registration order."""
        return list(self._roots)

    def covers(self, dependency: str) -> bool:
        """Return True if a registered root equals or is a segment prefix of ``dependency``."""
        return any(is_path_prefix(root, dependency) for root in self._roots)

    def encloses(self, candidate: str) -> bool:
        """Return True if ``candidate`` is a proper ancestor of a registered root."""
        return any(
            root != candidate and is_path_prefix(candidate, root) for root in self._roots
        )

    def register(self, root: str) -> None:
        """Record ``root`` as resolved.

        Raises:
            ValueError: If ``root`` overlaps a registered root
        """
        if self.covers(root) or self.encloses(root):
            raise ValueError(f"Repository root overlaps a resolved root: {root}")
        self._roots.append(root)

    def __contains__(self, root: object) -> bool:
        return root in self._roots

    def __len__(self) -> int:
        return len(self._roots)

    def __iter__(self) -> Iterator[str]:
        return iter(self._roots)


class RepositoryResolver:
    """Resolves dependency identifiers to their most specific licensed root.

    Attributes:
        source_roots: Directories searched, in order, for dependency sources
        classifier: License classifier consulted at each candidate directory
    """

    def __init__(
        self,
        source_roots: Sequence[Path | str],
        classifier: LicenseClassifier,
    ) -> None:
        self.source_roots = [Path(root) for root in source_roots]
        self.classifier = classifier

    def locate(self, dependency: str) -> Path | None:
        """Return the first source root that holds ``dependency``, if any."""
        for source_root in self.source_roots:
            if (source_root / dependency).is_dir():
                return source_root
        return None

    def resolve(
        self,
        dependency: str,
        index: DedupIndex | None = None,
    ) -> ResolvedRepository | ResolutionMiss:
        """Find the most specific licensed ancestor of ``dependency``.

        Candidates run from the full identifier up to its first segment; the
        source root itself is never a candidate. A candidate that would enclose
        a root already in ``index`` ends the search, which keeps report roots
        non-overlapping. If that candidate or one above it carries licenses,
        the miss is marked ``shadowed``.

        Args:
            dependency: Dependency identifier (slash-delimited)
            index: Roots resolved earlier in the same run

        Returns:
            ResolvedRepository on success, ResolutionMiss otherwise
        """
        path = clean_path(dependency)
        if not path:
            return ResolutionMiss(dependency, "identifier names no directory below a source root")

        source_root = self.locate(path)
        if source_root is None:
            return ResolutionMiss(dependency, "source directory not found in any source root")

        candidates = ancestors(path)
        for position, candidate in enumerate(candidates):
            if index is not None and index.encloses(candidate):
                return self._enclosing_miss(dependency, source_root, candidates[position:])

            directory = source_root / candidate
            licenses = self._classify(directory)
            if licenses:
                return ResolvedRepository(
                    root=candidate,
                    licenses=tuple(licenses),
                    directory=directory,
                )

        return ResolutionMiss(dependency, "no license found in any ancestor directory")

    def _classify(self, directory: Path) -> list[LicenseRecord]:
        try:
            return self.classifier.classify(directory)
        except OSError as e:
            logger.debug("Cannot classify %s: %s", directory, e)
            return []

    def _enclosing_miss(
        self,
        dependency: str,
        source_root: Path,
        candidates: Sequence[str],
    ) -> ResolutionMiss:
        for candidate in candidates:
            if self._classify(source_root / candidate):
                return ResolutionMiss(
                    dependency,
                    f"licensed ancestor {candidate} encloses an already resolved repository",
                    shadowed=True,
                )
        return ResolutionMiss(dependency, "no license found in any ancestor directory")

    def resolve_all(
        self,
        dependencies: Iterable[str],
        index: DedupIndex | None = None,
    ) -> Iterator[tuple[str, ResolvedRepository | ResolutionMiss]]:
        """Resolve ``dependencies`` in order, skipping those already covered.

        Each successful root is registered in ``index`` before the next
        dependency is considered, so the first dependency to reach a root
        becomes its representative.

        Yields:
            (dependency, outcome) for every dependency not already covered
        """
        if index is None:
            index = DedupIndex()

        for dependency in dependencies:
            if index.covers(clean_path(dependency)):
                logger.debug("Skipping %s: covered by a resolved repository", dependency)
                continue

            outcome = self.resolve(dependency, index)
            if isinstance(outcome, ResolvedRepository):
                index.register(outcome.root)
                logger.debug("Resolved %s -> %s", dependency, outcome.root)
            yield dependency, outcome
