"""Audit pipeline orchestrator.

Runs the stages strictly in sequence:
1. Dependency collection (build-graph query)
2. Repository resolution with prefix deduplication
3. Provenance lookup for each resolved repository
4. Record assembly

Collection failures are fatal. Resolution misses and provenance failures are
recorded on the result and the run continues.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from licaudit.analyzers import (
    DedupIndex,
    DependencyCollector,
    ProvenanceFetcher,
    RepositoryResolver,
    VCSUnavailable,
    get_registry,
    setup_default_adapters,
)
from licaudit.config import LicauditConfig
from licaudit.models import (
    AuditIssue,
    PackageRecord,
    ProvenanceInfo,
    ResolutionMiss,
    ResolvedRepository,
)
from licaudit.report import PackageReport
from licaudit.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PipelineOptions:
    """Options for controlling pipeline execution.

    Attributes:
        source_roots: Override the configured source roots
        skip_provenance: Do not query version control
        workdir: Directory the build-graph query runs in
    """

    source_roots: list[Path] = field(default_factory=list)
    skip_provenance: bool = False
    workdir: Path | None = None


@dataclass
class AuditResult:
    """Outcome of one pipeline run.

    Attributes:
        dependencies: Identifiers returned by the collector, in order
        records: One record per repository root, in resolution order
        issues: Non-fatal conditions encountered
    """

    dependencies: list[str] = field(default_factory=list)
    records: list[PackageRecord] = field(default_factory=list)
    issues: list[AuditIssue] = field(default_factory=list)

    @property
    def report(self) -> PackageReport:
        return PackageReport(self.records)

    def record_for(self, dependency: str) -> PackageRecord | None:
        """Return the record whose repository covers ``dependency``, if any."""
        for record in self.records:
            if record.covers(dependency):
                return record
        return None

    def add_issue(self, component: str, dependency: str, message: str) -> None:
        self.issues.append(AuditIssue(component=component, dependency=dependency, message=message))


class AuditPipeline:
    """Orchestrates collection, resolution, provenance and assembly.

    Collaborators default to the adapters selected in the configuration and
    can be injected directly (tests, alternate toolchains).
    """

    def __init__(
        self,
        config: LicauditConfig | None = None,
        collector: DependencyCollector | None = None,
        resolver: RepositoryResolver | None = None,
        fetcher: ProvenanceFetcher | None = None,
    ) -> None:
        self.config = config or LicauditConfig()
        self._collector = collector
        self._resolver = resolver
        self._fetcher = fetcher

        setup_default_adapters()
        self._registry = get_registry()

    # =========================================================================
    # Collaborators
    # =========================================================================

    def get_collector(self, options: PipelineOptions) -> DependencyCollector:
        if self._collector is None:
            self._collector = self._registry.get_collector(
                self.config.tools.collector,
                timeout=self.config.tools.timeout,
                workdir=options.workdir,
            )
        return self._collector

    def get_resolver(self, options: PipelineOptions) -> RepositoryResolver:
        if self._resolver is None:
            source_roots = options.source_roots or self.config.search.resolved_roots()
            classifier = self._registry.get_classifier(self.config.tools.classifier)
            logger.debug("Source roots: %s", ", ".join(str(r) for r in source_roots))
            self._resolver = RepositoryResolver(source_roots, classifier)
        return self._resolver

    def get_fetcher(self) -> ProvenanceFetcher:
        if self._fetcher is None:
            self._fetcher = self._registry.get_provenance_fetcher(
                self.config.tools.vcs,
                timeout=self.config.tools.timeout,
            )
        return self._fetcher

    # =========================================================================
    # Stages
    # =========================================================================

    def collect(
        self,
        targets: Sequence[str],
        options: PipelineOptions | None = None,
    ) -> list[str]:
        """Stage 1: list non-standard transitive dependencies.

        Raises:
            BuildQueryError: If the build-graph query fails
        """
        options = options or PipelineOptions()
        logger.info("Collecting dependencies of %s", " ".join(targets))
        return self.get_collector(options).collect(targets)

    def resolve(
        self,
        dependencies: Sequence[str],
        options: PipelineOptions | None = None,
        result: AuditResult | None = None,
    ) -> AuditResult:
        """Stages 2-4: resolve repositories, fetch provenance, build records.

        Args:
            dependencies: Identifiers in discovery order
            options: Pipeline options
            result: Result to extend (a new one is created if None)

        Returns:
            AuditResult with one record per repository root

        Raises:
            ToolNotAvailableError: If a configured adapter is not registered
        """
        options = options or PipelineOptions()
        result = result or AuditResult(dependencies=list(dependencies))
        resolver = self.get_resolver(options)
        fetcher = None if options.skip_provenance else self.get_fetcher()

        index = DedupIndex()
        for dependency, outcome in resolver.resolve_all(dependencies, index):
            if isinstance(outcome, ResolutionMiss):
                level = logging.WARNING if outcome.shadowed else logging.DEBUG
                logger.log(level, "No license for %s: %s", dependency, outcome.reason)
                result.add_issue("resolver", dependency, outcome.reason)
                continue

            provenance = self._fetch_provenance(fetcher, outcome, result)
            result.records.append(
                PackageRecord(
                    path=dependency,
                    repository=outcome.root,
                    provenance=provenance,
                    licenses=list(outcome.licenses),
                )
            )

        logger.structured(
            logging.INFO,
            f"Resolved {len(result.records)} repositories from {len(dependencies)} dependencies",
            repositories=len(result.records),
            dependencies=len(dependencies),
            issues=len(result.issues),
        )
        return result

    def run(
        self,
        targets: Sequence[str],
        options: PipelineOptions | None = None,
    ) -> AuditResult:
        """Execute the full pipeline for ``targets``.

        Raises:
            BuildQueryError: If dependency collection fails
            ToolNotAvailableError: If a configured adapter is not registered
        """
        options = options or PipelineOptions()
        dependencies = self.collect(targets, options)
        return self.resolve(dependencies, options, AuditResult(dependencies=dependencies))

    def _fetch_provenance(
        self,
        fetcher: ProvenanceFetcher | None,
        repository: ResolvedRepository,
        result: AuditResult,
    ) -> ProvenanceInfo:
        if fetcher is None or repository.directory is None:
            return ProvenanceInfo()

        try:
            return fetcher.fetch(repository.directory)
        except VCSUnavailable as e:
            logger.warning("No provenance for %s: %s", repository.root, e)
            result.add_issue("provenance", repository.root, str(e))
            return ProvenanceInfo()
