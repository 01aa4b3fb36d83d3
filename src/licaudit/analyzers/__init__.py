"""licaudit analyzers - the stages that turn build targets into repository units.

Analyzers:
- Collectors: Build-graph queries producing dependency identifiers
- Classifiers: License file detection and typing
- Resolver: Most-specific licensed root search with prefix deduplication
- Provenance: Revision and origin URL lookup
"""

from licaudit.analyzers.base import (
    BuildQueryError,
    ToolAdapter,
    ToolExecutionError,
    ToolNotAvailableError,
    VCSUnavailable,
)
from licaudit.analyzers.classifiers import HeuristicClassifier, LicenseClassifier
from licaudit.analyzers.collectors import DependencyCollector, GoListCollector
from licaudit.analyzers.provenance import GitProvenanceFetcher, ProvenanceFetcher
from licaudit.analyzers.registry import ToolRegistry, get_registry, reset_registry
from licaudit.analyzers.resolver import DedupIndex, RepositoryResolver

__all__ = [
    "BuildQueryError",
    "DedupIndex",
    "DependencyCollector",
    "GitProvenanceFetcher",
    "GoListCollector",
    "HeuristicClassifier",
    "LicenseClassifier",
    "ProvenanceFetcher",
    "RepositoryResolver",
    "ToolAdapter",
    "ToolExecutionError",
    "ToolNotAvailableError",
    "ToolRegistry",
    "VCSUnavailable",
    "get_registry",
    "reset_registry",
    "setup_default_adapters",
]


def setup_default_adapters(registry: ToolRegistry | None = None) -> ToolRegistry:
    """Register all default tool adapters.

    Args:
        registry: Registry to populate (uses global if None)

    Returns:
        Populated ToolRegistry
    """
    if registry is None:
        registry = get_registry()

    registry.register_collector("go", GoListCollector, is_default=True)
    registry.register_classifier("heuristic", HeuristicClassifier, is_default=True)
    registry.register_provenance_fetcher("git", GitProvenanceFetcher, is_default=True)

    return registry
