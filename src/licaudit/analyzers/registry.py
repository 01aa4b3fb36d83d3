"""Tool registry for pluggable collaborators.

The registry maps configured tool names to adapter classes for each
capability: dependency collection, license classification and provenance.

Configuration example:
    tools:
      collector: go          # -> GoListCollector
      classifier: heuristic  # -> HeuristicClassifier
      vcs: git               # -> GitProvenanceFetcher
"""

from typing import Any

from licaudit.analyzers.base import ToolNotAvailableError
from licaudit.analyzers.classifiers.base import LicenseClassifier
from licaudit.analyzers.collectors.base import DependencyCollector
from licaudit.analyzers.provenance import ProvenanceFetcher

CAPABILITIES = ("collector", "classifier", "vcs")


class ToolRegistry:
    """Registry of available adapters for each capability.

    Adding a new tool:
        1. Implement the capability interface (e.g., DependencyCollector)
        2. Register the class under a name
        3. Select it by name in the config file
    """

    def __init__(self) -> None:
        self._adapters: dict[str, dict[str, type]] = {cap: {} for cap in CAPABILITIES}
        self._defaults: dict[str, str | None] = {cap: None for cap in CAPABILITIES}

    # =========================================================================
    # Registration
    # =========================================================================

    def register_collector(
        self,
        name: str,
        adapter_class: type[DependencyCollector],
        is_default: bool = False,
    ) -> None:
        """Register a dependency collector."""
        self._register("collector", name, adapter_class, is_default)

    def register_classifier(
        self,
        name: str,
        adapter_class: type[LicenseClassifier],
        is_default: bool = False,
    ) -> None:
        """Register a license classifier."""
        self._register("classifier", name, adapter_class, is_default)

    def register_provenance_fetcher(
        self,
        name: str,
        adapter_class: type[ProvenanceFetcher],
        is_default: bool = False,
    ) -> None:
        """Register a version-control provenance fetcher."""
        self._register("vcs", name, adapter_class, is_default)

    def _register(self, capability: str, name: str, adapter_class: type, is_default: bool) -> None:
        self._adapters[capability][name] = adapter_class
        if is_default:
            self._defaults[capability] = name

    # =========================================================================
    # Retrieval
    # =========================================================================

    def get_collector(self, name: str | None = None, **kwargs: Any) -> DependencyCollector:
        """Instantiate a dependency collector.

        Args:
            name: Tool name (uses default if None)
            **kwargs: Extra constructor arguments (timeout, workdir)

        Raises:
            ToolNotAvailableError: If the tool is not registered
        """
        return self._get("collector", name, **kwargs)

    def get_classifier(self, name: str | None = None, **kwargs: Any) -> LicenseClassifier:
        """Instantiate a license classifier.

        Raises:
            ToolNotAvailableError: If the classifier is not registered
        """
        return self._get("classifier", name, **kwargs)

    def get_provenance_fetcher(self, name: str | None = None, **kwargs: Any) -> ProvenanceFetcher:
        """Instantiate a provenance fetcher.

        Raises:
            ToolNotAvailableError: If the tool is not registered
        """
        return self._get("vcs", name, **kwargs)

    def _get(self, capability: str, name: str | None, **kwargs: Any) -> Any:
        tool_name = name or self._defaults[capability]
        if tool_name is None:
            raise ToolNotAvailableError(capability, f"No {capability} tool configured")

        adapters = self._adapters[capability]
        if tool_name not in adapters:
            raise ToolNotAvailableError(
                tool_name,
                f"{capability} tool '{tool_name}' not registered. Available: {list(adapters)}",
            )

        return adapters[tool_name](tool_name, **kwargs)

    # =========================================================================
    # Introspection
    # =========================================================================

    def list_adapters(self, capability: str) -> list[str]:
        """Get registered adapter names for ``capability``."""
        return list(self._adapters[capability])

    def get_available_tools(self) -> dict[str, list[str]]:
        """Get all registered tools by capability."""
        return {cap: self.list_adapters(cap) for cap in CAPABILITIES}

    def get_metadata(self) -> dict[str, Any]:
        """Get registry metadata for logging and debugging."""
        return {
            "adapters": self.get_available_tools(),
            "defaults": dict(self._defaults),
        }


_registry: ToolRegistry | None = None


def get_registry() -> ToolRegistry:
    """Get the global tool registry instance."""
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (primarily for testing)."""
    global _registry
    _registry = None
