"""Abstract base class for dependency collectors.

A collector turns build targets into the ordered list of non-standard
dependency identifiers that the rest of licaudit audits.
"""

from abc import abstractmethod
from collections.abc import Iterable, Sequence

from licaudit.analyzers.base import ToolAdapter


class DependencyCollector(ToolAdapter):
    """Abstract interface for build-graph query tools.

    Implementations:
    - GoListCollector: Uses `go list` to walk a Go build graph
    """

    def __init__(self, name: str, timeout: float | None = None) -> None:
        super().__init__(name=name, capability="collector", timeout=timeout)

    @abstractmethod
    def collect(self, targets: Sequence[str]) -> list[str]:
        """Return the transitive non-standard dependencies of ``targets``.

        Order follows the underlying query; exact duplicates are removed.

        Raises:
            BuildQueryError: If any query fails
        """


def unique_lines(output: str | Iterable[str]) -> list[str]:
    """Split query output into identifiers, dropping blanks and exact duplicates."""
    lines = output.splitlines() if isinstance(output, str) else output
    seen: set[str] = set()
    result: list[str] = []
    for line in lines:
        item = line.strip()
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result
