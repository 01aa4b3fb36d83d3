"""Go build-graph collector.

Invokes `go list` twice: once for the transitive closure of the targets, then
again over that closure to drop standard-library packages.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from licaudit.analyzers.base import BuildQueryError
from licaudit.analyzers.collectors.base import DependencyCollector, unique_lines

logger = logging.getLogger(__name__)

DEPS_TEMPLATE = '{{join .Deps "\\n"}}'
NON_STANDARD_TEMPLATE = "{{if not .Standard}}{{.ImportPath}}{{end}}"


class GoListCollector(DependencyCollector):
    """Dependency collector backed by the Go toolchain.

    Attributes:
        workdir: Directory `go list` runs in (the module being audited)
    """

    command = "go"

    def __init__(
        self,
        name: str = "go",
        timeout: float | None = None,
        workdir: Path | str | None = None,
    ) -> None:
        super().__init__(name=name, timeout=timeout)
        self.workdir = workdir

    def check_available(self) -> bool:
        try:
            return self.run(["version"]).returncode == 0
        except (subprocess.TimeoutExpired, OSError):
            return False

    def get_version(self) -> str | None:
        """Return the toolchain version, e.g. "go1.22.1"."""
        try:
            result = self.run(["version"])
        except (subprocess.TimeoutExpired, OSError):
            return None
        if result.returncode != 0:
            return None
        # "go version go1.22.1 linux/amd64"
        parts = result.stdout.split()
        return parts[2] if len(parts) >= 3 else result.stdout.strip() or None

    def collect(self, targets: Sequence[str]) -> list[str]:
        """Return non-standard transitive dependencies of ``targets``.

        Args:
            targets: Go package patterns (e.g. "./...", "example.com/cmd/app")

        Returns:
            Import paths in `go list` order

        Raises:
            BuildQueryError: If either `go list` invocation fails
        """
        closure = self._list(DEPS_TEMPLATE, targets)
        logger.debug("Build graph closure has %d packages", len(closure))
        if not closure:
            return []

        imports = self._list(NON_STANDARD_TEMPLATE, closure)
        logger.info("Found %d non-standard dependencies", len(imports))
        return imports

    def _list(self, template: str, packages: Sequence[str]) -> list[str]:
        try:
            result = self.run(["list", "-f", template, *packages], cwd=self.workdir)
        except subprocess.TimeoutExpired as e:
            raise BuildQueryError(
                self.name,
                f"go list timed out after {self.timeout} seconds",
                stderr=str(e),
            ) from e
        except OSError as e:
            raise BuildQueryError(self.name, f"failed to execute go list: {e}") from e

        if result.returncode != 0:
            raise BuildQueryError(
                self.name,
                "go list failed",
                exit_code=result.returncode,
                stderr=result.stderr,
            )

        return unique_lines(result.stdout)
