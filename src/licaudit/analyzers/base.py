"""Abstract base class for external tool adapters.

Each adapter wraps one external program (build tool, version control system):
1. Invokes the program with explicit arguments and working directory
2. Parses its textual output
3. Returns licaudit records or plain values
4. Raises ToolNotAvailableError / ToolExecutionError subclasses on failure
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ToolAdapter(ABC):
    """Abstract interface for pluggable external tools.

    Attributes:
        name: Tool identifier (e.g., "go", "git")
        capability: Capability type ("collector", "vcs")
        timeout: Seconds to wait for each command (None waits forever)
    """

    #: Executable invoked by ``run``
    command: str = ""

    def __init__(self, name: str, capability: str, timeout: float | None = None) -> None:
        self.name = name
        self.capability = capability
        self.timeout = timeout
        self._version: str | None = None

    @property
    def version(self) -> str | None:
        """Get the tool version (cached after first check)."""
        if self._version is None:
            self._version = self.get_version()
        return self._version

    @abstractmethod
    def check_available(self) -> bool:
        """Verify tool is installed and accessible."""

    @abstractmethod
    def get_version(self) -> str | None:
        """Return tool version string, or None if unavailable."""

    def run(
        self,
        args: list[str],
        cwd: Path | str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run the tool with an explicit working directory.

        The process working directory of licaudit itself is never changed.

        Args:
            args: Arguments passed after the executable
            cwd: Working directory for the child process

        Returns:
            Completed process with captured text output

        Raises:
            FileNotFoundError: If the executable or ``cwd`` does not exist
            NotADirectoryError: If ``cwd`` is not a directory
            subprocess.TimeoutExpired: If the timeout elapses
        """
        argv = [self.command or self.name, *args]
        logger.debug("Running %s (cwd=%s)", " ".join(argv), cwd or ".")
        return subprocess.run(
            argv,
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=self.timeout,
        )

    def get_metadata(self) -> dict[str, Any]:
        """Get adapter metadata for logging and debugging."""
        return {
            "name": self.name,
            "capability": self.capability,
            "version": self.version,
            "available": self.check_available(),
        }


class ToolNotAvailableError(Exception):
    """Raised when a required tool is not installed or not registered."""

    def __init__(self, tool_name: str, message: str | None = None) -> None:
        self.tool_name = tool_name
        self.message = message or f"Tool not available: {tool_name}"
        super().__init__(self.message)


class ToolExecutionError(Exception):
    """Raised when a tool execution fails."""

    def __init__(
        self,
        tool_name: str,
        message: str,
        exit_code: int | None = None,
        stderr: str | None = None,
    ) -> None:
        self.tool_name = tool_name
        self.exit_code = exit_code
        self.stderr = stderr
        full_message = f"{tool_name}: {message}"
        if exit_code is not None:
            full_message += f" (exit code: {exit_code})"
        if stderr and stderr.strip():
            full_message += f": {stderr.strip().splitlines()[-1]}"
        super().__init__(full_message)


class BuildQueryError(ToolExecutionError):
    """Raised when the build-graph query fails. Always fatal."""


class VCSUnavailable(ToolExecutionError):
    """Raised when version-control metadata cannot be read. Recovered by the pipeline."""
