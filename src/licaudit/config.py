"""licaudit configuration system.

Configuration is YAML-based with per-run CLI overrides (--format, --licenses-dir,
--source-root). Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.licaudit/config.yaml
3. ./licaudit.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

VALID_FORMATS = ("json", "csv", "notice")


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


def _check_type(key: str, value: Any, *expected: type) -> None:
    """Raise ConfigError unless ``value`` is an instance of one of ``expected``."""
    # YAML booleans are ints to isinstance
    if isinstance(value, bool) or not isinstance(value, expected):
        wanted = " or ".join(t.__name__ for t in expected)
        raise ConfigError(
            f"Config value '{key}' must be {wanted}, got {type(value).__name__}: {value!r}"
        )


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        format: Report encoding (json, csv, notice)
        licenses_dir: Directory to dump license files into (None disables the dump)
    """

    format: str = "json"
    licenses_dir: str | None = None

    def __post_init__(self) -> None:
        _check_type("output.format", self.format, str)
        if self.licenses_dir is not None:
            _check_type("output.licenses_dir", self.licenses_dir, str)
        if self.format not in VALID_FORMATS:
            raise ConfigError(f"Invalid output format: {self.format}. Valid: {list(VALID_FORMATS)}")


@dataclass
class ToolConfig:
    """Tool selection configuration.

    Attributes:
        collector: Build-graph query adapter (go)
        classifier: License classifier (heuristic)
        vcs: Version-control provenance adapter (git)
        timeout: Per-command timeout in seconds (None waits forever)
    """

    collector: str = "go"
    classifier: str = "heuristic"
    vcs: str = "git"
    timeout: int | None = None

    def __post_init__(self) -> None:
        for key in ("collector", "classifier", "vcs"):
            _check_type(f"tools.{key}", getattr(self, key), str)
        if self.timeout is None:
            return
        _check_type("tools.timeout", self.timeout, int, float)
        if self.timeout <= 0:
            raise ConfigError(f"Tool timeout must be positive (got {self.timeout})")


@dataclass
class SearchConfig:
    """Where dependency sources live on disk.

    Attributes:
        source_roots: Directories under which dependency identifiers map to
            source trees, searched in order. Empty means derive from GOPATH.
    """

    source_roots: list[str] = field(default_factory=list)

    def resolved_roots(self) -> list[Path]:
        """Return the configured source roots, falling back to GOPATH."""
        if self.source_roots:
            return [Path(root).expanduser() for root in self.source_roots]
        return default_source_roots()


@dataclass
class LicauditConfig:
    """Top-level licaudit configuration.

    Attributes:
        output: Report format and dump directory
        tools: Adapter selection
        search: Source root search path
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    tools: ToolConfig = field(default_factory=ToolConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Defaults derived from the environment
# =============================================================================


def default_source_roots(gopath: str | None = None) -> list[Path]:
    """Derive source roots from a GOPATH value.

    Each GOPATH entry contributes its ``src`` directory. When GOPATH is unset
    the Go toolchain default ``~/go`` is used.

    Args:
        gopath: GOPATH value (read from the environment when None)

    Returns:
        Source root directories in search order
    """
    if gopath is None:
        gopath = os.environ.get("GOPATH", "")

    entries = [entry for entry in gopath.split(os.pathsep) if entry.strip()]
    if not entries:
        entries = [str(Path.home() / "go")]

    return [Path(entry).expanduser() / "src" for entry in entries]


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax. Example: ${HOME}/go/src -> /home/me/go/src

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ConfigError: If a referenced variable is not set
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.licaudit/config.yaml
    2. ./licaudit.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".licaudit" / "config.yaml",
        start_path / "licaudit.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> LicauditConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        LicauditConfig instance

    Raises:
        ConfigError: If a section has the wrong shape or an invalid value
    """
    data = substitute_env_vars(data)

    config = LicauditConfig()

    if "output" in data:
        output_data = _section(data, "output")
        config.output = OutputConfig(
            format=output_data.get("format", config.output.format),
            licenses_dir=output_data.get("licenses_dir", config.output.licenses_dir),
        )

    if "tools" in data:
        tools_data = _section(data, "tools")
        config.tools = ToolConfig(
            collector=tools_data.get("collector", config.tools.collector),
            classifier=tools_data.get("classifier", config.tools.classifier),
            vcs=tools_data.get("vcs", config.tools.vcs),
            timeout=tools_data.get("timeout", config.tools.timeout),
        )

    if "search" in data:
        search_data = _section(data, "search")
        roots = search_data.get("source_roots") or []
        if isinstance(roots, str):
            roots = [roots]
        _check_type("search.source_roots", roots, list)
        for root in roots:
            _check_type("search.source_roots", root, str)
        config.search = SearchConfig(source_roots=list(roots))

    return config


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data[name] or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    return section


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> LicauditConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        LicauditConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ConfigError: If the file contents are invalid
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {found_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {found_path}")
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = LicauditConfig()

    return config
