"""Dependency collectors (build-graph query adapters)."""

from licaudit.analyzers.collectors.base import DependencyCollector, unique_lines
from licaudit.analyzers.collectors.golist import GoListCollector

__all__ = ["DependencyCollector", "GoListCollector", "unique_lines"]
