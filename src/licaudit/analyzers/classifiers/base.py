"""Abstract base class for license classifiers.

A classifier answers one question: which license files does this directory
carry, and what are they? Resolvers depend only on this interface so fixture
or alternate classifiers can be substituted freely.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from licaudit.models import LicenseRecord


class LicenseClassifier(ABC):
    """Single-capability interface: ``classify(path) -> records``.

    Implementations:
    - HeuristicClassifier: File-name patterns plus anchor-phrase text matching

    Attributes:
        name: Classifier identifier used in configuration
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def classify(self, path: Path) -> list[LicenseRecord]:
        """Return license records found directly in ``path``.

        Returns an empty list when ``path`` is missing or carries no license
        material.

        Raises:
            OSError: If the directory or a license file cannot be read
        """
