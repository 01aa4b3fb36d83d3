"""License classifiers.

All classifiers implement LicenseClassifier and return LicenseRecord lists.
"""

from licaudit.analyzers.classifiers.base import LicenseClassifier
from licaudit.analyzers.classifiers.heuristic import (
    HeuristicClassifier,
    is_license_file_name,
    match_license_text,
)

__all__ = [
    "HeuristicClassifier",
    "LicenseClassifier",
    "is_license_file_name",
    "match_license_text",
]
