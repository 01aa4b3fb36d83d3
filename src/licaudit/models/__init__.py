"""licaudit data models.

This module exports the records exchanged between pipeline stages:
- LicenseRecord: One classified license file
- ProvenanceInfo: Revision hash and origin URL of a repository root
- ResolvedRepository: Resolver output (root plus licenses)
- ResolutionMiss: Resolver output when no license was found
- PackageRecord: One report row
- AuditIssue: Non-fatal condition recorded during a run
"""

from licaudit.models.records import (
    UNRECOGNIZED,
    AuditIssue,
    LicenseRecord,
    PackageRecord,
    ProvenanceInfo,
    ResolutionMiss,
    ResolvedRepository,
    ancestors,
    clean_path,
    is_path_prefix,
)

__all__ = [
    "UNRECOGNIZED",
    "AuditIssue",
    "LicenseRecord",
    "PackageRecord",
    "ProvenanceInfo",
    "ResolutionMiss",
    "ResolvedRepository",
    "ancestors",
    "clean_path",
    "is_path_prefix",
]
