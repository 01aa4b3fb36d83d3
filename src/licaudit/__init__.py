"""licaudit - Third-party license auditor for build targets.

licaudit walks the transitive dependency closure of a set of build targets and
reports, for every licensed repository unit it finds:
- the dependency that first pulled it in
- the repository root that carries the license files
- provenance (revision hash and origin URL)
- the license files themselves, classified by type

Core principles:
- Most-Specific-Wins: a dependency is attributed to its closest licensed ancestor
- Non-Overlap: no repository root in a report encloses another
- Best-Effort Provenance: missing VCS data never aborts a run
- Deterministic Output: same inputs produce byte-identical reports
"""

__version__ = "0.1.0"
__author__ = "licaudit Contributors"
