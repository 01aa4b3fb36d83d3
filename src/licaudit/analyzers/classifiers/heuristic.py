"""Heuristic license classifier.

Detection:
1. Candidate files are the regular files directly inside the directory whose
   names look like license files (LICENSE, LICENCE, COPYING, UNLICENSE, with
   any suffix such as LICENSE.md or LICENSE-MIT).
2. Each candidate is typed by matching normalized text against anchor phrases
   for well-known licenses. Files that match nothing are kept and typed
   "unrecognized".
"""

import logging
import re
from pathlib import Path

from licaudit.analyzers.classifiers.base import LicenseClassifier
from licaudit.models import UNRECOGNIZED, LicenseRecord

logger = logging.getLogger(__name__)

MAX_LICENSE_BYTES = 1024 * 1024

LICENSE_FILE_RE = re.compile(
    r"^(?:un)?licen[cs]e(?:[-_.].*)?$|^copying(?:[-_.].*)?$",
    re.IGNORECASE,
)

# Ordered: more specific texts first (BSD-4 before BSD-3 before BSD-2,
# LGPL/AGPL before GPL, BSL before MIT). The GPL texts name the LGPL, so
# LGPL anchors must not occur anywhere in a GPL text.
ANCHOR_PHRASES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "BSL-1.0",
        (
            "boost software license",
            "permission is hereby granted, free of charge, to any person or organization",
        ),
    ),
    (
        "MIT",
        (
            "permission is hereby granted, free of charge",
            "the software is provided as is",
        ),
    ),
    (
        "Apache-2.0",
        (
            "apache license",
            "version 2.0, january 2004",
        ),
    ),
    (
        "BSD-4-Clause",
        (
            "redistribution and use in source and binary forms, with or without modification",
            "all advertising materials mentioning features or use of this software",
        ),
    ),
    (
        "BSD-3-Clause",
        (
            "redistribution and use in source and binary forms, with or without modification",
            "neither the name of",
        ),
    ),
    (
        "BSD-2-Clause",
        (
            "redistribution and use in source and binary forms, with or without modification",
            "this software is provided by the copyright holders",
        ),
    ),
    (
        "ISC",
        (
            "permission to use, copy, modify, and/or distribute this software for any purpose",
            "the software is provided as is and the author disclaims",
        ),
    ),
    (
        "MPL-2.0",
        ("mozilla public license version 2.0",),
    ),
    (
        "AGPL-3.0",
        ("gnu affero general public license", "version 3, 19 november 2007"),
    ),
    (
        "LGPL-3.0",
        ("this version of the gnu lesser general public license incorporates",),
    ),
    (
        "LGPL-2.1",
        ("gnu lesser general public license", "version 2.1, february 1999"),
    ),
    (
        "GPL-3.0",
        ("gnu general public license", "version 3, 29 june 2007"),
    ),
    (
        "GPL-2.0",
        ("gnu general public license", "version 2, june 1991"),
    ),
    (
        "EPL-2.0",
        ("eclipse public license - v 2.0",),
    ),
    (
        "Unlicense",
        ("this is free and unencumbered software released into the public domain",),
    ),
    (
        "CC0-1.0",
        ("cc0 1.0 universal",),
    ),
    (
        "Zlib",
        (
            "this software is provided as-is, without any express or implied warranty",
            "permission is granted to anyone to use this software for any purpose",
        ),
    ),
)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_license_text(text: str) -> str:
    """Lowercase, drop quotes and collapse whitespace for phrase matching."""
    lowered = text.lower().replace('"', "").replace("'", "")
    return _WHITESPACE_RE.sub(" ", lowered)


def match_license_text(text: str) -> str | None:
    """Match license text against anchor phrases to infer a license type."""
    normalized = normalize_license_text(text)
    for license_type, phrases in ANCHOR_PHRASES:
        if all(phrase in normalized for phrase in phrases):
            return license_type
    return None


def is_license_file_name(name: str) -> bool:
    """Return True if ``name`` looks like a license file."""
    return LICENSE_FILE_RE.match(name) is not None


class HeuristicClassifier(LicenseClassifier):
    """Classify license files by name and anchor phrases."""

    def __init__(self, name: str = "heuristic", max_bytes: int = MAX_LICENSE_BYTES) -> None:
        super().__init__(name=name)
        self.max_bytes = max_bytes

    def classify(self, path: Path) -> list[LicenseRecord]:
        if not path.is_dir():
            return []

        records: list[LicenseRecord] = []
        for entry in sorted(path.iterdir(), key=lambda p: p.name):
            if not entry.is_file() or not is_license_file_name(entry.name):
                continue
            if entry.stat().st_size > self.max_bytes:
                logger.debug("Skipping oversized license candidate: %s", entry)
                continue

            text = entry.read_bytes().decode("utf-8", errors="surrogateescape")
            license_type = match_license_text(text) or UNRECOGNIZED
            records.append(LicenseRecord(type=license_type, file=entry.name, text=text))

        if records:
            logger.debug(
                "Classified %s: %s",
                path,
                ", ".join(record.label for record in records),
            )
        return records
