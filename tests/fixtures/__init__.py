"""Test fixtures for licaudit.

Provides license texts, a helper that lays out dependency source trees on
disk, and fake collaborators that stand in for the build tool, the license
classifier and version control.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

from licaudit.analyzers import (
    DependencyCollector,
    LicenseClassifier,
    ProvenanceFetcher,
    VCSUnavailable,
)
from licaudit.models import LicenseRecord, ProvenanceInfo

MIT_TEXT = """MIT License

Copyright (c) 2020 Example Authors

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED.
"""

BSD3_TEXT = """Copyright (c) 2019 The Example Authors. All rights reserved.

Redistribution and use in source and binary forms, with or without
modification, are permitted provided that the following conditions are met:

   * Redistributions of source code must retain the above copyright notice.
   * Neither the name of Example Inc. nor the names of its contributors may
     be used to endorse or promote products derived from this software.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS".
"""

APACHE_TEXT = """
                                 Apache License
                           Version 2.0, January 2004
                        http://www.apache.org/licenses/

   TERMS AND CONDITIONS FOR USE, REPRODUCTION, AND DISTRIBUTION
"""

CUSTOM_TEXT = "You may use this code on Tuesdays only.\n"

LICENSE_TEXTS_DIR = Path(__file__).parent / "licenses"


def license_text(name: str) -> str:
    """Return a full canonical license text shipped with the fixtures."""
    return (LICENSE_TEXTS_DIR / f"{name}.txt").read_text(encoding="utf-8")


def write_tree(root: Path, files: Mapping[str, str | bytes]) -> Path:
    """Create ``files`` (relative path -> content) under ``root``.

    A path ending in "/" creates an empty directory.
    """
    for rel_path, content in files.items():
        target = root / rel_path
        if rel_path.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content)
    return root


class FakeCollector(DependencyCollector):
    """Collector returning a fixed dependency list."""

    def __init__(self, name: str = "fake", dependencies: Sequence[str] = ()) -> None:
        super().__init__(name=name)
        self.dependencies = list(dependencies)
        self.calls: list[list[str]] = []

    def check_available(self) -> bool:
        return True

    def get_version(self) -> str | None:
        return "1.0.0"

    def collect(self, targets: Sequence[str]) -> list[str]:
        self.calls.append(list(targets))
        return list(self.dependencies)


class FakeClassifier(LicenseClassifier):
    """Classifier answering from a table keyed by path relative to ``base``.

    Every call is recorded in ``calls`` so tests can assert which
    directories were inspected.
    """

    def __init__(
        self,
        base: Path,
        licensed: Mapping[str, Sequence[LicenseRecord]],
        failing: Sequence[str] = (),
    ) -> None:
        super().__init__(name="fake")
        self.base = base
        self.licensed = {key: list(value) for key, value in licensed.items()}
        self.failing = set(failing)
        self.calls: list[str] = []

    def classify(self, path: Path) -> list[LicenseRecord]:
        rel = path.relative_to(self.base).as_posix()
        self.calls.append(rel)
        if rel in self.failing:
            raise PermissionError(13, "Permission denied", str(path))
        return list(self.licensed.get(rel, []))


class FakeFetcher(ProvenanceFetcher):
    """Provenance fetcher answering from a table keyed by directory name."""

    def __init__(
        self,
        name: str = "fake",
        provenance: Mapping[Path, ProvenanceInfo] | None = None,
        default: ProvenanceInfo | None = None,
    ) -> None:
        super().__init__(name=name)
        self.provenance = dict(provenance or {})
        self.default = default
        self.calls: list[Path] = []

    def check_available(self) -> bool:
        return True

    def get_version(self) -> str | None:
        return "1.0.0"

    def fetch(self, path: Path) -> ProvenanceInfo:
        self.calls.append(path)
        if path in self.provenance:
            return self.provenance[path]
        if self.default is not None:
            return self.default
        raise VCSUnavailable(self.name, f"not a repository: {path}")


def mit(file: str = "LICENSE") -> LicenseRecord:
    return LicenseRecord(type="MIT", file=file, text=MIT_TEXT)


def bsd3(file: str = "LICENSE") -> LicenseRecord:
    return LicenseRecord(type="BSD-3-Clause", file=file, text=BSD3_TEXT)
