"""Report assembly, encoding and license file dump.

Encodings:
- json: {"packages": [...]} with 2-space indentation, empty fields omitted
- csv: header path,repo,type,rev,url with CRLF line endings
- notice: plain-text third-party notices including full license texts

All encodings are deterministic for a given list of records.
"""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from licaudit.models import PackageRecord
from licaudit.templates import NoticeRenderer

logger = logging.getLogger(__name__)

CSV_HEADER = ("path", "repo", "type", "rev", "url")
CSV_LINE_TERMINATOR = "\r\n"
LICENSE_TYPE_SEPARATOR = " "
FORMATS = ("json", "csv", "notice")


class ReportError(Exception):
    """Base class for report failures."""


class EncodeError(ReportError):
    """Raised when the report cannot be serialized."""


class DumpIOError(ReportError):
    """Raised when license files cannot be written."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause.strerror or cause}")


def csv_field(value: str) -> str:
    """Quote a CSV field when it contains separators, quotes or whitespace."""
    if value and any(ch == "," or ch == '"' or ch.isspace() for ch in value):
        return '"' + value.replace('"', '""') + '"'
    return value


class PackageReport:
    """Ordered collection of package records with output encodings.

    Usage:
        report = PackageReport(result.records)
        sys.stdout.buffer.write(report.encode("csv"))
        report.dump(Path("third_party/licenses"))
    """

    def __init__(self, records: Sequence[PackageRecord]) -> None:
        self.records = list(records)

    def __len__(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        """Nested-object form; an empty report has no "packages" key."""
        result: dict[str, Any] = {}
        if self.records:
            result["packages"] = [record.to_dict() for record in self.records]
        return result

    # =========================================================================
    # Encodings
    # =========================================================================

    def encode(self, fmt: str = "json") -> bytes:
        """Serialize the report.

        Args:
            fmt: One of "json", "csv", "notice"

        Returns:
            UTF-8 encoded report

        Raises:
            EncodeError: If the format is unknown or serialization fails
        """
        if fmt not in FORMATS:
            raise EncodeError(f"Unknown report format: {fmt}. Valid: {list(FORMATS)}")

        try:
            if fmt == "csv":
                text = self.render_csv()
            elif fmt == "notice":
                text = self.render_notice()
            else:
                text = self.render_json()
            return text.encode("utf-8", errors="surrogateescape")
        except EncodeError:
            raise
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Failed to encode {fmt} report: {e}") from e

    def render_json(self) -> str:
        """Render the nested-object form. License texts are never included."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"

    def render_csv(self) -> str:
        """Render one header row plus one row per record, CRLF terminated."""
        rows = [CSV_HEADER]
        for record in self.records:
            types = LICENSE_TYPE_SEPARATOR.join(lic.label for lic in record.licenses)
            rows.append(
                (record.path, record.repository, types, record.revision, record.url)
            )
        return "".join(
            ",".join(csv_field(value) for value in row) + CSV_LINE_TERMINATOR for row in rows
        )

    def render_notice(self) -> str:
        """Render third-party notices with full license texts."""
        try:
            return NoticeRenderer().render(self.records)
        except ValueError as e:
            raise EncodeError(str(e)) from e

    # =========================================================================
    # License file dump
    # =========================================================================

    def dump(self, target_dir: Path) -> list[Path]:
        """Write every license file to ``target_dir/<repository>/<file>``.

        Records without licenses are skipped. The first I/O failure aborts
        the dump; files already written are left in place.

        Args:
            target_dir: Root of the mirrored license tree

        Returns:
            Paths written, in report order

        Raises:
            DumpIOError: If a directory or file cannot be written
        """
        written: list[Path] = []
        for record in self.records:
            if not record.licenses:
                continue

            subdir = target_dir / record.repository
            try:
                subdir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DumpIOError(subdir, e) from e

            for lic in record.licenses:
                path = subdir / lic.file
                try:
                    path.write_bytes(lic.encode_text())
                except OSError as e:
                    raise DumpIOError(path, e) from e
                written.append(path)

        logger.info("Wrote %d license files to %s", len(written), target_dir)
        return written
