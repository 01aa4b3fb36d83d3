"""Unit tests for report encodings and the license file dump."""

import json
from pathlib import Path

import pytest

from licaudit.models import LicenseRecord, PackageRecord, ProvenanceInfo
from licaudit.report import DumpIOError, EncodeError, PackageReport, csv_field
from tests.fixtures import BSD3_TEXT, MIT_TEXT, bsd3, mit


@pytest.fixture
def scenario_record() -> PackageRecord:
    return PackageRecord(
        path="x/a",
        repository="x/a",
        provenance=ProvenanceInfo(revision="abc123", url="https://example.com/x/a.git"),
        licenses=[
            LicenseRecord(type="MIT", file="LICENSE", text=MIT_TEXT),
            LicenseRecord(type="BSD-3", file="LICENSE-THIRD", text=BSD3_TEXT),
        ],
    )


@pytest.fixture
def bare_record() -> PackageRecord:
    return PackageRecord(path="y/b/c", repository="y/b", licenses=[mit()])


class TestCsvField:
    """Tests for CSV field quoting."""

    def test_plain_value_unquoted(self) -> None:
        assert csv_field("abc123") == "abc123"

    def test_empty_value(self) -> None:
        assert csv_field("") == ""

    def test_value_with_space_quoted(self) -> None:
        assert csv_field("a b") == '"a b"'

    def test_value_with_comma_quoted(self) -> None:
        assert csv_field("a,b") == '"a,b"'

    def test_embedded_quote_doubled(self) -> None:
        assert csv_field('say "hi"') == '"say ""hi"""'


class TestCsvEncoding:
    """Tests for the csv encoding."""

    def test_header_only_for_empty_report(self) -> None:
        assert PackageReport([]).encode("csv") == b"path,repo,type,rev,url\r\n"

    def test_scenario_row(self, scenario_record: PackageRecord) -> None:
        data = PackageReport([scenario_record]).encode("csv")

        assert data == (
            b"path,repo,type,rev,url\r\n"
            b'x/a,x/a,"LICENSE:MIT LICENSE-THIRD:BSD-3",abc123,https://example.com/x/a.git\r\n'
        )

    def test_empty_provenance_fields(self, bare_record: PackageRecord) -> None:
        data = PackageReport([bare_record]).encode("csv")

        assert data.splitlines()[1] == b"y/b/c,y/b,LICENSE:MIT,,"

    def test_rows_in_record_order(
        self,
        scenario_record: PackageRecord,
        bare_record: PackageRecord,
    ) -> None:
        lines = PackageReport([bare_record, scenario_record]).encode("csv").split(b"\r\n")

        assert lines[1].startswith(b"y/b/c,")
        assert lines[2].startswith(b"x/a,")
        assert lines[3] == b""


class TestJsonEncoding:
    """Tests for the json encoding."""

    def test_empty_report(self) -> None:
        assert PackageReport([]).encode("json") == b"{}\n"

    def test_structure(self, scenario_record: PackageRecord) -> None:
        data = json.loads(PackageReport([scenario_record]).encode("json"))

        assert data == {
            "packages": [
                {
                    "path": "x/a",
                    "repo": "x/a",
                    "rev": "abc123",
                    "url": "https://example.com/x/a.git",
                    "licenses": [
                        {"type": "MIT", "file": "LICENSE"},
                        {"type": "BSD-3", "file": "LICENSE-THIRD"},
                    ],
                }
            ]
        }

    def test_key_order_and_indent(self, scenario_record: PackageRecord) -> None:
        text = PackageReport([scenario_record]).encode("json").decode()

        assert text.startswith('{\n  "packages": [\n    {\n      "path": "x/a",')
        assert text.index('"repo"') < text.index('"rev"') < text.index('"url"')
        assert text.index('"url"') < text.index('"licenses"')
        assert text.endswith("}\n")

    def test_empty_fields_omitted(self, bare_record: PackageRecord) -> None:
        package = json.loads(PackageReport([bare_record]).encode("json"))["packages"][0]

        assert "rev" not in package
        assert "url" not in package

    def test_license_text_excluded(self, scenario_record: PackageRecord) -> None:
        text = PackageReport([scenario_record]).encode("json").decode()

        assert "Permission is hereby granted" not in text


class TestNoticeEncoding:
    """Tests for the notice encoding."""

    def test_contains_license_texts(self, scenario_record: PackageRecord) -> None:
        text = PackageReport([scenario_record]).encode("notice").decode()

        assert text.startswith("THIRD-PARTY SOFTWARE NOTICES\n")
        assert "1 third-party repository." in text
        assert "x/a\n===\n" in text
        assert "Source:   https://example.com/x/a.git" in text
        assert "Revision: abc123" in text
        assert "--- LICENSE (MIT) ---" in text
        assert "--- LICENSE-THIRD (BSD-3) ---" in text
        assert "Permission is hereby granted" in text
        assert "Neither the name of Example Inc." in text

    def test_missing_provenance_lines_omitted(self, bare_record: PackageRecord) -> None:
        text = PackageReport([bare_record]).encode("notice").decode()

        assert "Source:" not in text
        assert "Revision:" not in text
        assert "Used by:  y/b/c" in text

    def test_empty_report(self) -> None:
        text = PackageReport([]).encode("notice").decode()

        assert "0 third-party repositories." in text

    def test_license_text_not_escaped(self) -> None:
        record = PackageRecord(
            path="z/q",
            repository="z/q",
            licenses=[LicenseRecord(type="MIT", file="LICENSE", text="<Copyright> & sons\n")],
        )

        text = PackageReport([record]).encode("notice").decode()

        assert "<Copyright> & sons" in text


class TestEncode:
    """Tests for format dispatch and determinism."""

    @pytest.mark.parametrize("fmt", ["json", "csv", "notice"])
    def test_idempotent(self, fmt: str, scenario_record: PackageRecord) -> None:
        report = PackageReport([scenario_record])

        assert report.encode(fmt) == report.encode(fmt)

    def test_unknown_format(self) -> None:
        with pytest.raises(EncodeError, match="Unknown report format"):
            PackageReport([]).encode("xml")

    def test_default_is_json(self, scenario_record: PackageRecord) -> None:
        report = PackageReport([scenario_record])

        assert report.encode() == report.encode("json")

    def test_len(self, scenario_record: PackageRecord, bare_record: PackageRecord) -> None:
        assert len(PackageReport([scenario_record, bare_record])) == 2


class TestDump:
    """Tests for writing license files to disk."""

    def test_mirrors_repository_layout(
        self,
        scenario_record: PackageRecord,
        bare_record: PackageRecord,
        licenses_dir: Path,
    ) -> None:
        written = PackageReport([scenario_record, bare_record]).dump(licenses_dir)

        assert written == [
            licenses_dir / "x/a/LICENSE",
            licenses_dir / "x/a/LICENSE-THIRD",
            licenses_dir / "y/b/LICENSE",
        ]
        assert (licenses_dir / "x/a/LICENSE").read_text() == MIT_TEXT
        assert (licenses_dir / "x/a/LICENSE-THIRD").read_text() == BSD3_TEXT

    def test_bytes_round_trip(self, licenses_dir: Path) -> None:
        raw = b"Copyright \xa9 1999 Caf\xe9 Authors\n\x00binary tail\n"
        text = raw.decode("utf-8", errors="surrogateescape")
        record = PackageRecord(
            path="x/latin1",
            repository="x/latin1",
            licenses=[LicenseRecord(type="unrecognized", file="COPYING", text=text)],
        )

        PackageReport([record]).dump(licenses_dir)

        assert (licenses_dir / "x/latin1/COPYING").read_bytes() == raw

    def test_records_without_licenses_skipped(self, licenses_dir: Path) -> None:
        record = PackageRecord(path="x/empty", repository="x/empty")

        written = PackageReport([record]).dump(licenses_dir)

        assert written == []
        assert not (licenses_dir / "x/empty").exists()

    def test_overwrites_existing_files(
        self,
        scenario_record: PackageRecord,
        licenses_dir: Path,
    ) -> None:
        target = licenses_dir / "x/a/LICENSE"
        target.parent.mkdir(parents=True)
        target.write_text("stale")

        PackageReport([scenario_record]).dump(licenses_dir)

        assert target.read_text() == MIT_TEXT

    def test_target_is_a_file(self, scenario_record: PackageRecord, tmp_path: Path) -> None:
        blocker = tmp_path / "licenses"
        blocker.write_text("not a directory")

        with pytest.raises(DumpIOError) as exc_info:
            PackageReport([scenario_record]).dump(blocker)

        assert exc_info.value.path == blocker / "x/a"
        assert isinstance(exc_info.value.cause, OSError)

    def test_aborts_after_partial_write(self, licenses_dir: Path) -> None:
        first = PackageRecord(path="x/a", repository="x/a", licenses=[mit()])
        second = PackageRecord(path="x/b", repository="x/b", licenses=[bsd3()])
        # A file where the second repository's directory should go
        licenses_dir.mkdir()
        (licenses_dir / "x").mkdir()
        (licenses_dir / "x/b").write_text("blocker")

        with pytest.raises(DumpIOError):
            PackageReport([first, second]).dump(licenses_dir)

        assert (licenses_dir / "x/a/LICENSE").read_text() == MIT_TEXT
