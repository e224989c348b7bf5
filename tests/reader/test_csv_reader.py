"""Tests for the byte-range CSV record reader."""

import tempfile
from pathlib import Path

import pytest

from csv_partition_loader.errors import DecodeError, OpenError
from csv_partition_loader.partition import InputUnit
from csv_partition_loader.reader import CsvRecordReader, ScanContext, bind_context


def read_range(path: str, offset: int, length: int, context: ScanContext | None = None) -> list[tuple[str, ...]]:
    reader = CsvRecordReader(context or ScanContext())
    reader.initialize(InputUnit(path, offset, length))
    records = []
    try:
        while reader.next_key_value():
            records.append(reader.current_value)
    finally:
        reader.close()
    return records


class TestByteRanges:
    """Records are owned by exactly one range however the file is cut."""

    CONTENT = b"a,1\nb,2\nc,3\nd,4\n"
    RECORDS = [("a", "1"), ("b", "2"), ("c", "3"), ("d", "4")]

    def write(self, tmp_dir: str, content: bytes | None = None) -> str:
        path = Path(tmp_dir) / "data.csv"
        path.write_bytes(self.CONTENT if content is None else content)
        return str(path)

    def test_whole_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir)
            assert read_range(path, 0, len(self.CONTENT)) == self.RECORDS

    def test_cut_in_middle_of_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir)
            assert read_range(path, 0, 5) == self.RECORDS[:2]
            assert read_range(path, 5, len(self.CONTENT) - 5) == self.RECORDS[2:]

    def test_cut_on_line_start(self) -> None:
        """A line starting exactly at the boundary belongs to the earlier range."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir)
            assert read_range(path, 0, 4) == self.RECORDS[:2]
            assert read_range(path, 4, len(self.CONTENT) - 4) == self.RECORDS[2:]

    def test_every_two_way_cut(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir)
            size = len(self.CONTENT)
            for cut in range(1, size):
                records = read_range(path, 0, cut) + read_range(path, cut, size - cut)
                assert records == self.RECORDS, f"cut at {cut}"

    def test_many_small_ranges(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir)
            size = len(self.CONTENT)
            records = []
            for offset in range(0, size, 3):
                records.extend(read_range(path, offset, min(3, size - offset)))
            assert records == self.RECORDS

    def test_no_trailing_newline(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir, b"a,1\nb,2")
            assert read_range(path, 0, 7) == [("a", "1"), ("b", "2")]

    def test_zero_length_range_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir)
            assert read_range(path, 0, 0) == []
            assert read_range(path, 6, 0) == []

    def test_range_at_end_of_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir)
            assert read_range(path, len(self.CONTENT), 0) == []

    def test_offset_past_end_of_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self.write(tmp_dir)
            reader = CsvRecordReader(ScanContext())
            with pytest.raises(OpenError, match="past end of file"):
                reader.initialize(InputUnit(path, 100, 10))


class TestDialect:
    """Dialect options resolved from the scan context."""

    def test_quoted_field_spanning_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_bytes(b'x,"line1\nline2"\ny,"a,b"\n')
            assert read_range(str(path), 0, path.stat().st_size) == [
                ("x", "line1\nline2"),
                ("y", "a,b"),
            ]

    def test_custom_delimiter(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_bytes(b"a|b,c\n")
            context = ScanContext(delimiter="|")
            assert read_range(str(path), 0, 6, context) == [("a", "b,c")]

    def test_skip_header_only_at_file_start(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_bytes(b"h1,h2\na,1\nb,2\n")
            context = ScanContext(skip_header=True)
            assert read_range(str(path), 0, 8, context) == [("a", "1")]
            assert read_range(str(path), 8, 6, context) == [("b", "2")]

    def test_empty_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_bytes(b"a,1\n\nb,2\n")
            assert read_range(str(path), 0, 9) == [("a", "1"), ("b", "2")]
            kept = read_range(str(path), 0, 9, ScanContext(skip_empty_lines=False))
            assert kept == [("a", "1"), (), ("b", "2")]

    def test_utf8_content(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_text("Nœud_α,Nœud_β\n", encoding="utf-8")
            assert read_range(str(path), 0, path.stat().st_size) == [("Nœud_α", "Nœud_β")]

    def test_context_resolved_from_binding(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_bytes(b"a;b\n")
            with bind_context(ScanContext(delimiter=";")):
                reader = CsvRecordReader()
            reader.initialize(InputUnit(str(path), 0, 4))
            try:
                assert reader.next_key_value()
                assert reader.current_value == ("a", "b")
            finally:
                reader.close()

    def test_requires_bound_context(self) -> None:
        with pytest.raises(LookupError):
            CsvRecordReader()

    def test_invalid_dialect(self) -> None:
        with pytest.raises(ValueError):
            ScanContext(delimiter="||")

    def test_unknown_encoding(self) -> None:
        with pytest.raises(ValueError, match="unknown encoding"):
            ScanContext(encoding="utf-9")

    def test_encoding_must_keep_ascii_newlines(self) -> None:
        with pytest.raises(ValueError, match="ASCII-compatible"):
            ScanContext(encoding="utf-16")

    def test_single_byte_encoding_accepted(self) -> None:
        assert ScanContext(encoding="latin-1").encoding == "latin-1"

    def test_signature_encoding_accepted(self) -> None:
        assert ScanContext(encoding="utf-8-sig").encoding == "utf-8-sig"

    def test_binary_codec_rejected(self) -> None:
        with pytest.raises(ValueError, match="ASCII-compatible"):
            ScanContext(encoding="base64")


class TestDecodeErrors:
    """Malformed content surfaces as DecodeError."""

    def test_invalid_encoding(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_bytes(b"a,1\n\xff\xfe,2\n")
            with pytest.raises(DecodeError) as excinfo:
                read_range(str(path), 0, 10)
            assert excinfo.value.position == 4

    def test_unterminated_quote(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_bytes(b'a,"never closed\n')
            with pytest.raises(DecodeError):
                read_range(str(path), 0, 16)

    def test_too_many_columns(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "data.csv"
            path.write_bytes(b"a,b,c\n")
            with pytest.raises(DecodeError, match="limit is 2"):
                read_range(str(path), 0, 6, ScanContext(max_columns=2))


def test_close_is_idempotent() -> None:
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = Path(tmp_dir) / "data.csv"
        path.write_bytes(b"a\n")
        reader = CsvRecordReader(ScanContext())
        reader.initialize(InputUnit(str(path), 0, 2))
        reader.close()
        reader.close()
        assert reader.next_key_value() is False
