"""
Unit tests for the LDIF record splitter.

Tests for:
- Blank-line separation
- Runs of blank lines and trailing entries
- Raw text preservation
- bytes / line-iterable input
"""

import io

import pytest

from ldif_history.export.splitter import split_records, count_records


pytestmark = pytest.mark.unit


class TestSplitRecords:
    """Tests for split_records."""

    def test_two_entries(self, sample_entries, make_export):
        """Entries separated by one blank line come out in order."""
        export = make_export(sample_entries["alice"], sample_entries["bob"])

        records = list(split_records(export))

        assert [r.text for r in records] == [sample_entries["alice"], sample_entries["bob"]]
        assert [r.position for r in records] == [0, 1]

    def test_multiple_blank_lines_are_one_separator(self):
        export = "dn: cn=a\n\n\n\ndn: cn=b\n\n"

        records = list(split_records(export))

        assert [r.text for r in records] == ["dn: cn=a\n", "dn: cn=b\n"]

    def test_leading_blank_lines_ignored(self):
        records = list(split_records("\n\ndn: cn=a\n"))
        assert [r.text for r in records] == ["dn: cn=a\n"]

    def test_last_entry_without_trailing_newline(self):
        records = list(split_records("dn: cn=a\n\ndn: cn=b"))

        assert records[-1].text == "dn: cn=b\n"

    def test_empty_export(self):
        assert list(split_records("")) == []
        assert list(split_records("\n\n")) == []

    def test_folded_and_base64_lines_kept_verbatim(self):
        entry = (
            "dn: cn=very long name that goes on,\n"
            " dc=example,dc=org\n"
            "description:: SGVsbG8gV29ybGQ=\n"
        )

        records = list(split_records(entry + "\n"))

        assert len(records) == 1
        assert records[0].text == entry

    def test_crlf_blank_line_separates(self):
        records = list(split_records("dn: cn=a\r\n\r\ndn: cn=b\r\n"))

        assert [r.text for r in records] == ["dn: cn=a\r\n", "dn: cn=b\r\n"]

    def test_bytes_input(self):
        records = list(split_records(b"dn: cn=a\n\ndn: cn=b\n"))
        assert len(records) == 2

    def test_bytes_input_keeps_invalid_utf8(self):
        raw = b"dn: cn=a\ndescription: caf\xe9\n"

        records = list(split_records(raw))

        assert records[0].text.encode("utf-8", errors="surrogateescape") == raw

    def test_line_iterable_input(self):
        stream = io.StringIO("dn: cn=a\n\ndn: cn=b\n")
        records = list(split_records(stream))
        assert [r.text for r in records] == ["dn: cn=a\n", "dn: cn=b\n"]

    def test_is_lazy(self):
        """Records are yielded before the whole stream has been consumed."""
        consumed = []

        def lines():
            for line in ["dn: cn=a\n", "\n", "dn: cn=b\n"]:
                consumed.append(line)
                yield line

        first = next(split_records(lines()))

        assert first.text == "dn: cn=a\n"
        assert consumed == ["dn: cn=a\n", "\n"]


class TestCountRecords:
    """Tests for count_records."""

    def test_count(self, sample_entries, make_export):
        export = make_export(*sample_entries.values())
        assert count_records(export) == 4
