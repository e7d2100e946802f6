"""
Unit tests for the commit composer.
"""

import os
from datetime import datetime, timezone

import pytest

from ldif_history.snapshot.commit import CommitComposer, resolve_commit_date


pytestmark = pytest.mark.unit


class TestResolveCommitDate:
    """Tests for resolve_commit_date."""

    def test_none_means_now(self):
        assert resolve_commit_date(None) is None
        assert resolve_commit_date("") is None

    def test_plain_string_passed_through(self):
        assert resolve_commit_date("2023-05-01 12:00:00 +0200") == "2023-05-01 12:00:00 +0200"

    def test_existing_file_uses_mtime(self, tmp_path):
        dump = tmp_path / "dump.ldif"
        dump.write_text("dn: cn=a\n", encoding="utf-8")
        stamp = datetime(2022, 3, 4, 5, 6, 7, tzinfo=timezone.utc).timestamp()
        os.utime(dump, (stamp, stamp))

        assert resolve_commit_date(str(dump)) == "2022-03-04T05:06:07+00:00"


class TestCommitComposer:
    """Tests for CommitComposer."""

    def test_commit_passes_message_and_date(self, fake_vcs):
        fake_vcs.init()
        (fake_vcs.root / "a.ldif").write_text("dn: cn=a\n", encoding="utf-8")
        fake_vcs.add(fake_vcs.root / "a.ldif")

        revision = CommitComposer(fake_vcs).commit("nightly", "2023-01-01T00:00:00")

        assert revision == "rev1"
        assert fake_vcs.calls[-1] == ("commit", "nightly", "2023-01-01T00:00:00")
