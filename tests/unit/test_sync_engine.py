"""
Unit tests for the snapshot synchronizer.
"""

from pathlib import Path

import pytest

from ldif_history.core.exceptions import SnapshotWriteError
from ldif_history.core.models import CanonicalEntry, EntryRecord, NamedRecord
from ldif_history.snapshot.sync_engine import SnapshotSynchronizer


pytestmark = pytest.mark.unit


def named(text: str, filename: str) -> NamedRecord:
    return NamedRecord(record=EntryRecord(text), canonical=CanonicalEntry("cn=x"), filename=filename)


class TestSnapshotSynchronizer:
    """Tests for SnapshotSynchronizer."""

    def test_writes_and_adds_new_files(self, fake_vcs):
        fake_vcs.init()
        sync = SnapshotSynchronizer(fake_vcs.root, fake_vcs)

        report = sync.synchronize([named("dn: cn=a\n", "a.ldif"), named("dn: cn=b\n", "b.ldif")])

        assert (fake_vcs.root / "a.ldif").read_text(encoding="utf-8") == "dn: cn=a\n"
        assert (fake_vcs.root / "b.ldif").read_text(encoding="utf-8") == "dn: cn=b\n"
        assert fake_vcs.tracked == {"a.ldif", "b.ldif"}
        assert report.written == ["a.ldif", "b.ldif"]
        assert report.removed == []

    def test_removes_all_previous_ldif_files_first(self, fake_vcs):
        fake_vcs.init()
        (fake_vcs.root / "old.ldif").write_text("dn: cn=old\n", encoding="utf-8")
        (fake_vcs.root / "notes.txt").write_text("keep me\n", encoding="utf-8")
        sync = SnapshotSynchronizer(fake_vcs.root, fake_vcs)

        report = sync.synchronize([named("dn: cn=new\n", "new.ldif")])

        assert not (fake_vcs.root / "old.ldif").exists()
        assert (fake_vcs.root / "notes.txt").exists()
        assert sorted(p.name for p in fake_vcs.root.glob("*.ldif")) == ["new.ldif"]
        assert report.removed == ["old.ldif"]
        assert fake_vcs.calls[1:] == [("remove", "old.ldif"), ("add", "new.ldif")]

    def test_unchanged_entry_rewritten_under_same_name(self, fake_vcs):
        fake_vcs.init()
        sync = SnapshotSynchronizer(fake_vcs.root, fake_vcs)
        sync.synchronize([named("dn: cn=a\n", "a.ldif")])

        report = sync.synchronize([named("dn: cn=a\n", "a.ldif")])

        assert report.removed == ["a.ldif"]
        assert report.written == ["a.ldif"]
        assert (fake_vcs.root / "a.ldif").read_text(encoding="utf-8") == "dn: cn=a\n"

    def test_raw_text_preserved(self, fake_vcs):
        fake_vcs.init()
        text = "dn: cn=a,\r\n dc=org\r\ndescription:: SGVsbG8=\r\n"

        SnapshotSynchronizer(fake_vcs.root, fake_vcs).synchronize([named(text, "a.ldif")])

        assert (fake_vcs.root / "a.ldif").read_bytes() == text.encode("utf-8")

    def test_missing_directory_has_no_existing_files(self, tmp_path, fake_vcs):
        sync = SnapshotSynchronizer(tmp_path / "nope", fake_vcs)
        assert sync.existing_files() == []

    def test_write_failure_raises(self, tmp_path, fake_vcs):
        missing = tmp_path / "does-not-exist"
        sync = SnapshotSynchronizer(missing, fake_vcs)

        with pytest.raises(SnapshotWriteError) as excinfo:
            sync.synchronize([named("dn: cn=a\n", "a.ldif")])

        assert excinfo.value.path == str(missing / "a.ldif")
        assert ("add", "a.ldif") not in fake_vcs.calls

    def test_report_to_dict(self, fake_vcs):
        fake_vcs.init()
        report = SnapshotSynchronizer(fake_vcs.root, fake_vcs).synchronize(
            [named("dn: cn=a\n", "a.ldif")]
        )
        assert report.to_dict() == {
            "snapshot_dir": str(fake_vcs.root),
            "removed": 0,
            "written": 1,
        }
