"""
Shared test fixtures and configuration for pytest.
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ldif_history.export.reader import ExportSource
from ldif_history.snapshot.git_repo import VersionControl


logger = logging.getLogger(__name__)


# ============================================================================
# Environment detection
# ============================================================================

def is_git_available() -> bool:
    """Check if the git executable is available for end-to-end tests."""
    return shutil.which("git") is not None


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "e2e: End-to-end tests (requires git)")


def pytest_collection_modifyitems(config, items):
    """Automatically skip e2e tests if git is not available."""
    if is_git_available():
        return

    skip_git = pytest.mark.skip(reason="git executable not available")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_git)


# ============================================================================
# Fakes
# ============================================================================

class SequenceExportSource(ExportSource):
    """Export source returning a scripted sequence of exports and counting reads."""

    def __init__(self, exports: List[str]):
        self.exports = list(exports)
        self.reads = 0

    def read(self) -> str:
        if self.reads >= len(self.exports):
            raise AssertionError(f"Unexpected export read #{self.reads + 1}")
        text = self.exports[self.reads]
        self.reads += 1
        return text

    def get_name(self) -> str:
        return "sequence"


class RecordingVersionControl(VersionControl):
    """
    In-memory version control that records calls.

    remove() deletes the file like git rm would; commit() stores the tracked
    file names and contents as one revision.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.calls: List[Tuple[str, ...]] = []
        self.tracked = set()
        self.revisions: List[dict] = []
        self.initialized = False
        self.gc_runs = 0

    def init(self) -> None:
        self.calls.append(("init",))
        self.root.mkdir(parents=True, exist_ok=True)
        self.initialized = True

    def remove(self, path) -> None:
        path = Path(path)
        self.calls.append(("remove", path.name))
        self.tracked.discard(path.name)
        if path.exists():
            path.unlink()

    def add(self, path) -> None:
        path = Path(path)
        self.calls.append(("add", path.name))
        self.tracked.add(path.name)

    def commit(self, message: str, date: Optional[str] = None) -> Optional[str]:
        self.calls.append(("commit", message, date))
        state = {name: (self.root / name).read_text(encoding="utf-8") for name in self.tracked}
        if self.revisions and self.revisions[-1]["state"] == state:
            return None
        revision = f"rev{len(self.revisions) + 1}"
        self.revisions.append({"id": revision, "message": message, "date": date, "state": state})
        return revision

    def gc(self) -> None:
        self.calls.append(("gc",))
        self.gc_runs += 1


# ============================================================================
# Fixtures
# ============================================================================

ENTRY_ALICE = (
    "dn: uid=alice,ou=People,dc=example,dc=org\n"
    "objectClass: inetOrgPerson\n"
    "uid: alice\n"
    "cn: Alice Example\n"
    "createTimestamp: 20230101120000Z\n"
)

ENTRY_BOB = (
    "dn: uid=bob,ou=People,dc=example,dc=org\n"
    "objectClass: inetOrgPerson\n"
    "uid: bob\n"
    "cn: Bob Example\n"
    "createTimestamp: 20230101120000Z\n"
)

ENTRY_CAROL = (
    "dn: uid=carol,ou=People,dc=example,dc=org\n"
    "objectClass: inetOrgPerson\n"
    "uid: carol\n"
    "createTimestamp: 20230202080000Z\n"
)

ENTRY_DAVE = (
    "dn: uid=dave,ou=People,dc=example,dc=org\n"
    "objectClass: inetOrgPerson\n"
    "uid: dave\n"
    "createTimestamp: 20230303090000Z\n"
)


def make_export(*entries: str) -> str:
    """Join entry texts into an export with blank-line separators."""
    return "\n".join(entries)


@pytest.fixture
def sample_entries() -> dict:
    """Fixture providing sample entry texts by name."""
    return {
        "alice": ENTRY_ALICE,
        "bob": ENTRY_BOB,
        "carol": ENTRY_CAROL,
        "dave": ENTRY_DAVE,
    }


@pytest.fixture
def export_source():
    """Fixture providing a factory for scripted export sources."""
    def factory(*exports: str) -> SequenceExportSource:
        return SequenceExportSource(list(exports))
    return factory


@pytest.fixture
def fake_vcs(tmp_path: Path) -> RecordingVersionControl:
    """Fixture providing an in-memory version control rooted at tmp_path/snapshot."""
    return RecordingVersionControl(tmp_path / "snapshot")


@pytest.fixture(name="make_export")
def make_export_fixture():
    """Fixture providing make_export()."""
    return make_export
