"""
Tests for content-hash and mtime change detection.
"""

import hashlib
import os

from docindex.core.change_tracker import ChangeTracker, hash_file, mtime_iso
from docindex.core.index_state import FileState
from tests.indexing_test_utils import write_file


def _bump_mtime(path, seconds: float = 10.0) -> None:
    stat = path.stat()
    os.utime(path, (stat.st_atime + seconds, stat.st_mtime + seconds))


def test_hash_file_matches_sha256(tmp_path):
    content = ("paragraph of text\n" * 10000).encode("utf-8")
    path = tmp_path / "big.txt"
    path.write_bytes(content)
    assert len(content) > 64 * 1024
    assert hash_file(path) == hashlib.sha256(content).hexdigest()


def test_hash_file_empty(tmp_path):
    path = tmp_path / "empty.md"
    path.write_bytes(b"")
    assert hash_file(path) == hashlib.sha256(b"").hexdigest()


def test_fingerprint(tmp_path):
    path = write_file(tmp_path, "a.md", "hello")
    state = ChangeTracker().fingerprint(path)
    assert state.content_hash == hashlib.sha256(b"hello").hexdigest()
    assert state.last_modified == mtime_iso(path)
    assert state.chunk_count == 0


def test_no_previous_state_is_changed(tmp_path):
    path = write_file(tmp_path, "a.md", "hello")
    assert ChangeTracker().has_changed(path, None)


def test_unchanged_file(tmp_path):
    path = write_file(tmp_path, "a.md", "hello")
    tracker = ChangeTracker()
    assert not tracker.has_changed(path, tracker.fingerprint(path))


def test_content_change_detected(tmp_path):
    path = write_file(tmp_path, "a.md", "hello")
    tracker = ChangeTracker()
    previous = tracker.fingerprint(path)
    stat = path.stat()
    path.write_text("goodbye", encoding="utf-8")
    os.utime(path, (stat.st_atime, stat.st_mtime))
    assert tracker.has_changed(path, previous)


def test_touch_detected_by_default(tmp_path):
    path = write_file(tmp_path, "a.md", "hello")
    tracker = ChangeTracker()
    previous = tracker.fingerprint(path)
    _bump_mtime(path)
    assert tracker.has_changed(path, previous)


def test_touch_ignored_with_hash_only_detection(tmp_path):
    path = write_file(tmp_path, "a.md", "hello")
    tracker = ChangeTracker(detect_mtime_changes=False)
    previous = tracker.fingerprint(path)
    _bump_mtime(path)
    assert not tracker.has_changed(path, previous)


def test_stale_hash_with_same_mtime(tmp_path):
    path = write_file(tmp_path, "a.md", "hello")
    previous = FileState(content_hash="0" * 64, last_modified=mtime_iso(path))
    assert ChangeTracker().has_changed(path, previous)
