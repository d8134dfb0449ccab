#!/usr/bin/env python3
"""
Tests for removed and renamed files (translate_doc_sync/file_deleter.py)

Run: python -m pytest tests/test_file_deleter.py -q
"""

from translate_doc_sync.file_deleter import process_deleted_file, process_renamed_file


class TestDeletedFile:
    def test_removes_target(self, tmp_path):
        target = tmp_path / "old.md"
        target.write_text("# 旧\n", encoding='utf-8')

        assert process_deleted_file("old.md", str(tmp_path)) == (True, "Deleted file")
        assert not target.exists()

    def test_missing_target_is_not_an_error(self, tmp_path):
        assert process_deleted_file("old.md", str(tmp_path)) == (True, "Target file already absent")


class TestRenamedFile:
    def test_moves_target(self, tmp_path):
        (tmp_path / "old.md").write_text("# 旧\n", encoding='utf-8')

        success, _ = process_renamed_file("old.md", "moved/new.md", str(tmp_path))

        assert success
        assert not (tmp_path / "old.md").exists()
        assert (tmp_path / "moved" / "new.md").read_text(encoding='utf-8') == "# 旧\n"

    def test_missing_source(self, tmp_path):
        success, message = process_renamed_file("old.md", "new.md", str(tmp_path))
        assert not success
        assert "not found" in message

    def test_does_not_overwrite(self, tmp_path):
        (tmp_path / "old.md").write_text("old", encoding='utf-8')
        (tmp_path / "new.md").write_text("new", encoding='utf-8')

        success, _ = process_renamed_file("old.md", "new.md", str(tmp_path))

        assert not success
        assert (tmp_path / "new.md").read_text(encoding='utf-8') == "new"
