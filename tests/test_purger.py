"""
Tests for purge_root(), move_contents() and remove_path().
"""

import os

import pytest

from repomirror.sync import move_contents, purge_root, remove_path


class TestRemovePath:
    """Tests for remove_path()."""

    def test_file_and_tree(self, tmp_path):
        (tmp_path / "f.txt").write_text("x")
        (tmp_path / "d" / "e").mkdir(parents=True)

        remove_path(tmp_path / "f.txt")
        remove_path(tmp_path / "d")

        assert list(tmp_path.iterdir()) == []

    def test_missing_path_is_fine(self, tmp_path):
        remove_path(tmp_path / "never-existed")

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlink_removed_not_target(self, tmp_path):
        target = tmp_path / "target"
        target.mkdir()
        (target / "keep.txt").write_text("x")
        (tmp_path / "link").symlink_to(target, target_is_directory=True)

        remove_path(tmp_path / "link")

        assert not (tmp_path / "link").exists()
        assert (target / "keep.txt").exists()


class TestPurgeRoot:
    """Tests for purge_root()."""

    def test_keeps_only_named_entries(self, tmp_path):
        (tmp_path / ".git_config").write_text("{}")
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.txt").write_text("b")

        deleted = purge_root(tmp_path, keep={".git_config"})

        assert sorted(p.name for p in deleted) == ["a.txt", "sub"]
        assert [p.name for p in tmp_path.iterdir()] == [".git_config"]

    def test_keep_names_only_match_top_level(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / ".git_config").write_text("{}")

        purge_root(tmp_path, keep={".git_config"})

        assert not (tmp_path / "sub").exists()


class TestMoveContents:
    """Tests for move_contents()."""

    def test_moves_and_replaces(self, tmp_path):
        source = tmp_path / "src"
        dest = tmp_path / "dst"
        (source / "lib").mkdir(parents=True)
        (source / "lib" / "b.txt").write_text("new")
        (source / "a.txt").write_text("new a")
        (dest / "lib").mkdir(parents=True)
        (dest / "lib" / "old.txt").write_text("old")

        moved = move_contents(source, dest)

        assert moved == 2
        assert (dest / "a.txt").read_text() == "new a"
        assert (dest / "lib" / "b.txt").read_text() == "new"
        assert not (dest / "lib" / "old.txt").exists()
        assert list(source.iterdir()) == []

    def test_skipped_names_stay_behind(self, tmp_path):
        source = tmp_path / "src"
        dest = tmp_path / "dst"
        source.mkdir()
        dest.mkdir()
        (source / ".git").mkdir()
        (source / "a.txt").write_text("a")

        assert move_contents(source, dest, skip={".git"}) == 1
        assert (source / ".git").is_dir()
        assert not (dest / ".git").exists()
