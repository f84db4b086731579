#!/usr/bin/env python3
"""
Unit tests for migrating repos from the old directory layout.

The old layout kept every spec repo directly in the home directory; the
new one keeps them in home/repos.
"""

import errno
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent))

from specmirror.errors import MigrationError
from specmirror.mirror_setup.migration import migrate_repos


class TestMigrateRepos(unittest.TestCase):
    """Test cases for migrate_repos()."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.home = self.temp_dir / "home"
        self.legacy_root = self.home / "master"
        self.repos_dir = self.home / "repos"

        self.legacy_root.mkdir(parents=True)
        (self.legacy_root / "Specs").mkdir()
        (self.legacy_root / "Specs" / "README").write_text("specs")
        (self.home / "other-repo").mkdir()
        (self.home / "other-repo" / "file.txt").write_text("other")

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_moves_every_sibling_into_repos(self):
        migrate_repos(self.legacy_root, self.repos_dir)

        self.assertEqual(sorted(p.name for p in self.repos_dir.iterdir()), ["master", "other-repo"])
        self.assertEqual((self.repos_dir / "master" / "Specs" / "README").read_text(), "specs")
        self.assertEqual((self.repos_dir / "other-repo" / "file.txt").read_text(), "other")
        self.assertFalse(self.legacy_root.exists())
        self.assertFalse((self.home / "other-repo").exists())

    def test_creates_repos_dir(self):
        self.assertFalse(self.repos_dir.exists())
        migrate_repos(self.legacy_root, self.repos_dir)
        self.assertTrue(self.repos_dir.is_dir())

    def test_repos_dir_is_not_moved_into_itself(self):
        self.repos_dir.mkdir()
        (self.repos_dir / "already-here").mkdir()

        migrate_repos(self.legacy_root, self.repos_dir)

        self.assertTrue(self.repos_dir.is_dir())
        self.assertFalse((self.repos_dir / "repos").exists())
        self.assertTrue((self.repos_dir / "already-here").is_dir())

    def test_dot_entries_stay_in_place(self):
        (self.home / ".settings").write_text("keep")

        migrate_repos(self.legacy_root, self.repos_dir)

        self.assertTrue((self.home / ".settings").exists())
        self.assertFalse((self.repos_dir / ".settings").exists())

    def test_existing_target_aborts_migration(self):
        (self.repos_dir / "other-repo").mkdir(parents=True)

        with self.assertRaises(MigrationError):
            migrate_repos(self.legacy_root, self.repos_dir)

        self.assertTrue(self.legacy_root.exists())

    def test_failed_move_leaves_mirror_in_legacy_location(self):
        real_move = shutil.move

        def failing_move(source, target):
            if source.endswith("other-repo"):
                raise PermissionError("denied")
            return real_move(source, target)

        with patch("specmirror.mirror_setup.migration.shutil.move", side_effect=failing_move):
            with self.assertRaises(MigrationError) as ctx:
                migrate_repos(self.legacy_root, self.repos_dir)

        self.assertIn("other-repo", ctx.exception.message)
        self.assertTrue(self.legacy_root.exists())
        self.assertFalse((self.repos_dir / "master").exists())

    def test_failed_cross_device_copy_is_removed(self):
        (self.legacy_root / "f1").write_text("one")
        (self.legacy_root / "f2").write_text("two")
        real_copyfile = shutil.copyfile
        copied = []

        def filling_copyfile(source, target, *args, **kwargs):
            if "/master/" in str(source):
                copied.append(source)
                if len(copied) == 2:
                    raise OSError(errno.ENOSPC, "No space left on device")
            return real_copyfile(source, target, *args, **kwargs)

        cross_device = OSError(errno.EXDEV, "Invalid cross-device link")
        with patch("os.rename", side_effect=cross_device), \
                patch("shutil.copyfile", side_effect=filling_copyfile):
            with self.assertRaises(MigrationError):
                migrate_repos(self.legacy_root, self.repos_dir)

        self.assertFalse((self.repos_dir / "master").exists())
        self.assertTrue((self.repos_dir / "other-repo" / "file.txt").exists())
        self.assertEqual(sorted(p.name for p in self.legacy_root.iterdir()), ["Specs", "f1", "f2"])

    def test_mirror_is_moved_last(self):
        (self.home / "zzz-repo").mkdir()
        moved = []
        real_move = shutil.move

        def recording_move(source, target):
            moved.append(Path(source).name)
            return real_move(source, target)

        with patch("specmirror.mirror_setup.migration.shutil.move", side_effect=recording_move):
            migrate_repos(self.legacy_root, self.repos_dir)

        self.assertEqual(moved, ["other-repo", "zzz-repo", "master"])

    def test_unwritable_repos_dir_raises_migration_error(self):
        with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
            with self.assertRaises(MigrationError):
                migrate_repos(self.legacy_root, self.repos_dir)


if __name__ == "__main__":
    unittest.main()
