#!/usr/bin/env python3
"""Unit tests for configuration loading and validation."""

import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent))

from specmirror.config import (
    Config,
    PUSH_URL,
    READ_ONLY_URL,
    load_configuration,
    validate_configuration,
)


class TestConfig(unittest.TestCase):
    """Test cases for the Config dataclass."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_layout_properties(self):
        config = Config(home_dir=self.temp_dir)

        home = self.temp_dir.resolve()
        self.assertEqual(config.repos_dir, home / "repos")
        self.assertEqual(config.mirror_dir, home / "repos" / "master")
        self.assertEqual(config.legacy_mirror_dir, home / "master")

    def test_default_endpoints(self):
        config = Config(home_dir=self.temp_dir)

        self.assertEqual(config.read_only_url, READ_ONLY_URL)
        self.assertEqual(config.push_url, PUSH_URL)
        self.assertEqual(config.branch, "master")

    def test_home_dir_string_is_expanded(self):
        config = Config(home_dir="~/specmirror-test-home")
        self.assertEqual(config.home_dir, (Path.home() / "specmirror-test-home").resolve())

    def test_invalid_log_level(self):
        with self.assertRaises(ValueError):
            Config(home_dir=self.temp_dir, log_level="LOUD")

    def test_log_level_is_normalised(self):
        self.assertEqual(Config(home_dir=self.temp_dir, log_level="debug").log_level, "DEBUG")

    def test_invalid_mirror_name(self):
        for name in ("", "a/b", ".hidden"):
            with self.assertRaises(ValueError):
                Config(home_dir=self.temp_dir, mirror_name=name)

    def test_empty_url_rejected(self):
        with self.assertRaises(ValueError):
            Config(home_dir=self.temp_dir, push_url="")


class TestLoadConfiguration(unittest.TestCase):
    """Test cases for load_configuration()."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_environment_overrides(self):
        env = {
            "SPECMIRROR_HOME": str(self.temp_dir),
            "SPECMIRROR_MIRROR_NAME": "trunk",
            "SPECMIRROR_BRANCH": "main",
            "SPECMIRROR_READ_ONLY_URL": "https://example.com/specs.git",
            "SPECMIRROR_PUSH_URL": "git@example.com:specs.git",
            "SPECMIRROR_LOG_LEVEL": "warning",
        }
        with patch.dict(os.environ, env), patch("specmirror.config.load_dotenv"):
            config = load_configuration()

        self.assertEqual(config.home_dir, self.temp_dir.resolve())
        self.assertEqual(config.mirror_name, "trunk")
        self.assertEqual(config.branch, "main")
        self.assertEqual(config.read_only_url, "https://example.com/specs.git")
        self.assertEqual(config.push_url, "git@example.com:specs.git")
        self.assertEqual(config.log_level, "WARNING")

    def test_unset_environment_keeps_config_defaults(self):
        env = {
            key: value for key, value in os.environ.items()
            if not key.startswith("SPECMIRROR_")
        }
        with patch.dict(os.environ, env, clear=True), patch("specmirror.config.load_dotenv"):
            config = load_configuration()

        self.assertEqual(config, Config())

    def test_invalid_environment_raises_configuration_error(self):
        env = {"SPECMIRROR_HOME": str(self.temp_dir), "SPECMIRROR_LOG_LEVEL": "LOUD"}
        with patch.dict(os.environ, env), patch("specmirror.config.load_dotenv"):
            with self.assertRaises(ValueError) as ctx:
                load_configuration()

        self.assertIn("Configuration error", str(ctx.exception))


class TestValidateConfiguration(unittest.TestCase):
    """Test cases for validate_configuration()."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    @patch("specmirror.config.validate_git_availability", return_value=(True, None))
    def test_valid_configuration_has_no_issues(self, _):
        config = Config(home_dir=self.temp_dir / "home")
        self.assertEqual(validate_configuration(config), [])

    @patch("specmirror.config.validate_git_availability", return_value=(False, "Git executable 'git' not found"))
    def test_missing_git_is_an_error(self, _):
        issues = validate_configuration(Config(home_dir=self.temp_dir))
        self.assertIn("ERROR: Git executable 'git' not found", issues)

    @patch("specmirror.config.validate_git_availability", return_value=(True, None))
    def test_identical_urls_warn(self, _):
        config = Config(home_dir=self.temp_dir, read_only_url=PUSH_URL, push_url=PUSH_URL)
        issues = validate_configuration(config)
        self.assertTrue(any("identical" in issue for issue in issues))

    @patch("specmirror.config.validate_git_availability", return_value=(True, None))
    def test_suspicious_url_warns(self, _):
        config = Config(home_dir=self.temp_dir, read_only_url="ftp://example.com/specs")
        issues = validate_configuration(config)
        self.assertEqual(issues, ["WARNING: Git remote URL may be invalid: ftp://example.com/specs"])


if __name__ == "__main__":
    unittest.main()
