"""Configuration management for specmirror."""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from .platform import normalize_path, validate_git_availability


READ_ONLY_URL = "https://github.com/CocoaPods/Specs.git"
PUSH_URL = "git@github.com:CocoaPods/Specs.git"

# Directory name of the mirror before the repos/ layout was introduced.
LEGACY_MIRROR_NAME = "master"

ENVIRONMENT_VARIABLES = {
    'home_dir': "SPECMIRROR_HOME",
    'mirror_name': "SPECMIRROR_MIRROR_NAME",
    'branch': "SPECMIRROR_BRANCH",
    'read_only_url': "SPECMIRROR_READ_ONLY_URL",
    'push_url': "SPECMIRROR_PUSH_URL",
    'log_level': "SPECMIRROR_LOG_LEVEL",
}


@dataclass
class Config:
    """Configuration for the spec mirror with validation and defaults."""

    # Storage
    home_dir: Path = field(default_factory=lambda: Path.home() / ".specmirror")
    mirror_name: str = "master"

    # Remote
    branch: str = "master"
    read_only_url: str = READ_ONLY_URL
    push_url: str = PUSH_URL

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.home_dir = normalize_path(self.home_dir)

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(f"Invalid log level: {self.log_level}. Must be one of {valid_log_levels}")
        self.log_level = self.log_level.upper()

        if not self.mirror_name or "/" in self.mirror_name or self.mirror_name.startswith("."):
            raise ValueError(f"Invalid mirror name: {self.mirror_name!r}")

        if not self.branch:
            raise ValueError("branch must not be empty")

        if not self.read_only_url or not self.push_url:
            raise ValueError("Both read_only_url and push_url must be set")

    @property
    def repos_dir(self) -> Path:
        """Canonical storage root holding every spec mirror."""
        return self.home_dir / "repos"

    @property
    def mirror_dir(self) -> Path:
        """Current location of the mirror."""
        return self.repos_dir / self.mirror_name

    @property
    def legacy_mirror_dir(self) -> Path:
        """Location of the mirror in the old on-disk layout."""
        return self.home_dir / LEGACY_MIRROR_NAME


def load_configuration() -> Config:
    """Load configuration from environment variables; unset variables keep the Config defaults."""
    load_dotenv()

    overrides = {}
    for field_name, env_var in ENVIRONMENT_VARIABLES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[field_name] = value

    try:
        return Config(**overrides)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Configuration error: {e}")


def validate_configuration(config: Config) -> List[str]:
    """Validate configuration and return any errors or warnings."""
    errors = []

    git_available, git_error = validate_git_availability()
    if not git_available:
        errors.append(f"ERROR: {git_error}")

    # The home directory may not exist yet; check the closest existing ancestor.
    nearest = config.home_dir
    while not nearest.exists() and nearest != nearest.parent:
        nearest = nearest.parent
    if not os.access(nearest, os.W_OK):
        errors.append(f"ERROR: No write permission for spec mirror directory: {config.home_dir}")

    for url in (config.read_only_url, config.push_url):
        if not url.startswith(("http://", "https://", "git@", "ssh://", "file://", "/")):
            errors.append(f"WARNING: Git remote URL may be invalid: {url}")

    if config.read_only_url == config.push_url:
        errors.append("WARNING: read-only and push URLs are identical; push mode cannot be detected")

    logging.getLogger('specmirror.config').debug(f"Configuration validated with {len(errors)} issue(s)")
    return errors
