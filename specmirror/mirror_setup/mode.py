"""Access mode resolution and remote URL selection."""

import logging
from enum import Enum
from typing import Optional

from ..config import Config
from ..errors import GitProcessError
from .process import ProcessExecutor, working_directory
from .repository import is_work_tree_root


class AccessMode(Enum):
    """How the mirror talks to the canonical remote."""
    READ_ONLY = "read-only"
    PUSH = "push"


def url_for_mode(config: Config, mode: AccessMode) -> str:
    """Return the remote endpoint matching ``mode``."""
    return config.push_url if mode is AccessMode.PUSH else config.read_only_url


def use_shallow_clone(mode: AccessMode, no_shallow: bool = False) -> bool:
    """
    Decide whether the initial clone should be shallow.

    Push mode needs full history so pushes have their ancestry; an explicit
    ``no_shallow`` request always disables shallow cloning.
    """
    if no_shallow:
        return False
    return mode is not AccessMode.PUSH


def read_mirror_remote_url(config: Config, executor: ProcessExecutor) -> Optional[str]:
    """Return the mirror's configured origin URL, or None when it cannot be read."""
    logger = logging.getLogger('specmirror.mode')

    if not is_work_tree_root(config.mirror_dir):
        logger.debug(f"{config.mirror_dir} is not a git work tree of its own")
        return None

    try:
        with working_directory(config.mirror_dir):
            return executor.git("config", "--get", "remote.origin.url").strip()
    except (GitProcessError, OSError) as e:
        logger.debug(f"Could not read remote URL of {config.mirror_dir}: {e}")
        return None


def resolve_mode(config: Config, executor: ProcessExecutor, user_requested_push: bool) -> AccessMode:
    """
    Resolve the access mode for this run.

    An explicit push request wins; otherwise a mirror already pointing at the
    push URL keeps push mode. Anything else, including a mirror that cannot
    be inspected, is read-only.
    """
    logger = logging.getLogger('specmirror.mode')

    if user_requested_push:
        logger.debug("Push mode requested explicitly")
        return AccessMode.PUSH

    remote_url = read_mirror_remote_url(config, executor)
    if remote_url is not None and remote_url == config.push_url:
        logger.debug(f"Existing mirror is configured for push: {remote_url}")
        return AccessMode.PUSH

    return AccessMode.READ_ONLY
