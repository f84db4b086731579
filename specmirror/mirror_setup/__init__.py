"""Spec mirror setup: mode resolution, layout classification and migration."""

from .manager import MirrorSetupManager, section
from .migration import migrate_repos
from .mode import AccessMode, resolve_mode, url_for_mode, use_shallow_clone
from .outcome import SetupAction, SetupOutcome
from .process import ProcessExecutor, working_directory
from .repository import RepositoryManager
from .state import MirrorState, classify_mirror_state

__all__ = [
    'MirrorSetupManager',
    'section',
    'migrate_repos',
    'AccessMode',
    'resolve_mode',
    'url_for_mode',
    'use_shallow_clone',
    'SetupAction',
    'SetupOutcome',
    'ProcessExecutor',
    'working_directory',
    'RepositoryManager',
    'MirrorState',
    'classify_mirror_state'
]
