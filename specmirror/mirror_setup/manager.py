"""Mirror setup: resolve the access mode, classify the layout and act on it."""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional

from ..config import Config
from ..errors import UpdateError
from .migration import migrate_repos
from .mode import AccessMode, read_mirror_remote_url, resolve_mode, url_for_mode, use_shallow_clone
from .outcome import SetupAction, SetupOutcome
from .process import ProcessExecutor, working_directory
from .repository import RepositoryManager, is_work_tree_root
from .state import MirrorState, classify_mirror_state


@contextmanager
def section(title: str, reporter: Optional[Callable[[str], None]] = None):
    """Frame a unit of work with a banner; failures inside are logged against ``title``."""
    logger = logging.getLogger('specmirror.setup')

    logger.info(title, extra={'operation': 'setup'})
    if reporter:
        reporter(title)
    try:
        yield
    except Exception as e:
        logger.error(f"{title} failed: {e}", extra={'operation': 'setup'})
        raise


class MirrorSetupManager:
    """
    Brings the local spec mirror into a known-good state.

    This class provides functionality to:
    - Resolve whether the mirror should use the push or read-only URL
    - Classify the on-disk layout (current, legacy or absent)
    - Refresh, migrate or clone the mirror accordingly
    """

    def __init__(
        self,
        config: Config,
        executor: Optional[ProcessExecutor] = None,
        repositories: Optional[RepositoryManager] = None,
        reporter: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize MirrorSetupManager.

        Args:
            config: Storage locations, mirror name and remote endpoints
            executor: Runs git against the mirror
            repositories: Adds and updates named repositories
            reporter: Receives user-facing banner lines
        """
        self.config = config
        self.executor = executor or ProcessExecutor()
        self.repositories = repositories or RepositoryManager(config)
        self.reporter = reporter
        self.logger = logging.getLogger('specmirror.setup')

    def run(self, push: bool = False, no_shallow: bool = False) -> SetupOutcome:
        """Resolve the mode, classify the layout and dispatch the matching action."""
        mode = self.resolve_mode(push)
        state = self.classify()
        return self.dispatch(state, mode, no_shallow=no_shallow)

    def resolve_mode(self, user_requested_push: bool) -> AccessMode:
        return resolve_mode(self.config, self.executor, user_requested_push)

    def classify(self) -> MirrorState:
        return classify_mirror_state(self.config)

    def dispatch(self, state: MirrorState, mode: AccessMode, no_shallow: bool = False) -> SetupOutcome:
        """
        Run exactly one setup branch for ``state``.

        Collaborator failures propagate unchanged; nothing is retried.
        """
        with section(f"Setting up spec repo `{self.config.mirror_name}`", self.reporter):
            if state is MirrorState.CURRENT_PRESENT:
                self.refresh(mode)
                action = SetupAction.REFRESH
            elif state is MirrorState.LEGACY_PRESENT:
                self.migrate()
                self.adopt(mode, no_shallow=no_shallow, replace=True)
                action = SetupAction.MIGRATE
            elif state is MirrorState.ABSENT:
                self.adopt(mode, no_shallow=no_shallow)
                action = SetupAction.ADOPT
            else:
                raise ValueError(f"Unhandled mirror state: {state!r}")

        outcome = SetupOutcome(action=action, mode=mode, mirror_dir=self.config.mirror_dir)
        self.logger.info(outcome.message)
        return outcome

    # Setup steps

    def refresh(self, mode: AccessMode) -> None:
        """Point the mirror at the endpoint for ``mode``, check out the branch and update."""
        if not is_work_tree_root(self.config.mirror_dir):
            raise UpdateError(
                f"`{self.config.mirror_dir}` is not a git repository",
                context={'name': self.config.mirror_name}
            )

        url = url_for_mode(self.config, mode)
        with working_directory(self.config.mirror_dir):
            self.executor.git("remote", "set-url", "origin", url)
            self.executor.git("checkout", self.config.branch)
        self.repositories.update(self.config.mirror_name, force=True)

    def migrate(self) -> None:
        """Move repos from the old directory structure into repos/."""
        migrate_repos(self.config.legacy_mirror_dir, self.config.repos_dir)

    def adopt(self, mode: AccessMode, no_shallow: bool = False, replace: bool = False) -> None:
        """Clone the mirror from the endpoint for ``mode``."""
        self.repositories.add(
            self.config.mirror_name,
            url_for_mode(self.config, mode),
            self.config.branch,
            shallow=use_shallow_clone(mode, no_shallow),
            replace=replace,
        )

    def get_status(self) -> Dict[str, Any]:
        """Describe the mirror without changing anything on disk."""
        state = self.classify()
        return {
            "state": state.value,
            "mode": self.resolve_mode(False).value,
            "mirror_dir": str(self.config.mirror_dir),
            "remote_url": read_mirror_remote_url(self.config, self.executor),
        }
