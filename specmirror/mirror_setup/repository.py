"""Repository add/update primitives for spec mirrors using GitPython."""

import logging
import shutil
from pathlib import Path

from git import Repo, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..config import Config
from ..errors import CloneError, UpdateError


def is_work_tree_root(path: Path) -> bool:
    """Return True when ``path`` is the top of its own git work tree, without searching parents."""
    try:
        repo = Repo(str(path))
    except (InvalidGitRepositoryError, NoSuchPathError, OSError):
        return False
    if repo.working_tree_dir is None:
        return False
    return Path(repo.working_tree_dir).resolve() == path.resolve()


class RepositoryManager:
    """
    Adds and updates named spec repositories below the storage root.

    Every repository lives in ``config.repos_dir / name`` and tracks the
    remote ``origin``.
    """

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger('specmirror.repository')

    def repo_dir(self, name: str) -> Path:
        return self.config.repos_dir / name

    def add(self, name: str, url: str, branch: str, shallow: bool, replace: bool = False) -> None:
        """
        Clone ``url`` at ``branch`` into a new repository called ``name``.

        Args:
            name: Directory name below the storage root
            url: Remote to clone from
            branch: Branch to check out
            shallow: Clone only the latest commit
            replace: Populate an existing directory of that name by cloning
                next to it and swapping it in once the clone succeeded

        Raises:
            CloneError: if the remote cannot be cloned or ``name`` already
                exists and ``replace`` is not set
        """
        target = self.repo_dir(name)

        if target.exists() and not replace:
            raise CloneError(f"Repo {name} already exists at {target}", context={'name': name})

        try:
            self.config.repos_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CloneError(f"Cannot create spec repos directory {self.config.repos_dir}: {e}") from e

        destination = target.with_name(f".{name}.clone") if target.exists() else target
        if destination.exists():
            shutil.rmtree(destination)

        clone_options = {'branch': branch}
        if shallow:
            clone_options['depth'] = 1

        self.logger.info(f"Cloning spec repo `{name}` from `{url}` (branch {branch}, shallow={shallow})")
        try:
            Repo.clone_from(url, str(destination), **clone_options)
        except GitCommandError as e:
            if destination.exists():
                shutil.rmtree(destination, ignore_errors=True)
            raise CloneError(
                f"Clone of `{url}` failed: {(e.stderr or str(e)).strip()}",
                context={'name': name, 'url': url}
            ) from e

        if destination != target:
            self.logger.info(f"Replacing existing directory {target} with fresh clone")
            shutil.rmtree(target)
            destination.rename(target)

    def update(self, name: str, force: bool = False) -> None:
        """
        Fetch ``origin`` and bring the checked out branch up to date.

        Without ``force`` only fast-forwards are accepted; with ``force`` the
        working tree is reset to the remote branch, so detached or diverged
        mirrors never stop the update.

        Raises:
            UpdateError: if the repository is missing, the fetch fails or the
                branches cannot be reconciled
        """
        target = self.repo_dir(name)
        self.logger.info(f"Updating spec repo `{name}`")

        try:
            repo = Repo(str(target))
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise UpdateError(f"`{target}` is not a git repository", context={'name': name}) from e

        try:
            branch = repo.active_branch.name
        except TypeError:
            # Detached HEAD
            branch = self.config.branch

        try:
            repo.remotes.origin.fetch()
            if force:
                repo.git.reset("--hard", f"origin/{branch}")
            else:
                repo.git.merge("--ff-only", f"origin/{branch}")
        except (GitCommandError, AttributeError, ValueError) as e:
            message = e.stderr.strip() if isinstance(e, GitCommandError) and e.stderr else str(e)
            raise UpdateError(f"Update of `{name}` failed: {message}", context={'name': name}) from e
