"""External process execution for git commands run against the mirror."""

import logging
import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import List, Union

from ..errors import GitProcessError
from ..platform import get_git_executable, get_platform_info


@contextmanager
def working_directory(path: Union[str, Path]):
    """
    Change into ``path`` for the duration of the block.

    The previous working directory is restored on every exit path,
    including when the block raises.
    """
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield Path(path)
    finally:
        os.chdir(previous)


class ProcessExecutor:
    """Runs a named executable and returns its captured standard output."""

    def __init__(self):
        self.logger = logging.getLogger('specmirror.process')
        self.platform_info = get_platform_info()

    def run(self, executable: str, args: List[str]) -> str:
        """
        Run ``executable`` with ``args`` in the current working directory.

        Returns:
            Captured stdout

        Raises:
            GitProcessError: if the process exits with a non-zero status
            FileNotFoundError: if the executable cannot be found
        """
        command = [executable] + list(args)
        self.logger.debug(f"$ {' '.join(command)}")

        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            shell=self.platform_info.is_windows
        )

        if result.returncode != 0:
            raise GitProcessError(command, result.returncode, result.stdout, result.stderr)

        return result.stdout

    def git(self, *args: str) -> str:
        """Run git with the platform's executable name."""
        return self.run(get_git_executable(), list(args))
