"""Migration of mirrors from the old directory layout into repos/."""

import logging
import shutil
from pathlib import Path

from ..errors import MigrationError


def migrate_repos(legacy_root: Path, current_root: Path) -> None:
    """
    Move every repository stored next to ``legacy_root`` into ``current_root``.

    The old layout kept mirrors as siblings of ``legacy_root``, so the whole
    parent directory is migrated. Dot entries stay where they are and
    ``current_root`` is never moved into itself. ``legacy_root`` is moved
    last: if any other entry fails, the mirror is still in the legacy
    location and the next run retries the migration.

    Raises:
        MigrationError: if the storage root cannot be created or an entry
            cannot be moved
    """
    logger = logging.getLogger('specmirror.migration')
    legacy_parent = legacy_root.parent

    try:
        current_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MigrationError(
            f"Cannot create spec repos directory {current_root}: {e}",
            context={'path': str(current_root)}
        ) from e

    resolved_root = current_root.resolve()
    entries = [
        entry for entry in sorted(legacy_parent.iterdir())
        if not entry.name.startswith(".") and entry.resolve() != resolved_root
    ]
    entries.sort(key=lambda entry: entry.name == legacy_root.name)

    logger.info(f"Migrating {len(entries)} repo(s) from {legacy_parent} to {current_root}")

    for source in entries:
        target = current_root / source.name
        if target.exists():
            raise MigrationError(
                f"Cannot migrate {source}: {target} already exists",
                context={'source': str(source), 'target': str(target)}
            )
        try:
            shutil.move(str(source), str(target))
        except OSError as e:
            # A cross-device move copies first; drop whatever part of the copy landed.
            _remove_partial_copy(target)
            raise MigrationError(
                f"Cannot move {source} to {target}: {e}",
                context={'source': str(source), 'target': str(target)}
            ) from e
        logger.debug(f"Moved {source.name} into {current_root}")


def _remove_partial_copy(target: Path) -> None:
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target, ignore_errors=True)
    elif target.exists() or target.is_symlink():
        target.unlink(missing_ok=True)
