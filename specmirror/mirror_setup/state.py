"""Classification of the on-disk mirror layout."""

import logging
from enum import Enum

from ..config import Config


class MirrorState(Enum):
    """Enumeration of possible mirror layouts."""
    CURRENT_PRESENT = "current_present"  # Mirror lives under repos/
    LEGACY_PRESENT = "legacy_present"    # Mirror only exists in the old layout
    ABSENT = "absent"                    # Nothing on disk yet


def classify_mirror_state(config: Config) -> MirrorState:
    """
    Classify the current layout.

    The current location is checked first so stale legacy artifacts never
    shadow an already migrated mirror.
    """
    logger = logging.getLogger('specmirror.state')

    if config.mirror_dir.exists():
        state = MirrorState.CURRENT_PRESENT
    elif config.legacy_mirror_dir.exists():
        state = MirrorState.LEGACY_PRESENT
    else:
        state = MirrorState.ABSENT

    logger.debug(f"Mirror state: {state.name}")
    return state
