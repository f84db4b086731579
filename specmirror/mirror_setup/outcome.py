"""Result of a mirror setup run."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from .mode import AccessMode


class SetupAction(Enum):
    """Which branch of the setup ran."""
    REFRESH = "refresh"
    MIGRATE = "migrate"
    ADOPT = "adopt"


@dataclass(frozen=True)
class SetupOutcome:
    """Terminal result of a successful setup."""
    action: SetupAction
    mode: AccessMode
    mirror_dir: Path

    @property
    def access_type(self) -> str:
        return self.mode.value

    @property
    def message(self) -> str:
        return f"Setup completed ({self.access_type} access)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "action": self.action.value,
            "access": self.access_type,
            "mirror_dir": str(self.mirror_dir),
            "message": self.message,
        }
