"""
specmirror - keeps a local mirror of the canonical spec repository in shape.

Clones the mirror on first use, migrates mirrors from the old directory
layout and refreshes existing mirrors, keeping push access when it was
configured before.
"""

__version__ = "1.0.0"
__description__ = "Local spec repository mirror setup"

from .cli import main

__all__ = ["main"]
