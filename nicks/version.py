"""
nicks.version — package version and build identification for `nicks config`.
"""

from __future__ import annotations

import os
import subprocess
from typing import Any, Dict

__version__ = "0.1.0"


def describe() -> str:
    """
    Identify the build: NICKS_GIT_DESCRIBE when set, else `git describe`,
    else "<version>+local".
    """
    pinned = os.environ.get("NICKS_GIT_DESCRIBE", "").strip()
    if pinned:
        return pinned
    try:
        proc = subprocess.run(
            ["git", "describe", "--tags", "--dirty", "--always"],
            cwd=os.path.dirname(os.path.abspath(__file__)),
            capture_output=True,
            text=True,
            timeout=2,
            check=True,
        )
    except (OSError, subprocess.SubprocessError):
        return f"{__version__}+local"
    return proc.stdout.strip() or f"{__version__}+local"


def version_metadata() -> Dict[str, Any]:
    desc = describe()
    return {"version": __version__, "build": desc, "dirty": desc.endswith("-dirty")}


__all__ = ["__version__", "describe", "version_metadata"]
