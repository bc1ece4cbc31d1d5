"""Real implementation of git queries using subprocess."""

import logging
import subprocess
from pathlib import Path

from beads_mcp.gateway.git.abc import Git

logger = logging.getLogger(__name__)


class RealGit(Git):
    """Production implementation using the git CLI."""

    def find_repository_root(self, cwd: Path) -> Path | None:
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--show-toplevel"],
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                stdin=subprocess.DEVNULL,
            )
        except OSError as e:
            # git missing or cwd unusable
            logger.debug("git rev-parse failed in %s: %s", cwd, e)
            return None

        if result.returncode != 0:
            return None

        toplevel = result.stdout.strip()
        if not toplevel:
            return None
        return Path(toplevel)
