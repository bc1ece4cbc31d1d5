"""Production implementation of the bd runner using subprocess."""

import logging
import subprocess
from collections.abc import Mapping
from pathlib import Path

from beads_mcp.config import BeadsConfig
from beads_mcp.errors import BdCommandError, BdNotFoundError
from beads_mcp.gateway.bd.abc import BdRunner

logger = logging.getLogger(__name__)


def build_bd_env(config: BeadsConfig, base: Mapping[str, str]) -> dict[str, str]:
    """Copy `base` and point bd at an explicit database, if one is configured.

    BEADS_DIR wins over BEADS_DB; at most one of them is set.
    """
    env = dict(base)
    if config.beads_dir:
        env["BEADS_DIR"] = config.beads_dir
    elif config.beads_db:
        env["BEADS_DB"] = config.beads_db
    return env


class RealBdRunner(BdRunner):
    """Spawns the bd executable via subprocess.

    Each call is an independent process. There is no timeout: a hung bd
    hangs the caller.
    """

    def __init__(self, *, beads_path: str) -> None:
        self._beads_path = beads_path

    def run(self, args: list[str], *, cwd: Path, env: Mapping[str, str]) -> str:
        cmd = [self._beads_path, *args]
        logger.debug("Running %s (cwd=%s)", cmd, cwd)

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                env=dict(env),
                capture_output=True,
                text=True,
                # bd output is not guaranteed to be valid UTF-8
                encoding="utf-8",
                errors="replace",
                check=False,
                # Keep bd off the MCP server's stdin, which carries the protocol
                stdin=subprocess.DEVNULL,
            )
        except FileNotFoundError as e:
            # A missing cwd also surfaces as FileNotFoundError, naming the directory
            if e.filename is not None and str(e.filename) == str(cwd):
                raise
            raise BdNotFoundError(BdNotFoundError.installation_message(self._beads_path)) from e

        if result.returncode != 0:
            logger.debug("bd exited with %d: %s", result.returncode, result.stderr.strip())
            raise BdCommandError(
                f"bd command failed: {result.stderr}",
                result.stderr,
                result.returncode,
            )

        return result.stdout
