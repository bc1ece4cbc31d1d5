"""Verbose wrapper for the bd runner."""

import shlex
import sys
from collections.abc import Mapping
from pathlib import Path

import click

from beads_mcp.gateway.bd.abc import BdRunner


class PrintingBdRunner(BdRunner):
    """Echoes each bd command to stderr, then delegates.

    Output goes to stderr because stdout carries the MCP protocol.
    """

    def __init__(self, wrapped: BdRunner) -> None:
        """Initialize printing wrapper.

        Args:
            wrapped: The BdRunner implementation to delegate to.
        """
        self._wrapped = wrapped

    def run(self, args: list[str], *, cwd: Path, env: Mapping[str, str]) -> str:
        command = shlex.join(["bd", *args])
        click.echo(click.style(f"$ {command}", dim=True) + f"  (in {cwd})", file=sys.stderr)
        return self._wrapped.run(args, cwd=cwd, env=env)
