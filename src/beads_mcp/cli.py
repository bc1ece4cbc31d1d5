import logging
import os
import sys

import click

from beads_mcp.config import BeadsConfig
from beads_mcp.gateway.bd.abc import BdRunner
from beads_mcp.gateway.bd.printing import PrintingBdRunner
from beads_mcp.gateway.bd.real import RealBdRunner
from beads_mcp.gateway.git.real import RealGit
from beads_mcp.server import create_server
from beads_mcp.tools import real_runner_factory
from beads_mcp.workspace import WorkspaceContext

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

logger = logging.getLogger(__name__)


def _printing_runner_factory(config: BeadsConfig) -> BdRunner:
    return PrintingBdRunner(RealBdRunner(beads_path=config.beads_path))


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="beads-mcp")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--verbose", is_flag=True, help="Echo each bd command to stderr")
def cli(debug: bool, verbose: bool) -> None:
    """Serve beads (bd) issue tracking to an MCP host over stdio."""
    # stdout carries the protocol, so logs must go to stderr
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    runner_factory = _printing_runner_factory if verbose else real_runner_factory
    server = create_server(
        context=WorkspaceContext(),
        environ=os.environ,
        git=RealGit(),
        runner_factory=runner_factory,
    )
    logger.info("Starting beads MCP server on stdio")
    server.run(transport="stdio")


def main() -> None:
    """CLI entry point used by the `beads-mcp` console script."""
    cli()
