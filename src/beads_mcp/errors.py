"""Error types raised by the bd command-execution core."""


class BdError(Exception):
    """Base exception for bd CLI errors."""


class BdCommandError(BdError):
    """Raised when bd rejects a request or returns data we cannot use.

    Covers non-zero exits, unparseable JSON, results of the wrong shape and
    lookups that matched nothing.
    """

    def __init__(self, message: str, stderr: str = "", returncode: int = 1) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class BdNotFoundError(BdError):
    """Raised when the bd executable cannot be spawned because it does not exist."""

    @staticmethod
    def installation_message(attempted_path: str) -> str:
        """Build the remediation text shown when bd is missing."""
        return (
            f"bd CLI not found at: {attempted_path}\n\n"
            "The beads MCP server requires the bd CLI to be installed separately.\n\n"
            "Install bd CLI:\n"
            "  curl -fsSL https://raw.githubusercontent.com/steveyegge/beads/main/install.sh"
            " | bash\n\n"
            "Or visit: https://github.com/steveyegge/beads#installation\n\n"
            "After installation, restart your MCP client to reload the beads server."
        )


class ConfigurationError(BdError):
    """Raised when a mutating call arrives without any workspace context."""
