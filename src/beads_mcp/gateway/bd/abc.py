"""Abstract interface for running the bd CLI."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path


class BdRunner(ABC):
    """Runs bd once per call and returns its standard output.

    All implementations (real, fake, printing) must implement this interface.
    """

    @abstractmethod
    def run(self, args: list[str], *, cwd: Path, env: Mapping[str, str]) -> str:
        """Execute bd with `args` and wait for it to exit.

        Args:
            args: Arguments after the executable
            cwd: Working directory for the process
            env: Complete environment for the process

        Returns:
            Standard output, untrimmed

        Raises:
            BdNotFoundError: If the executable does not exist
            BdCommandError: If bd exits non-zero
        """
        ...
