"""Abstract interface for the git queries used by workspace resolution."""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Git operations needed to normalize a workspace root.

    All implementations (real, fake) must implement this interface.
    """

    @abstractmethod
    def find_repository_root(self, cwd: Path) -> Path | None:
        """Return the top-level directory of the repository containing `cwd`.

        Returns None when `cwd` is not inside a repository, git is not
        installed, or git fails for any other reason.
        """
        ...
