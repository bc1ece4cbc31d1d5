"""Fake implementation of git queries for testing."""

from pathlib import Path

from beads_mcp.gateway.git.abc import Git


class FakeGit(Git):
    """In-memory fake implementation for testing.

    Constructor Injection: pre-configured state passed via constructor.
    """

    def __init__(self, *, repository_roots: list[Path] | None = None) -> None:
        """Create FakeGit with pre-configured repositories.

        Args:
            repository_roots: Top-level directories of known repositories.
                Any path equal to or below one of them resolves to it.
        """
        self._repository_roots: list[Path] = (
            list(repository_roots) if repository_roots is not None else []
        )
        self._queried: list[Path] = []

    @property
    def queried(self) -> list[Path]:
        """Paths passed to find_repository_root, in order."""
        return list(self._queried)

    def find_repository_root(self, cwd: Path) -> Path | None:
        """Mimics `git rev-parse --show-toplevel`, preferring the deepest match."""
        self._queried.append(cwd)
        resolved_cwd = cwd.resolve()

        best_match: Path | None = None
        for root in self._repository_roots:
            resolved_root = root.resolve()
            if resolved_cwd == resolved_root or resolved_root in resolved_cwd.parents:
                if best_match is None or len(resolved_root.parts) > len(best_match.parts):
                    best_match = resolved_root

        return best_match
