"""In-memory fake implementation of the bd runner for testing."""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from beads_mcp.gateway.bd.abc import BdRunner


@dataclass(frozen=True)
class BdCall:
    """One recorded invocation of FakeBdRunner.run()."""

    args: list[str]
    cwd: Path
    env: dict[str, str]


class FakeBdRunner(BdRunner):
    """Fake runner returning canned output.

    Constructor Injection: outputs and errors are keyed by subcommand (the
    first argument). Every call is recorded in `calls` for assertions.
    """

    def __init__(
        self,
        *,
        outputs: dict[str, str] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        """Create FakeBdRunner with pre-configured responses.

        Args:
            outputs: Mapping of subcommand -> stdout. Unknown subcommands
                return empty output.
            errors: Mapping of subcommand -> exception to raise instead
        """
        self._outputs: dict[str, str] = outputs if outputs is not None else {}
        self._errors: dict[str, Exception] = errors if errors is not None else {}
        self._calls: list[BdCall] = []

    @property
    def calls(self) -> list[BdCall]:
        """Read-only access to recorded calls, in order."""
        return list(self._calls)

    @property
    def last_args(self) -> list[str]:
        """Arguments of the most recent call."""
        if not self._calls:
            raise AssertionError("FakeBdRunner was never called")
        return self._calls[-1].args

    def run(self, args: list[str], *, cwd: Path, env: Mapping[str, str]) -> str:
        self._calls.append(BdCall(args=list(args), cwd=cwd, env=dict(env)))

        subcommand = args[0] if args else ""
        if subcommand in self._errors:
            raise self._errors[subcommand]
        return self._outputs.get(subcommand, "")
