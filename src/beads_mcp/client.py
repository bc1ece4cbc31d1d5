"""BdClient: one method per bd operation.

Each method builds argv (beads_mcp.commands), runs bd once through a BdRunner,
decodes the output and enforces the operation's result shape.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

from beads_mcp.commands import (
    build_add_dependency_args,
    build_blocked_args,
    build_close_args,
    build_create_args,
    build_detect_pollution_args,
    build_init_args,
    build_inspect_migration_args,
    build_list_args,
    build_quickstart_args,
    build_ready_args,
    build_reopen_args,
    build_repair_deps_args,
    build_schema_info_args,
    build_show_args,
    build_stats_args,
    build_update_args,
    build_validate_args,
    global_flags,
)
from beads_mcp.config import BeadsConfig, load_beads_config
from beads_mcp.decoding import ExpectedShape, decode_json_output, validate_shape
from beads_mcp.gateway.bd.abc import BdRunner
from beads_mcp.gateway.bd.real import RealBdRunner, build_bd_env
from beads_mcp.types import (
    AddDependencyParams,
    BlockedIssue,
    CloseIssueParams,
    CreateIssueParams,
    InitParams,
    Issue,
    ListIssuesParams,
    ReadyWorkParams,
    ReopenIssueParams,
    ShowIssueParams,
    Stats,
    UpdateIssueParams,
)


class BdClient:
    """Client for the bd CLI.

    Config is loaded fresh from `environ` at construction. The working
    directory is `workspace_root`, else BEADS_WORKING_DIR, else the process
    cwd at call time.
    """

    def __init__(
        self,
        *,
        config: BeadsConfig | None = None,
        runner: BdRunner | None = None,
        workspace_root: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Create a client.

        Args:
            config: Settings; loaded from `environ` when omitted
            runner: Process runner; RealBdRunner for config.beads_path when omitted
            workspace_root: Directory to run bd in
            environ: Environment to read config from and pass to bd
                (defaults to os.environ)
        """
        self._environ: Mapping[str, str] = environ if environ is not None else os.environ
        self._config = config if config is not None else load_beads_config(self._environ)
        self._runner = (
            runner if runner is not None else RealBdRunner(beads_path=self._config.beads_path)
        )
        self._workspace_root = workspace_root or self._config.working_dir

    @property
    def config(self) -> BeadsConfig:
        return self._config

    def _working_dir(self) -> Path:
        if self._workspace_root:
            return Path(self._workspace_root)
        return Path.cwd()

    def _run(self, args: list[str]) -> str:
        env = build_bd_env(self._config, self._environ)
        return self._runner.run(args, cwd=self._working_dir(), env=env)

    def _run_json(self, args: list[str]) -> Any:
        full_args = [*args, *global_flags(self._config), "--json"]
        return decode_json_output(self._run(full_args))

    def _run_text(self, args: list[str], *, use_global_flags: bool) -> str:
        if use_global_flags:
            args = [*args, *global_flags(self._config)]
        return self._run(args)

    def _run_json_expecting(
        self,
        args: list[str],
        shape: ExpectedShape,
        *,
        subject: str | None = None,
    ) -> Any:
        data = self._run_json(args)
        return validate_shape(data, shape, operation=args[0], subject=subject)

    # ============================================================================
    # Issue queries
    # ============================================================================

    def ready(self, params: ReadyWorkParams | None = None) -> list[Issue]:
        """Issues with no open blockers."""
        args = build_ready_args(params or ReadyWorkParams())
        return cast(list[Issue], self._run_json_expecting(args, ExpectedShape.ARRAY))

    def list_issues(self, params: ListIssuesParams | None = None) -> list[Issue]:
        args = build_list_args(params or ListIssuesParams())
        return cast(list[Issue], self._run_json_expecting(args, ExpectedShape.ARRAY))

    def show(self, params: ShowIssueParams) -> Issue:
        """Full details for one issue.

        Raises:
            BdCommandError: "Issue not found: <id>" when bd returns an empty list
        """
        data = self._run_json_expecting(
            build_show_args(params),
            ExpectedShape.ARRAY_NON_EMPTY,
            subject=params.issue_id,
        )
        return cast(Issue, data)

    def blocked(self) -> list[BlockedIssue]:
        return cast(
            list[BlockedIssue],
            self._run_json_expecting(build_blocked_args(), ExpectedShape.ARRAY),
        )

    def stats(self) -> Stats:
        return cast(Stats, self._run_json_expecting(build_stats_args(), ExpectedShape.OBJECT))

    # ============================================================================
    # Issue mutations
    # ============================================================================

    def create(self, params: CreateIssueParams) -> Issue:
        data = self._run_json_expecting(build_create_args(params), ExpectedShape.OBJECT)
        return cast(Issue, data)

    def update(self, params: UpdateIssueParams) -> Issue:
        """Update fields of one issue.

        Closing and reopening have their own primitives; this method passes
        any status through to `bd update` unchanged.
        """
        data = self._run_json_expecting(
            build_update_args(params),
            ExpectedShape.ARRAY_NON_EMPTY,
            subject=params.issue_id,
        )
        return cast(Issue, data)

    def close(self, params: CloseIssueParams) -> list[Issue]:
        data = self._run_json_expecting(
            build_close_args(params),
            ExpectedShape.ARRAY,
            subject=params.issue_id,
        )
        return cast(list[Issue], data)

    def reopen(self, params: ReopenIssueParams) -> list[Issue]:
        data = self._run_json_expecting(
            build_reopen_args(params),
            ExpectedShape.ARRAY,
            subject=", ".join(params.issue_ids),
        )
        return cast(list[Issue], data)

    def add_dependency(self, params: AddDependencyParams) -> None:
        # bd dep add prints text; global flags are still required here
        self._run_text(build_add_dependency_args(params), use_global_flags=True)

    def init(self, params: InitParams | None = None) -> str:
        return self._run_text(build_init_args(params or InitParams()), use_global_flags=True)

    # ============================================================================
    # Maintenance and diagnostics
    # ============================================================================

    def quickstart(self) -> str:
        return self._run_text(build_quickstart_args(), use_global_flags=False)

    def inspect_migration(self) -> dict[str, Any]:
        return self._run_json_expecting(build_inspect_migration_args(), ExpectedShape.OBJECT)

    def get_schema_info(self) -> dict[str, Any]:
        return self._run_json_expecting(build_schema_info_args(), ExpectedShape.OBJECT)

    def repair_deps(self, *, fix: bool = False) -> dict[str, Any]:
        return self._run_json_expecting(build_repair_deps_args(fix=fix), ExpectedShape.OBJECT)

    def detect_pollution(self, *, clean: bool = False) -> dict[str, Any]:
        """Find test issues that leaked into the database; `clean` deletes them."""
        return self._run_json_expecting(
            build_detect_pollution_args(clean=clean), ExpectedShape.OBJECT
        )

    def validate(self, *, checks: str | None = None, fix_all: bool = False) -> dict[str, Any]:
        return self._run_json_expecting(
            build_validate_args(checks=checks, fix_all=fix_all), ExpectedShape.OBJECT
        )
