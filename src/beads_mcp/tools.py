"""Tool implementations behind the MCP server.

BeadsTools turns one named tool call into a BdClient call and renders the
result as text. It owns no protocol code, so tests call it directly.
"""

import json
import logging
import os
from collections.abc import Callable, MutableMapping
from typing import Any

from beads_mcp.client import BdClient
from beads_mcp.config import BeadsConfig, load_beads_config
from beads_mcp.errors import BdError
from beads_mcp.gateway.bd.abc import BdRunner
from beads_mcp.gateway.bd.real import RealBdRunner
from beads_mcp.gateway.git.abc import Git
from beads_mcp.types import (
    AddDependencyParams,
    CloseIssueParams,
    CreateIssueParams,
    DependencyType,
    InitParams,
    Issue,
    IssueStatus,
    IssueType,
    ListIssuesParams,
    ReadyWorkParams,
    ReopenIssueParams,
    ShowIssueParams,
    UpdateIssueParams,
)
from beads_mcp.workspace import (
    WorkspaceContext,
    ensure_write_context,
    export_context_markers,
    get_effective_workspace_root,
)

logger = logging.getLogger(__name__)

RunnerFactory = Callable[[BeadsConfig], BdRunner]

DEFAULT_CLOSE_REASON = "Completed"
DEFAULT_REOPEN_REASON = "Reopened"
NOT_SET = "NOT SET"


def real_runner_factory(config: BeadsConfig) -> BdRunner:
    return RealBdRunner(beads_path=config.beads_path)


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2)


def _strip_dependencies(issues: list[Issue]) -> list[Issue]:
    """Empty nested dependency lists to keep list payloads small."""
    for issue in issues:
        if issue.get("dependencies") is not None:
            issue["dependencies"] = []
        if issue.get("dependents") is not None:
            issue["dependents"] = []
    return issues


class BeadsTools:
    """Named operations exposed to the MCP host.

    Each call resolves its workspace (explicit > context > BEADS_WORKING_DIR),
    checks write context for mutations and builds a fresh BdClient so config
    changes from set_context apply to the very next call.
    """

    def __init__(
        self,
        *,
        context: WorkspaceContext,
        environ: MutableMapping[str, str],
        git: Git,
        runner_factory: RunnerFactory = real_runner_factory,
    ) -> None:
        self._context = context
        self._environ = environ
        self._git = git
        self._runner_factory = runner_factory

    def _client(self, workspace_root: str | None) -> BdClient:
        root = get_effective_workspace_root(
            workspace_root, context=self._context, environ=self._environ
        )
        config = load_beads_config(self._environ)
        return BdClient(
            config=config,
            runner=self._runner_factory(config),
            workspace_root=root,
            environ=self._environ,
        )

    def _write_client(self, workspace_root: str | None) -> BdClient:
        ensure_write_context(workspace_root, context=self._context, environ=self._environ)
        return self._client(workspace_root)

    # ============================================================================
    # Context
    # ============================================================================

    def set_context(self, workspace_root: str) -> str:
        snapshot = self._context.set_root(workspace_root, git=self._git)
        export_context_markers(snapshot, self._environ)

        database = snapshot.db_path or "Not found (run 'bd init' to create)"
        return (
            "Context set successfully:\n"
            f"  Workspace root: {snapshot.root}\n"
            f"  Database: {database}"
        )

    def where_am_i(self) -> str:
        snapshot = self._context.snapshot()
        env_db = self._environ.get("BEADS_DB")

        if not snapshot.is_set and not self._environ.get("BEADS_CONTEXT_SET"):
            return (
                "Context not set. Call set_context with your workspace root first.\n"
                f"Current process CWD: {os.getcwd()}\n"
                f"BEADS_WORKING_DIR (persistent): {snapshot.root or NOT_SET}\n"
                f"BEADS_WORKING_DIR (env): {self._environ.get('BEADS_WORKING_DIR', NOT_SET)}\n"
                f"BEADS_DB: {snapshot.db_path or env_db or NOT_SET}"
            )

        working_dir = snapshot.root or self._environ.get("BEADS_WORKING_DIR", NOT_SET)
        return (
            f"Workspace root: {working_dir}\n"
            f"Database: {snapshot.db_path or env_db or NOT_SET}\n"
            f"Actor: {self._environ.get('BEADS_ACTOR', NOT_SET)}"
        )

    def debug_env(self) -> str:
        lines = [
            "=== Working Directory Debug Info ===",
            f"os.getcwd(): {os.getcwd()}",
        ]
        for key in ("BEADS_WORKING_DIR", "BEADS_PATH", "BEADS_DB"):
            lines.append(f"{key} env var: {self._environ.get(key, NOT_SET)}")
        for key in ("HOME", "USER"):
            lines.append(f"{key}: {self._environ.get(key, NOT_SET)}")
        lines.append("")
        lines.append("=== All Environment Variables ===")
        for key in sorted(k for k in self._environ if not k.startswith("_")):
            lines.append(f"{key}={self._environ[key]}")
        return "\n".join(lines)

    # ============================================================================
    # Queries
    # ============================================================================

    def quickstart(self) -> str:
        return self._client(None).quickstart()

    def ready(
        self,
        *,
        limit: int | None = None,
        priority: int | None = None,
        assignee: str | None = None,
        workspace_root: str | None = None,
    ) -> str:
        issues = self._client(workspace_root).ready(
            ReadyWorkParams(limit=limit, priority=priority, assignee=assignee)
        )
        return _to_json(_strip_dependencies(issues))

    def list_issues(
        self,
        *,
        status: IssueStatus | None = None,
        priority: int | None = None,
        issue_type: IssueType | None = None,
        assignee: str | None = None,
        limit: int | None = None,
        workspace_root: str | None = None,
    ) -> str:
        issues = self._client(workspace_root).list_issues(
            ListIssuesParams(
                status=status,
                priority=priority,
                issue_type=issue_type,
                assignee=assignee,
                limit=limit,
            )
        )
        return _to_json(_strip_dependencies(issues))

    def show(self, *, issue_id: str, workspace_root: str | None = None) -> str:
        return _to_json(self._client(workspace_root).show(ShowIssueParams(issue_id=issue_id)))

    def stats(self, *, workspace_root: str | None = None) -> str:
        return _to_json(self._client(workspace_root).stats())

    def blocked(self, *, workspace_root: str | None = None) -> str:
        return _to_json(self._client(workspace_root).blocked())

    # ============================================================================
    # Mutations
    # ============================================================================

    def create(
        self,
        *,
        title: str,
        description: str | None = None,
        design: str | None = None,
        acceptance: str | None = None,
        external_ref: str | None = None,
        priority: int | None = None,
        issue_type: IssueType | None = None,
        assignee: str | None = None,
        labels: list[str] | None = None,
        id: str | None = None,
        deps: list[str] | None = None,
        workspace_root: str | None = None,
    ) -> str:
        client = self._write_client(workspace_root)
        issue = client.create(
            CreateIssueParams(
                title=title,
                description=description,
                design=design,
                acceptance=acceptance,
                external_ref=external_ref,
                priority=priority,
                issue_type=issue_type,
                assignee=assignee,
                labels=tuple(labels or ()),
                id=id,
                deps=tuple(deps or ()),
            )
        )
        return _to_json(issue)

    def update(
        self,
        *,
        issue_id: str,
        status: IssueStatus | None = None,
        priority: int | None = None,
        assignee: str | None = None,
        title: str | None = None,
        description: str | None = None,
        design: str | None = None,
        acceptance_criteria: str | None = None,
        notes: str | None = None,
        external_ref: str | None = None,
        workspace_root: str | None = None,
    ) -> str:
        """Update an issue; status closed/open routes to the close/reopen primitives."""
        client = self._write_client(workspace_root)

        if status == "closed":
            reason = notes or DEFAULT_CLOSE_REASON
            return _to_json(client.close(CloseIssueParams(issue_id=issue_id, reason=reason)))

        if status == "open":
            reason = notes or DEFAULT_REOPEN_REASON
            return _to_json(client.reopen(ReopenIssueParams(issue_ids=(issue_id,), reason=reason)))

        issue = client.update(
            UpdateIssueParams(
                issue_id=issue_id,
                status=status,
                priority=priority,
                assignee=assignee,
                title=title,
                description=description,
                design=design,
                acceptance_criteria=acceptance_criteria,
                notes=notes,
                external_ref=external_ref,
            )
        )
        return _to_json(issue)

    def close(
        self,
        *,
        issue_id: str,
        reason: str | None = None,
        workspace_root: str | None = None,
    ) -> str:
        client = self._write_client(workspace_root)
        params = CloseIssueParams(issue_id=issue_id, reason=reason or DEFAULT_CLOSE_REASON)
        return _to_json(client.close(params))

    def reopen(
        self,
        *,
        issue_ids: list[str],
        reason: str | None = None,
        workspace_root: str | None = None,
    ) -> str:
        client = self._write_client(workspace_root)
        params = ReopenIssueParams(issue_ids=tuple(issue_ids), reason=reason)
        return _to_json(client.reopen(params))

    def dep(
        self,
        *,
        issue_id: str,
        depends_on_id: str,
        dep_type: DependencyType | None = None,
        workspace_root: str | None = None,
    ) -> str:
        """Add a dependency; bd failures are reported as text, not raised."""
        client = self._write_client(workspace_root)
        resolved_type: DependencyType = dep_type or "blocks"
        try:
            client.add_dependency(
                AddDependencyParams(
                    issue_id=issue_id,
                    depends_on_id=depends_on_id,
                    dep_type=resolved_type,
                )
            )
        except BdError as e:
            logger.debug("dep add failed: %s", e)
            return f"Error: {e}"
        return f"Added dependency: {issue_id} depends on {depends_on_id} ({resolved_type})"

    def init(self, *, prefix: str | None = None, workspace_root: str | None = None) -> str:
        return self._write_client(workspace_root).init(InitParams(prefix=prefix))

    # ============================================================================
    # Maintenance
    # ============================================================================

    def _maintenance_client(self, workspace_root: str | None, *, modifies: bool) -> BdClient:
        # Repair and cleanup flags write to the database
        if modifies:
            return self._write_client(workspace_root)
        return self._client(workspace_root)

    def inspect_migration(self, *, workspace_root: str | None = None) -> str:
        return _to_json(self._client(workspace_root).inspect_migration())

    def get_schema_info(self, *, workspace_root: str | None = None) -> str:
        return _to_json(self._client(workspace_root).get_schema_info())

    def repair_deps(self, *, fix: bool = False, workspace_root: str | None = None) -> str:
        client = self._maintenance_client(workspace_root, modifies=fix)
        return _to_json(client.repair_deps(fix=fix))

    def detect_pollution(self, *, clean: bool = False, workspace_root: str | None = None) -> str:
        client = self._maintenance_client(workspace_root, modifies=clean)
        return _to_json(client.detect_pollution(clean=clean))

    def validate(
        self,
        *,
        checks: str | None = None,
        fix_all: bool = False,
        workspace_root: str | None = None,
    ) -> str:
        client = self._maintenance_client(workspace_root, modifies=fix_all)
        return _to_json(client.validate(checks=checks, fix_all=fix_all))
