"""FastMCP server exposing bd operations over stdio."""

from collections.abc import MutableMapping
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from beads_mcp.gateway.git.abc import Git
from beads_mcp.tools import BeadsTools, RunnerFactory, real_runner_factory
from beads_mcp.types import DependencyType, IssueStatus, IssueType
from beads_mcp.workspace import WorkspaceContext

SERVER_NAME = "Beads"
QUICKSTART_URI = "beads://quickstart"

INSTRUCTIONS = """
We track work in Beads (bd) instead of Markdown.
Check the resource beads://quickstart to see how.

IMPORTANT: Call set_context(workspace_root='...') to set your workspace before any
write operations when several projects are open.
"""

Priority = Annotated[int, Field(ge=0, le=4, description="Priority (0-4, 0=highest)")] | None
Limit = Annotated[int, Field(ge=1, le=100, description="Maximum number of issues")] | None
WorkspaceRoot = Annotated[
    str | None, Field(description="Workspace root; defaults to the current context")
]


def create_server(
    *,
    context: WorkspaceContext,
    environ: MutableMapping[str, str],
    git: Git,
    runner_factory: RunnerFactory = real_runner_factory,
) -> FastMCP:
    """Build a FastMCP server whose tools share `context`."""
    tools = BeadsTools(context=context, environ=environ, git=git, runner_factory=runner_factory)
    mcp = FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS)

    @mcp.resource(QUICKSTART_URI, name="Beads Quickstart Guide")
    def quickstart() -> str:
        """Quickstart guide for using beads (bd) CLI."""
        return tools.quickstart()

    @mcp.tool(
        name="set_context",
        description=(
            "Set the workspace root directory for all bd operations. "
            "Call this first for multi-repo setups."
        ),
    )
    def set_context(
        workspace_root: Annotated[
            str, Field(description="Absolute path to workspace/project root directory")
        ],
    ) -> str:
        return tools.set_context(workspace_root)

    @mcp.tool(name="where_am_i", description="Show current workspace context and database path.")
    def where_am_i(workspace_root: WorkspaceRoot = None) -> str:
        return tools.where_am_i()

    @mcp.tool(
        name="ready",
        description="Find tasks that have no blockers and are ready to be worked on.",
    )
    def ready(
        limit: Limit = None,
        priority: Priority = None,
        assignee: str | None = None,
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.ready(
            limit=limit, priority=priority, assignee=assignee, workspace_root=workspace_root
        )

    @mcp.tool(
        name="list",
        description="List all issues with optional filters (status, priority, type, assignee).",
    )
    def list_issues(
        status: IssueStatus | None = None,
        priority: Priority = None,
        issue_type: IssueType | None = None,
        assignee: str | None = None,
        limit: Limit = None,
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.list_issues(
            status=status,
            priority=priority,
            issue_type=issue_type,
            assignee=assignee,
            limit=limit,
            workspace_root=workspace_root,
        )

    @mcp.tool(
        name="show",
        description="Show detailed information about a specific issue including dependencies.",
    )
    def show(
        issue_id: Annotated[str, Field(description="Issue ID (e.g., bd-1)")],
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.show(issue_id=issue_id, workspace_root=workspace_root)

    @mcp.tool(
        name="create",
        description=(
            "Create a new issue (bug, feature, task, epic, or chore) "
            "with optional design and dependencies."
        ),
    )
    def create(
        title: str,
        description: str | None = None,
        design: str | None = None,
        acceptance: str | None = None,
        external_ref: str | None = None,
        priority: Priority = None,
        issue_type: IssueType | None = None,
        assignee: str | None = None,
        labels: list[str] | None = None,
        id: str | None = None,
        deps: list[str] | None = None,
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.create(
            title=title,
            description=description,
            design=design,
            acceptance=acceptance,
            external_ref=external_ref,
            priority=priority,
            issue_type=issue_type,
            assignee=assignee,
            labels=labels,
            id=id,
            deps=deps,
            workspace_root=workspace_root,
        )

    @mcp.tool(
        name="update",
        description=(
            "Update an existing issue (status, priority, design, notes, etc). "
            "Status 'closed'/'open' routes to close/reopen."
        ),
    )
    def update(
        issue_id: str,
        status: IssueStatus | None = None,
        priority: Priority = None,
        assignee: str | None = None,
        title: str | None = None,
        description: str | None = None,
        design: str | None = None,
        acceptance_criteria: str | None = None,
        notes: str | None = None,
        external_ref: str | None = None,
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.update(
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
            workspace_root=workspace_root,
        )

    @mcp.tool(name="close", description="Close (complete) an issue.")
    def close(
        issue_id: str,
        reason: str | None = None,
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.close(issue_id=issue_id, reason=reason, workspace_root=workspace_root)

    @mcp.tool(name="reopen", description="Reopen one or more closed issues.")
    def reopen(
        issue_ids: list[str],
        reason: str | None = None,
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.reopen(issue_ids=issue_ids, reason=reason, workspace_root=workspace_root)

    @mcp.tool(
        name="dep",
        description=(
            "Add a dependency between issues. Types: blocks (hard blocker), "
            "related (soft link), parent-child (epic/subtask), "
            "discovered-from (found during work)."
        ),
    )
    def dep(
        issue_id: str,
        depends_on_id: str,
        dep_type: DependencyType | None = None,
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.dep(
            issue_id=issue_id,
            depends_on_id=depends_on_id,
            dep_type=dep_type,
            workspace_root=workspace_root,
        )

    @mcp.tool(
        name="stats",
        description=(
            "Get statistics: total issues, open, in_progress, closed, blocked, ready, "
            "and average lead time."
        ),
    )
    def stats(workspace_root: WorkspaceRoot = None) -> str:
        return tools.stats(workspace_root=workspace_root)

    @mcp.tool(
        name="blocked",
        description=(
            "Get blocked issues showing what dependencies are blocking them "
            "from being worked on."
        ),
    )
    def blocked(workspace_root: WorkspaceRoot = None) -> str:
        return tools.blocked(workspace_root=workspace_root)

    @mcp.tool(
        name="init",
        description=(
            "Initialize bd in current directory. Creates .beads/ directory and database "
            "with optional custom prefix for issue IDs."
        ),
    )
    def init(prefix: str | None = None, workspace_root: WorkspaceRoot = None) -> str:
        return tools.init(prefix=prefix, workspace_root=workspace_root)

    @mcp.tool(
        name="debug_env",
        description="Debug tool: Show environment and working directory information.",
    )
    def debug_env(workspace_root: WorkspaceRoot = None) -> str:
        return tools.debug_env()

    @mcp.tool(
        name="inspect_migration",
        description="Get migration plan and database state for agent analysis.",
    )
    def inspect_migration(workspace_root: WorkspaceRoot = None) -> str:
        return tools.inspect_migration(workspace_root=workspace_root)

    @mcp.tool(name="get_schema_info", description="Get current database schema for inspection.")
    def get_schema_info(workspace_root: WorkspaceRoot = None) -> str:
        return tools.get_schema_info(workspace_root=workspace_root)

    @mcp.tool(
        name="repair_deps",
        description="Find and optionally fix orphaned dependency references.",
    )
    def repair_deps(fix: bool = False, workspace_root: WorkspaceRoot = None) -> str:
        return tools.repair_deps(fix=fix, workspace_root=workspace_root)

    @mcp.tool(
        name="detect_pollution",
        description="Detect test issues that leaked into production database.",
    )
    def detect_pollution(clean: bool = False, workspace_root: WorkspaceRoot = None) -> str:
        return tools.detect_pollution(clean=clean, workspace_root=workspace_root)

    @mcp.tool(
        name="validate",
        description=(
            "Run comprehensive database health checks "
            "(orphans, duplicates, pollution, conflicts)."
        ),
    )
    def validate(
        checks: str | None = None,
        fix_all: bool = False,
        workspace_root: WorkspaceRoot = None,
    ) -> str:
        return tools.validate(checks=checks, fix_all=fix_all, workspace_root=workspace_root)

    return mcp
