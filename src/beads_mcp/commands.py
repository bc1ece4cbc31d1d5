"""Argument vector builders for bd subcommands.

Each builder is a pure function of its params. Optional fields are appended
only when present and non-empty, in a fixed order. Enumerated values are
passed through verbatim; bd validates them.

Global flags are not added here: the client decides which operations get
them (see BdClient).
"""

from beads_mcp.config import BeadsConfig
from beads_mcp.types import (
    AddDependencyParams,
    CloseIssueParams,
    CreateIssueParams,
    InitParams,
    ListIssuesParams,
    ReadyWorkParams,
    ReopenIssueParams,
    ShowIssueParams,
    UpdateIssueParams,
)

DEFAULT_READY_LIMIT = 10
DEFAULT_PRIORITY = 2
DEFAULT_ISSUE_TYPE = "task"


def _append_option(args: list[str], flag: str, value: str | None) -> None:
    if value:
        args.extend([flag, value])


def _append_int_option(args: list[str], flag: str, value: int | None) -> None:
    # 0 is a valid priority, so only None is treated as absent
    if value is not None:
        args.extend([flag, str(value)])


def global_flags(config: BeadsConfig) -> list[str]:
    """Flags bd accepts on every command: actor and auto-sync suppression."""
    flags: list[str] = []
    if config.beads_actor:
        flags.extend(["--actor", config.beads_actor])
    if config.no_auto_flush:
        flags.append("--no-auto-flush")
    if config.no_auto_import:
        flags.append("--no-auto-import")
    return flags


def build_ready_args(params: ReadyWorkParams) -> list[str]:
    limit = params.limit if params.limit is not None else DEFAULT_READY_LIMIT
    args = ["ready", "--limit", str(limit)]
    _append_int_option(args, "--priority", params.priority)
    _append_option(args, "--assignee", params.assignee)
    return args


def build_list_args(params: ListIssuesParams) -> list[str]:
    args = ["list"]
    _append_option(args, "--status", params.status)
    _append_int_option(args, "--priority", params.priority)
    _append_option(args, "--type", params.issue_type)
    _append_option(args, "--assignee", params.assignee)
    _append_int_option(args, "--limit", params.limit)
    return args


def build_show_args(params: ShowIssueParams) -> list[str]:
    return ["show", params.issue_id]


def build_create_args(params: CreateIssueParams) -> list[str]:
    """Build `bd create`.

    Priority and type are always sent (defaults 2 and task) so bd never
    falls back to its own interactive defaults.
    """
    priority = params.priority if params.priority is not None else DEFAULT_PRIORITY
    issue_type = params.issue_type or DEFAULT_ISSUE_TYPE
    args = ["create", params.title, "-p", str(priority), "-t", issue_type]

    _append_option(args, "-d", params.description)
    _append_option(args, "--design", params.design)
    _append_option(args, "--acceptance", params.acceptance)
    _append_option(args, "--external-ref", params.external_ref)
    _append_option(args, "--assignee", params.assignee)
    _append_option(args, "--id", params.id)

    for label in params.labels:
        args.extend(["-l", label])

    if params.deps:
        args.extend(["--deps", ",".join(params.deps)])

    return args


def build_update_args(params: UpdateIssueParams) -> list[str]:
    args = ["update", params.issue_id]
    _append_option(args, "--status", params.status)
    _append_int_option(args, "--priority", params.priority)
    _append_option(args, "--assignee", params.assignee)
    _append_option(args, "--title", params.title)
    _append_option(args, "--description", params.description)
    _append_option(args, "--design", params.design)
    _append_option(args, "--acceptance", params.acceptance_criteria)
    _append_option(args, "--notes", params.notes)
    _append_option(args, "--external-ref", params.external_ref)
    return args


def build_close_args(params: CloseIssueParams) -> list[str]:
    return ["close", params.issue_id, "--reason", params.reason]


def build_reopen_args(params: ReopenIssueParams) -> list[str]:
    args = ["reopen", *params.issue_ids]
    _append_option(args, "--reason", params.reason)
    return args


def build_add_dependency_args(params: AddDependencyParams) -> list[str]:
    return [
        "dep",
        "add",
        params.issue_id,
        params.depends_on_id,
        "--type",
        params.dep_type,
    ]


def build_init_args(params: InitParams) -> list[str]:
    args = ["init"]
    _append_option(args, "--prefix", params.prefix)
    return args


def build_stats_args() -> list[str]:
    return ["stats"]


def build_blocked_args() -> list[str]:
    return ["blocked"]


def build_inspect_migration_args() -> list[str]:
    return ["inspect-migration"]


def build_schema_info_args() -> list[str]:
    return ["get-schema-info"]


def build_repair_deps_args(*, fix: bool) -> list[str]:
    args = ["repair-deps"]
    if fix:
        args.append("--fix")
    return args


def build_detect_pollution_args(*, clean: bool) -> list[str]:
    args = ["detect-pollution"]
    if clean:
        # --yes skips bd's interactive confirmation, stdin is not a terminal
        args.extend(["--clean", "--yes"])
    return args


def build_validate_args(*, checks: str | None, fix_all: bool) -> list[str]:
    args = ["validate"]
    if checks is not None and checks.strip():
        args.extend(["--checks", checks])
    if fix_all:
        args.append("--fix-all")
    return args


def build_quickstart_args() -> list[str]:
    return ["quickstart"]
