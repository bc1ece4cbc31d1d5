"""Workspace context: which project root and database a call applies to.

The MCP host may have several projects open against one server process. A
call either names its workspace explicitly or falls back to the context set
by the last `set_context` call, then to BEADS_WORKING_DIR, then to whatever
directory bd is started in.
"""

import logging
import os
import threading
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path

from beads_mcp.config import parse_bool_env
from beads_mcp.errors import ConfigurationError
from beads_mcp.gateway.git.abc import Git

logger = logging.getLogger(__name__)

BEADS_DIR_NAME = ".beads"
DB_SUFFIX = ".db"


@dataclass(frozen=True)
class WorkspaceSnapshot:
    """Point-in-time view of a WorkspaceContext.

    Attributes:
        root: Active workspace root (absolute), None until set_context runs
        db_path: Database discovered under root, None if not found
    """

    root: str | None
    db_path: str | None

    @property
    def is_set(self) -> bool:
        return self.root is not None


class WorkspaceContext:
    """Process-wide active workspace, guarded by a lock.

    Writers replace the whole value; concurrent set_root calls are
    last-writer-wins. Readers take a snapshot, so an in-flight call is not
    affected by a later context change.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = WorkspaceSnapshot(root=None, db_path=None)

    def snapshot(self) -> WorkspaceSnapshot:
        with self._lock:
            return self._snapshot

    def set_root(self, candidate: str, *, git: Git) -> WorkspaceSnapshot:
        """Normalize `candidate`, make it the active root and discover its database.

        Returns:
            The new snapshot
        """
        root = resolve_workspace_root(candidate, git=git)
        db_path = find_beads_db(root)
        snapshot = WorkspaceSnapshot(root=root, db_path=db_path)

        with self._lock:
            self._snapshot = snapshot

        logger.info("Workspace context set: root=%s db=%s", root, db_path or "not found")
        return snapshot


def resolve_workspace_root(candidate: str, *, git: Git) -> str:
    """Return the git top-level containing `candidate`, else its absolute path."""
    toplevel = git.find_repository_root(Path(candidate))
    if toplevel is not None:
        return str(toplevel)
    return os.path.abspath(candidate)


def find_beads_db(root: str) -> str | None:
    """Find `.beads/*.db` in `root` or its nearest ancestor that has one.

    Walks upward until the filesystem root. Within a `.beads` directory the
    first database by name is returned.
    """
    current = Path(os.path.abspath(root))

    while True:
        beads_dir = current / BEADS_DIR_NAME
        if beads_dir.is_dir():
            db_files = sorted(
                entry
                for entry in beads_dir.iterdir()
                if entry.name.endswith(DB_SUFFIX) and entry.is_file()
            )
            if db_files:
                return str(db_files[0])

        parent = current.parent
        if parent == current:
            return None
        current = parent


def get_effective_workspace_root(
    explicit: str | None,
    *,
    context: WorkspaceContext,
    environ: Mapping[str, str],
) -> str | None:
    """Pick the root for a call: explicit > context > BEADS_WORKING_DIR > None.

    None means bd runs in the server's own working directory.
    """
    if explicit is not None and explicit.strip():
        return explicit

    snapshot = context.snapshot()
    if snapshot.root is not None:
        return snapshot.root

    from_env = environ.get("BEADS_WORKING_DIR")
    if from_env is not None and from_env.strip():
        return from_env

    return None


def ensure_write_context(
    explicit: str | None,
    *,
    context: WorkspaceContext,
    environ: Mapping[str, str],
) -> None:
    """Reject a mutating call with no workspace when BEADS_REQUIRE_CONTEXT is on."""
    if not parse_bool_env(environ.get("BEADS_REQUIRE_CONTEXT")):
        return

    if get_effective_workspace_root(explicit, context=context, environ=environ) is None:
        raise ConfigurationError(
            "Context not set. Either provide workspace_root parameter "
            "or call set_context() first."
        )


def export_context_markers(snapshot: WorkspaceSnapshot, environ: MutableMapping[str, str]) -> None:
    """Mirror the context into environment markers read by load_beads_config.

    BEADS_DB is removed when no database was discovered so a stale path from a
    previous workspace is never reused.
    """
    if snapshot.root is None:
        return

    environ["BEADS_WORKING_DIR"] = snapshot.root
    environ["BEADS_CONTEXT_SET"] = "1"
    if snapshot.db_path is not None:
        environ["BEADS_DB"] = snapshot.db_path
    else:
        environ.pop("BEADS_DB", None)
