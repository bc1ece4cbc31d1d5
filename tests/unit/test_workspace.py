"""Tests for workspace context and root resolution."""

import os
from pathlib import Path

import pytest

from beads_mcp.errors import ConfigurationError
from beads_mcp.gateway.git.fake import FakeGit
from beads_mcp.workspace import (
    WorkspaceContext,
    WorkspaceSnapshot,
    ensure_write_context,
    export_context_markers,
    find_beads_db,
    get_effective_workspace_root,
    resolve_workspace_root,
)


def _make_db(directory: Path, name: str) -> Path:
    beads_dir = directory / ".beads"
    beads_dir.mkdir(parents=True, exist_ok=True)
    db = beads_dir / name
    db.write_text("", encoding="utf-8")
    return db


class TestFindBeadsDb:
    """Tests for find_beads_db()."""

    def test_finds_db_in_root(self, tmp_path: Path) -> None:
        """A database in root/.beads is found."""
        db = _make_db(tmp_path, "app.db")

        assert find_beads_db(str(tmp_path)) == str(db)

    def test_walks_up_to_ancestor(self, tmp_path: Path) -> None:
        """Discovery walks up to an ancestor's .beads."""
        db = _make_db(tmp_path, "app.db")
        nested = tmp_path / "src" / "pkg" / "deep"
        nested.mkdir(parents=True)

        assert find_beads_db(str(nested)) == str(db)

    def test_nearest_ancestor_wins(self, tmp_path: Path) -> None:
        """The closest .beads with a database wins."""
        _make_db(tmp_path, "outer.db")
        inner = _make_db(tmp_path / "project", "inner.db")

        assert find_beads_db(str(tmp_path / "project")) == str(inner)

    def test_first_db_by_name(self, tmp_path: Path) -> None:
        """Several databases resolve to the first by name."""
        _make_db(tmp_path, "second.db")
        first = _make_db(tmp_path, "first.db")

        assert find_beads_db(str(tmp_path)) == str(first)

    def test_skips_beads_dir_without_db_files(self, tmp_path: Path) -> None:
        """A .beads without databases does not stop the walk."""
        outer = _make_db(tmp_path, "app.db")
        project = tmp_path / "project"
        (project / ".beads").mkdir(parents=True)
        (project / ".beads" / "config.yaml").write_text("", encoding="utf-8")
        (project / ".beads" / "issues.jsonl").write_text("", encoding="utf-8")

        assert find_beads_db(str(project)) == str(outer)

    def test_db_named_directory_is_ignored(self, tmp_path: Path) -> None:
        """A directory ending in .db is not a database."""
        (tmp_path / ".beads" / "cache.db").mkdir(parents=True)

        assert find_beads_db(str(tmp_path)) is None

    def test_not_found_without_raising(self, tmp_path: Path) -> None:
        """No database anywhere returns None."""
        nested = tmp_path / "a" / "b" / "c"
        nested.mkdir(parents=True)

        assert find_beads_db(str(nested)) is None

    def test_relative_root_is_made_absolute(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A relative root is resolved against the cwd."""
        db = _make_db(tmp_path, "app.db")
        (tmp_path / "sub").mkdir()
        monkeypatch.chdir(tmp_path)

        assert find_beads_db("sub") == str(db)


class TestResolveWorkspaceRoot:
    """Tests for resolve_workspace_root()."""

    def test_normalizes_to_repository_toplevel(self, tmp_path: Path) -> None:
        """A path inside a repository resolves to its toplevel."""
        repo = tmp_path / "repo"
        nested = repo / "src" / "module"
        nested.mkdir(parents=True)
        git = FakeGit(repository_roots=[repo])

        assert resolve_workspace_root(str(nested), git=git) == str(repo.resolve())

    def test_falls_back_to_absolute_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Outside a repository the absolute path is used."""
        (tmp_path / "plain").mkdir()
        monkeypatch.chdir(tmp_path)

        result = resolve_workspace_root("plain/../plain", git=FakeGit())

        assert result == os.path.abspath(str(tmp_path / "plain"))


class TestWorkspaceContext:
    """Tests for WorkspaceContext."""

    def test_initially_unset(self) -> None:
        """A new context has no root and no database."""
        snapshot = WorkspaceContext().snapshot()

        assert snapshot.root is None
        assert snapshot.db_path is None
        assert snapshot.is_set is False

    def test_set_root_discovers_database(self, tmp_path: Path) -> None:
        """set_root records the discovered database."""
        db = _make_db(tmp_path, "app.db")
        context = WorkspaceContext()

        snapshot = context.set_root(str(tmp_path), git=FakeGit())

        assert snapshot.root == str(tmp_path)
        assert snapshot.db_path == str(db)
        assert context.snapshot() == snapshot

    def test_set_root_is_idempotent(self, tmp_path: Path) -> None:
        """Setting the same path twice gives the same snapshot."""
        repo = tmp_path / "repo"
        (repo / "docs").mkdir(parents=True)
        _make_db(repo, "app.db")
        git = FakeGit(repository_roots=[repo])
        context = WorkspaceContext()

        first = context.set_root(str(repo / "docs"), git=git)
        second = context.set_root(str(repo / "docs"), git=git)

        assert first == second
        assert first.root == str(repo.resolve())

    def test_switching_workspace_clears_stale_database(self, tmp_path: Path) -> None:
        """Moving to a workspace without a database clears the old one."""
        with_db = tmp_path / "one"
        _make_db(with_db, "app.db")
        without_db = tmp_path / "two"
        without_db.mkdir()
        context = WorkspaceContext()

        context.set_root(str(with_db), git=FakeGit())
        snapshot = context.set_root(str(without_db), git=FakeGit())

        assert snapshot.root == str(without_db)
        assert snapshot.db_path is None


class TestGetEffectiveWorkspaceRoot:
    """Tests for get_effective_workspace_root() precedence."""

    def test_explicit_wins(self, tmp_path: Path) -> None:
        """An explicit root beats context and environment."""
        context = WorkspaceContext()
        context.set_root(str(tmp_path), git=FakeGit())
        environ = {"BEADS_WORKING_DIR": "/env"}

        result = get_effective_workspace_root("/explicit", context=context, environ=environ)

        assert result == "/explicit"

    def test_context_beats_environment(self, tmp_path: Path) -> None:
        """The active context beats BEADS_WORKING_DIR."""
        context = WorkspaceContext()
        context.set_root(str(tmp_path), git=FakeGit())

        result = get_effective_workspace_root(
            None, context=context, environ={"BEADS_WORKING_DIR": "/env"}
        )

        assert result == str(tmp_path)

    def test_blank_explicit_falls_through_to_environment(self) -> None:
        """A blank explicit root is ignored."""
        result = get_effective_workspace_root(
            "   ", context=WorkspaceContext(), environ={"BEADS_WORKING_DIR": "/env"}
        )

        assert result == "/env"

    def test_undefined_when_nothing_set(self) -> None:
        """With nothing set the result is None."""
        result = get_effective_workspace_root(
            None, context=WorkspaceContext(), environ={"BEADS_WORKING_DIR": " "}
        )

        assert result is None


class TestEnsureWriteContext:
    """Tests for ensure_write_context()."""

    def test_no_gate_allows_anything(self) -> None:
        """Without BEADS_REQUIRE_CONTEXT nothing is checked."""
        ensure_write_context(None, context=WorkspaceContext(), environ={})

    def test_gate_rejects_missing_context(self) -> None:
        """The gate rejects a write with no workspace."""
        with pytest.raises(ConfigurationError, match="call set_context"):
            ensure_write_context(
                None, context=WorkspaceContext(), environ={"BEADS_REQUIRE_CONTEXT": "1"}
            )

    def test_gate_passes_with_explicit_root(self) -> None:
        """An explicit root satisfies the gate."""
        ensure_write_context(
            "/work", context=WorkspaceContext(), environ={"BEADS_REQUIRE_CONTEXT": "1"}
        )

    def test_gate_passes_with_active_context(self, tmp_path: Path) -> None:
        """An active context satisfies the gate."""
        context = WorkspaceContext()
        context.set_root(str(tmp_path), git=FakeGit())

        ensure_write_context(None, context=context, environ={"BEADS_REQUIRE_CONTEXT": "true"})


class TestExportContextMarkers:
    """Tests for export_context_markers()."""

    def test_exports_root_and_database(self) -> None:
        """Root, context flag and database are exported."""
        environ: dict[str, str] = {}

        snapshot = WorkspaceSnapshot(root="/work", db_path="/work/.beads/a.db")
        export_context_markers(snapshot, environ)

        assert environ == {
            "BEADS_WORKING_DIR": "/work",
            "BEADS_CONTEXT_SET": "1",
            "BEADS_DB": "/work/.beads/a.db",
        }

    def test_removes_stale_database(self) -> None:
        """BEADS_DB is removed when no database was found."""
        environ = {"BEADS_DB": "/old/.beads/a.db"}

        export_context_markers(WorkspaceSnapshot(root="/work", db_path=None), environ)

        assert "BEADS_DB" not in environ
        assert environ["BEADS_WORKING_DIR"] == "/work"

    def test_unset_snapshot_exports_nothing(self) -> None:
        """An unset snapshot leaves the environment alone."""
        environ: dict[str, str] = {}

        export_context_markers(WorkspaceSnapshot(root=None, db_path=None), environ)

        assert environ == {}
