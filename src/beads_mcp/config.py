"""Resolve bd executable location and behavioral flags from the environment."""

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

BD_EXECUTABLE = "bd"

_TRUE_TOKENS = frozenset({"1", "true", "yes"})


@dataclass(frozen=True)
class BeadsConfig:
    """Settings for talking to bd, derived from the process environment.

    Rebuilt on every client construction so that context changes exported to
    the environment are always picked up.

    Attributes:
        beads_path: Executable to spawn (best guess, may not exist)
        beads_dir: Explicit .beads directory override (BEADS_DIR)
        beads_db: Explicit database file override (BEADS_DB)
        beads_actor: Actor recorded by bd for audit trails
        no_auto_flush: Pass --no-auto-flush to bd
        no_auto_import: Pass --no-auto-import to bd
        working_dir: Working directory override (BEADS_WORKING_DIR)
    """

    beads_path: str
    beads_dir: str | None
    beads_db: str | None
    beads_actor: str | None
    no_auto_flush: bool
    no_auto_import: bool
    working_dir: str | None


def parse_bool_env(value: str | None) -> bool:
    """Return True only for 1/true/yes (any case)."""
    if not value:
        return False
    return value.lower() in _TRUE_TOKENS


def which(executable: str, *, path_env: str, is_windows: bool) -> str | None:
    """Find a regular file named `executable` on a PATH-style string.

    Unlike shutil.which this does not check the executable bit, matching how
    bd gets installed by copying a binary into ~/.local/bin.
    """
    separator = ";" if is_windows else ":"

    for directory in path_env.split(separator):
        if not directory:
            continue
        candidate = Path(directory) / executable
        if candidate.is_file():
            return str(candidate)
        if is_windows:
            candidate_exe = Path(directory) / f"{executable}.exe"
            if candidate_exe.is_file():
                return str(candidate_exe)

    return None


def default_beads_path(environ: Mapping[str, str]) -> str:
    """Resolve the bd executable: BEADS_PATH, then PATH search, then ~/.local/bin/bd."""
    from_env = environ.get("BEADS_PATH")
    if from_env and from_env.strip():
        return from_env

    found = which(
        BD_EXECUTABLE,
        path_env=environ.get("PATH", ""),
        is_windows=sys.platform == "win32",
    )
    if found is not None:
        return found

    return str(Path.home() / ".local" / "bin" / BD_EXECUTABLE)


def load_beads_config(environ: Mapping[str, str] | None = None) -> BeadsConfig:
    """Build a BeadsConfig from `environ` (defaults to os.environ)."""
    if environ is None:
        environ = os.environ

    return BeadsConfig(
        beads_path=default_beads_path(environ),
        beads_dir=environ.get("BEADS_DIR") or None,
        beads_db=environ.get("BEADS_DB") or None,
        beads_actor=environ.get("BEADS_ACTOR") or environ.get("USER") or None,
        no_auto_flush=parse_bool_env(environ.get("BEADS_NO_AUTO_FLUSH")),
        no_auto_import=parse_bool_env(environ.get("BEADS_NO_AUTO_IMPORT")),
        working_dir=environ.get("BEADS_WORKING_DIR") or None,
    )
