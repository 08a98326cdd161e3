from __future__ import annotations

from pathlib import Path


def failure_path(path: Path | None, root: Path) -> str:
    """POSIX path of a failure relative to `root`, for formatter output."""

    if path is None:
        return "<stdin>"
    try:
        return _resolved(path).relative_to(_resolved(root)).as_posix()
    except ValueError:
        # Outside the project root.
        return path.as_posix()


def _resolved(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path
