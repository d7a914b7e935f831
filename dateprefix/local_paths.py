from __future__ import annotations

from pathlib import Path


def is_under(path: Path, root: Path) -> bool:
    """Return True if path (after resolving) lies inside root."""
    return path.expanduser().resolve().is_relative_to(root.expanduser().resolve())


def sibling_path(directory: Path, name: str) -> Path:
    """Return directory/name, requiring that name stays a plain entry of directory.

    A rename target never moves a file into another directory, so names with
    path separators or dot segments are refused.
    """
    if not name or name in {".", ".."} or Path(name).name != name:
        raise ValueError(f"Not a plain file name: {name!r}")

    target = directory / name
    if not is_under(target, directory):
        raise ValueError(f"Path must be under {directory}: {target}")
    return target
