"""Path helpers for the privileged filesystem.

Paths handled here are POSIX paths on the device reached through the
privileged session, never paths of the local process, so everything goes
through posixpath rather than os.path.
"""

from __future__ import annotations

import posixpath
import shlex


def normalize_path(path: str, working_directory: str = "/") -> str:
    """Return an absolute, normalized path; relative paths resolve against working_directory."""
    s = str(path or "").strip()
    if not s:
        return posixpath.normpath(working_directory)
    if not s.startswith("/"):
        s = posixpath.join(working_directory, s)
    normalized = posixpath.normpath(s)
    # normpath keeps a leading '//' as POSIX allows it
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def join_path(parent: str, name: str) -> str:
    if parent.endswith("/"):
        return parent + name
    return parent + "/" + name


def parent_path(path: str) -> str:
    """Strip the final path segment; the parent of a top-level entry is '/'.

    A bare name with no slash has the current directory, '.', as its parent.
    """
    stripped = path.rstrip("/")
    cut = stripped.rfind("/")
    if cut == -1:
        return "." if stripped else "/"
    return stripped[:cut] or "/"


def base_name(path: str) -> str:
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped[stripped.rfind("/") + 1 :]


def quote(path: str) -> str:
    """Quote a path for interpolation into a shell command line."""
    return shlex.quote(path)
