"""Segment-boundary path matching helpers."""

from __future__ import annotations

NOT_FOUND = -1


def normalize_path(path: str) -> str:
    """Return ``path`` with forward slashes; nothing else is rewritten."""
    return path.replace("\\", "/")


def find_segment_boundary_match(path: str, pattern: str) -> int:
    """Return the index of the first occurrence of ``pattern`` bounded by ``/``.

    An occurrence counts only when it starts at index 0 or right after a ``/`` and
    ends at the end of ``path`` or right before a ``/``. ``src/main/java`` therefore
    never matches inside ``src/main/javax``. Returns ``NOT_FOUND`` otherwise.
    """
    if not pattern:
        return NOT_FOUND
    index = path.find(pattern)
    while index >= 0:
        end = index + len(pattern)
        start_ok = index == 0 or path[index - 1] == "/"
        end_ok = end == len(path) or path[end] == "/"
        if start_ok and end_ok:
            return index
        index = path.find(pattern, index + 1)
    return NOT_FOUND


def matches_at_boundary(path: str, pattern: str) -> bool:
    return find_segment_boundary_match(path, pattern) != NOT_FOUND


def prefix_before(path: str, index: int) -> str:
    """Return the module prefix preceding a match at ``index`` (no trailing slash)."""
    return path[:index].rstrip("/")


def join_root(module: str, pattern: str) -> str:
    return f"{module}/{pattern}" if module else pattern


def relative_to_module(root: str, module: str) -> str:
    if module and root.startswith(f"{module}/"):
        return root[len(module) + 1 :]
    return root


def parent_directory(path: str) -> str:
    head, sep, _ = path.rpartition("/")
    return head if sep else ""


__all__ = [
    "NOT_FOUND",
    "find_segment_boundary_match",
    "join_root",
    "matches_at_boundary",
    "normalize_path",
    "parent_directory",
    "prefix_before",
    "relative_to_module",
]
