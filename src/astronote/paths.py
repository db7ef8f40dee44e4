"""Helpers for turning filesystem paths into note identities, and for locating config files."""

import os
import os.path
from typing import Optional

from astronote.errors import InvalidIdentityError, NotFoundError, OutsideRootError


def confine(path: str, root: str, cwd: Optional[str] = None, must_exist: bool = True) -> str:
    """Returns the identity for a file: its path relative to ``root``.

    ``path`` may be relative, in which case it is resolved against ``cwd`` (or the process's working directory
    if ``cwd`` is omitted). Both ``path`` and ``root`` are canonicalized, so symlinks and ``..`` segments cannot be
    used to escape the root.

    For example, ``confine('/notes/sub/file.md', '/notes')`` returns ``'sub/file.md'``.

    Raises :exc:`astronote.errors.NotFoundError` if nothing exists at the path (unless ``must_exist`` is False),
    and :exc:`astronote.errors.OutsideRootError` if it is not inside the root.
    """
    if cwd is None:
        cwd = os.getcwd()
    absolute = os.path.realpath(os.path.join(cwd, path))
    if must_exist and not os.path.exists(absolute):
        raise NotFoundError('File does not exist', path)
    root = os.path.realpath(root)
    if absolute == root or not os.path.commonpath([absolute, root]) == root:
        raise OutsideRootError(f'Path is not under the root {root}', path)
    return os.path.relpath(absolute, root)


def find_config(start: str, filename: str) -> Optional[str]:
    """Looks for ``filename`` in ``start`` and each of its ancestors, nearest first.

    Returns the path of the first match, or None once the filesystem root has been checked.
    """
    current = os.path.realpath(start)
    while True:
        candidate = os.path.join(current, filename)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def check_identity(path: str) -> str:
    """Raises :exc:`astronote.errors.InvalidIdentityError` unless the identity is a relative path that stays
    below the directory it is joined to.
    """
    if not path or os.path.isabs(path):
        raise InvalidIdentityError('Note identity must be a non-empty relative path', path)
    if any(part == '..' for part in path.replace('\\', '/').split('/')):
        raise InvalidIdentityError('Note identity must not contain ".."', path)
    return path
