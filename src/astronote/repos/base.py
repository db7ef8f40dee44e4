"""Defines the API for storing notes.

The most important class is :class:`NoteRepo`.
"""

from datetime import datetime
from typing import List, Optional

from astronote.models import Note


class NoteRepo:
    """Base class for repos, which durably store notes and their review schedules.

    Repos treat note identities (:attr:`astronote.models.Note.path`) as opaque unique strings; turning filesystem
    paths into identities is the job of :func:`astronote.paths.confine`.

    All implementations encode scheduler state with :class:`astronote.models.SerializedNote`, so a note read from
    one backend is equal to the same note read from any other.

    Remember to call :meth:`close` when done with the instance, or use the instance as a context manager.
    """
    def create(self, note: Note) -> bool:
        """Stores a new note.

        If a note with the same identity is already stored, nothing changes and False is returned.
        """
        raise NotImplementedError()

    def update(self, note: Note) -> bool:
        """Overwrites the stored note with the same identity.

        If no such note is stored, nothing changes and False is returned.
        """
        raise NotImplementedError()

    def find(self, path: str) -> Note:
        """Returns the note with the given identity, or raises :exc:`astronote.errors.NotFoundError`."""
        raise NotImplementedError()

    def list_due(self, limit: Optional[int] = None, now: Optional[datetime] = None,
                 ignore_schedule: bool = False) -> List[Note]:
        """Returns notes that are due at ``now`` (default: the current local time), earliest first.

        Notes with the same due date are ordered by identity. If ``ignore_schedule`` is True, every note is
        returned regardless of its due date. At most ``limit`` notes are returned, if given.
        """
        raise NotImplementedError()

    def delete(self, note: Note) -> None:
        """Removes the note with the same identity, or raises :exc:`astronote.errors.NotFoundError`."""
        raise NotImplementedError()

    def close(self) -> None:
        """Release any resources associated with the repo. Should be called when you're done with an instance."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
