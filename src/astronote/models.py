"""Defines classes for representing notes in memory and in storage.

The most important classes are :class:`Note` and :class:`SerializedNote`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from astronote.errors import SerializationError
from astronote.schedulers import SchedulingAlgorithm, decode_scheduler, default_scheduler, encode_scheduler
from astronote.schedulers.base import add_days


@dataclass
class Note:
    """A tracked file together with its review schedule.

    Outside of :meth:`reset` and :meth:`force_next`, :attr:`next_due` is always the value most recently computed
    by :attr:`scheduler`.
    """

    path: str
    """The note's identity: a path relative to the configured root directory, unique within a repo."""

    next_due: datetime
    """When the note should next be reviewed, as a naive local time."""

    scheduler: SchedulingAlgorithm = field(default_factory=default_scheduler)
    """The scheduling algorithm and its state. Owned by this note."""

    id: Optional[int] = field(default=None, compare=False)
    """Row id assigned by :class:`astronote.repos.sqlite.SqliteRepo`; None for notes that never came from it."""

    @classmethod
    def new(cls, path: str, scheduler: SchedulingAlgorithm = None, now: Optional[datetime] = None) -> Note:
        """Creates a note that is due immediately, with the default algorithm in its initial state."""
        return cls(path,
                   next_due=now if now is not None else datetime.now(),
                   scheduler=scheduler if scheduler is not None else default_scheduler())

    def review(self, quality: int, now: Optional[datetime] = None) -> datetime:
        """Records a review of the given quality and returns the new due date."""
        self.next_due = self.scheduler.advance(quality, now)
        return self.next_due

    def preview(self, quality: int, now: Optional[datetime] = None) -> datetime:
        """Returns the due date :meth:`review` would set for the given quality, without changing anything."""
        return self.scheduler.preview(quality, now)

    def reset(self, now: Optional[datetime] = None) -> None:
        """Discards the review history: installs a fresh default algorithm and makes the note due now."""
        self.scheduler = default_scheduler()
        self.next_due = now if now is not None else datetime.now()

    def force_next(self, days: int, now: Optional[datetime] = None) -> datetime:
        """Sets the due date to ``days`` days from now without consulting or changing the algorithm.

        This is an escape hatch for manual rescheduling. Afterward :attr:`next_due` may differ from anything the
        algorithm would have computed; the next :meth:`review` will go back to using the algorithm's state.
        """
        self.next_due = add_days(now if now is not None else datetime.now(), days)
        return self.next_due

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'path': self.path,
            'next_due': self.next_due.isoformat(),
            'scheduler': encode_scheduler(self.scheduler),
        }


@dataclass
class SerializedNote:
    """The storable form of a :class:`Note`.

    The algorithm's concrete type and state are kept in :attr:`scheduler` as a tagged dict, so notes using any
    registered algorithm can be stored side by side and decoded without knowing the algorithm in advance.
    """

    path: str

    next_due: datetime

    scheduler: dict
    """A dict like ``{'type': 'SuperMemo2', 'state': {...}}``; see :func:`astronote.schedulers.base.encode_scheduler`."""

    id: Optional[int] = field(default=None, compare=False)

    @classmethod
    def from_note(cls, note: Note) -> SerializedNote:
        return cls(note.path, note.next_due, encode_scheduler(note.scheduler), note.id)

    def to_note(self) -> Note:
        """Decodes the scheduler state.

        Raises :exc:`astronote.errors.UnknownSchedulerError` for unregistered algorithms and
        :exc:`astronote.errors.SerializationError` for malformed state.
        """
        try:
            scheduler = decode_scheduler(self.scheduler)
        except SerializationError as ex:
            if ex.path is None:
                ex.path = self.path
            raise
        return Note(self.path, self.next_due, scheduler, self.id)

    def as_dict(self) -> dict:
        """Returns the fields stored in metadata documents. :attr:`id` is not included."""
        return {
            'path': self.path,
            'next_due': self.next_due,
            'scheduler': self.scheduler,
        }

    @classmethod
    def from_dict(cls, value: dict, id: Optional[int] = None) -> SerializedNote:
        """Inverse of :meth:`as_dict`. Raises :exc:`astronote.errors.SerializationError` if the dict is malformed."""
        if not isinstance(value, dict):
            raise SerializationError(f'Expected a mapping, got {type(value).__name__}')
        path = value.get('path')
        if not isinstance(path, str) or not path:
            raise SerializationError(f'Invalid note path: {path!r}')
        next_due = value.get('next_due')
        if not isinstance(next_due, datetime):
            raise SerializationError(f'Invalid next_due: {next_due!r}', path)
        if next_due.tzinfo is not None:
            raise SerializationError(f'next_due must be a local time without a UTC offset: {next_due.isoformat()}',
                                     path)
        scheduler = value.get('scheduler')
        if not isinstance(scheduler, dict):
            raise SerializationError(f'Invalid scheduler: {scheduler!r}', path)
        return cls(path, next_due, scheduler, id)
