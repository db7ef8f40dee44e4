"""Defines the API for scheduling algorithms.

The most important class is :class:`SchedulingAlgorithm`. Concrete algorithms register themselves with
:func:`register_scheduler` so that stored state can be decoded without the reader knowing in advance which
algorithm produced it.
"""

from __future__ import annotations
import copy
from datetime import datetime, timedelta
from typing import Dict, Optional, Type

from astronote.errors import ArithmeticOverflowError, SerializationError, UnknownSchedulerError

MIN_QUALITY = 0
MAX_QUALITY = 6


def clamp_quality(quality: int) -> int:
    """Returns the quality limited to the range ``[0, 6]``.

    Out-of-range integers are moved to the nearest bound. Anything that is not an integer raises
    :exc:`ValueError`.
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise ValueError(f'Quality must be an integer, got {quality!r}')
    return max(MIN_QUALITY, min(MAX_QUALITY, quality))


def add_days(now: datetime, days: int) -> datetime:
    """Returns ``now`` plus a whole number of days, keeping the time of day.

    Raises :exc:`astronote.errors.ArithmeticOverflowError` if the result cannot be represented.
    """
    try:
        return now + timedelta(days=days)
    except OverflowError as ex:
        raise ArithmeticOverflowError(f'Cannot add {days} days to {now.isoformat()}', cause=ex) from ex


class SchedulingAlgorithm:
    """Base class for scheduling algorithms, which turn the quality of a review into the next due date.

    Instances hold the algorithm's state for a single note. Subclasses must be registered with
    :func:`register_scheduler` and implement :meth:`_advance`, :meth:`state`, and :meth:`from_state`.

    .. attribute:: type_tag
       :type: str

       Identifies the algorithm in serialized state. Set by :func:`register_scheduler`.
    """

    type_tag: str = None

    def _advance(self, quality: int) -> int:
        """Updates the state for a review of the given (already clamped) quality and returns the interval in days."""
        raise NotImplementedError()

    def advance(self, quality: int, now: Optional[datetime] = None) -> datetime:
        """Updates the state for a review and returns the new due date.

        ``now`` defaults to the current local time. If the due date cannot be represented, raises
        :exc:`astronote.errors.ArithmeticOverflowError` and leaves the state unchanged.
        """
        if now is None:
            now = datetime.now()
        working = copy.deepcopy(self)
        interval = working._advance(clamp_quality(quality))
        due = add_days(now, interval)
        self.__dict__.update(working.__dict__)
        return due

    def preview(self, quality: int, now: Optional[datetime] = None) -> datetime:
        """Returns the due date :meth:`advance` would return, without changing any state."""
        return copy.deepcopy(self).advance(quality, now)

    def state(self) -> dict:
        """Returns the algorithm-specific state as a dict of plain values."""
        raise NotImplementedError()

    @classmethod
    def from_state(cls, state: dict) -> SchedulingAlgorithm:
        """Creates an instance from a dict produced by :meth:`state`.

        Raises :exc:`astronote.errors.SerializationError` if the dict is malformed.
        """
        raise NotImplementedError()


_SCHEDULERS: Dict[str, Type[SchedulingAlgorithm]] = {}


def register_scheduler(tag: str):
    """Class decorator that makes an algorithm available for decoding under the given tag."""
    def decorate(cls: Type[SchedulingAlgorithm]) -> Type[SchedulingAlgorithm]:
        if tag in _SCHEDULERS and _SCHEDULERS[tag] is not cls:
            raise ValueError(f'Scheduler tag already registered: {tag}')
        cls.type_tag = tag
        _SCHEDULERS[tag] = cls
        return cls
    return decorate


def scheduler_types() -> Dict[str, Type[SchedulingAlgorithm]]:
    """Returns a copy of the registry of algorithm classes by tag."""
    return dict(_SCHEDULERS)


def encode_scheduler(scheduler: SchedulingAlgorithm) -> dict:
    """Returns the tagged form ``{'type': tag, 'state': {...}}`` of the given algorithm instance."""
    if not scheduler.type_tag or _SCHEDULERS.get(scheduler.type_tag) is not type(scheduler):
        raise SerializationError(f'Scheduler type is not registered: {type(scheduler).__name__}')
    return {'type': scheduler.type_tag, 'state': scheduler.state()}


def decode_scheduler(value: dict) -> SchedulingAlgorithm:
    """Creates an algorithm instance from the tagged form produced by :func:`encode_scheduler`."""
    if not isinstance(value, dict) or not isinstance(value.get('type'), str)\
            or not isinstance(value.get('state'), dict):
        raise SerializationError(f'Malformed scheduler state: {value!r}')
    cls = _SCHEDULERS.get(value['type'])
    if cls is None:
        raise UnknownSchedulerError(f'Unknown scheduler type: {value["type"]}')
    return cls.from_state(value['state'])
