"""Provides the :class:`SuperMemo2` class."""

from __future__ import annotations
from dataclasses import dataclass
import math

from astronote.errors import SerializationError
from astronote.schedulers.base import SchedulingAlgorithm, register_scheduler

INTERVAL_1ST_REPETITION = 1
INTERVAL_2ND_REPETITION = 6
MIN_EASINESS_FACTOR = 1.3
DEFAULT_EASINESS_FACTOR = 2.5
PASSING_QUALITY = 3


@register_scheduler('SuperMemo2')
@dataclass
class SuperMemo2(SchedulingAlgorithm):
    """The SuperMemo-2 algorithm.

    The first successful repetition is followed by a 1 day interval and the second by a 6 day interval.
    After that, each interval is the previous one multiplied by the easiness factor, which is adjusted
    according to the quality of every review and never drops below 1.3.

    A review of quality below 3 from the third repetition onward is a lapse: the cycle restarts, so the next
    interval is 1 day again.

    Qualities range from 0 to 6, but 6 affects the easiness factor exactly like 5:

    * 0: complete blackout
    * 1: incorrect response; the correct one remembered
    * 2: incorrect response; where the correct one seemed easy to recall
    * 3: correct response recalled with serious difficulty
    * 4: correct response after a hesitation
    * 5: perfect response
    * 6: perfect response over multiple sessions
    """

    repetition_count: int = 0
    """Number of repetitions since the note was added or last lapsed."""

    interval_days: int = 0
    """Days between the most recent review and the due date it produced."""

    easiness_factor: float = DEFAULT_EASINESS_FACTOR
    """Multiplier applied to the interval after each successful repetition beyond the second."""

    def _advance(self, quality: int) -> int:
        self.repetition_count += 1
        if self.repetition_count == 1:
            self.interval_days = INTERVAL_1ST_REPETITION
        elif self.repetition_count == 2:
            self.interval_days = INTERVAL_2ND_REPETITION
        elif quality < PASSING_QUALITY:
            # lapse: recompute as if the counter had been reset to 0
            self.repetition_count = 1
            self.interval_days = INTERVAL_1ST_REPETITION
        else:
            ef = self._update_easiness_factor(quality)
            self.interval_days = math.ceil(self.interval_days * ef)
        return self.interval_days

    def _update_easiness_factor(self, quality: int) -> float:
        q = min(quality, 5)
        self.easiness_factor += 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)
        self.easiness_factor = max(MIN_EASINESS_FACTOR, self.easiness_factor)
        return self.easiness_factor

    def state(self) -> dict:
        return {
            'repetition_count': self.repetition_count,
            'interval_days': self.interval_days,
            'easiness_factor': self.easiness_factor,
        }

    @classmethod
    def from_state(cls, state: dict) -> SuperMemo2:
        try:
            repetition_count = state['repetition_count']
            interval_days = state['interval_days']
            easiness_factor = state['easiness_factor']
        except KeyError as ex:
            raise SerializationError(f'Missing SuperMemo2 field {ex.args[0]}', cause=ex) from ex
        for name, value in (('repetition_count', repetition_count), ('interval_days', interval_days)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise SerializationError(f'Invalid SuperMemo2 {name}: {value!r}')
        if isinstance(easiness_factor, bool) or not isinstance(easiness_factor, (int, float)):
            raise SerializationError(f'Invalid SuperMemo2 easiness_factor: {easiness_factor!r}')
        if not math.isfinite(easiness_factor) or easiness_factor < MIN_EASINESS_FACTOR:
            raise SerializationError(f'SuperMemo2 easiness_factor must be a finite number of at least '
                                     f'{MIN_EASINESS_FACTOR}: {easiness_factor!r}')
        return cls(repetition_count, interval_days, float(easiness_factor))
