"""Scheduling algorithms, which decide when a note is next due.

:class:`astronote.schedulers.base.SchedulingAlgorithm` defines the API, and
:class:`astronote.schedulers.sm2.SuperMemo2` is the default implementation.
"""

from astronote.schedulers.base import SchedulingAlgorithm, decode_scheduler, encode_scheduler, register_scheduler
from astronote.schedulers.sm2 import SuperMemo2

DEFAULT_SCHEDULER = SuperMemo2


def default_scheduler() -> SchedulingAlgorithm:
    """Returns a new instance of the default algorithm in its initial state."""
    return DEFAULT_SCHEDULER()
