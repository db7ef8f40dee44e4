"""Schedules reviews of notes stored as plain files, using spaced repetition.

If you installed via ``pip``, run ``astronote -h`` to get help.

To use the Python API, look at :class:`astronote.api.Astronote`
"""
