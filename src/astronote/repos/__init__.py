"""Handles storage of notes and their review schedules.

:class:`astronote.repos.base.NoteRepo` defines an API.
:class:`astronote.repos.sqlite.SqliteRepo` keeps everything in one SQLite database, while
:class:`astronote.repos.direct.DirectRepo` keeps a human-readable metadata file per note.
"""
