"""Provides the main entry point for using the library, :class:`Astronote`"""

from __future__ import annotations
from datetime import datetime
import logging
import os.path
import shlex
import subprocess
from typing import Iterable, List, Optional

from astronote.conf import AstronoteConf
from astronote.errors import EditorError
from astronote.models import Note
from astronote.paths import confine

logger = logging.getLogger(__name__)


class Astronote:
    """Main entry point for working programmatically with your notes and their review schedules.

    Generally, you should get an instance using the :meth:`Astronote.for_path` method. Call :meth:`close` when
    you're done with it, or else use it as a context manager.

    Methods that accept file paths resolve relative paths against ``cwd`` (default: the working directory) and
    require them to be inside :attr:`astronote.conf.RepoConf.root_path`. The :attr:`repo` attribute, an instance
    of :class:`astronote.repos.base.NoteRepo`, works with note identities directly.

    .. attribute:: conf
       :type: astronote.conf.AstronoteConf

    .. attribute:: repo
       :type: astronote.repos.base.NoteRepo

    Here's an example that pushes back every due note by a day:

    .. code-block:: python

       from astronote.api import Astronote
       with Astronote.for_path() as an:
           for note in an.due():
               note.force_next(1)
               an.repo.update(note)
    """

    @staticmethod
    def for_path(cwd: Optional[str] = None) -> Astronote:
        """Creates an instance using the config file that applies to the given directory.

        See :meth:`astronote.conf.AstronoteConf.for_path`.
        """
        return AstronoteConf.for_path(cwd).instantiate()

    def __init__(self, conf: AstronoteConf):
        self.conf = conf
        self.repo = conf.repo_conf.instantiate()

    @property
    def root_path(self) -> str:
        return self.conf.repo_conf.root_path

    def identity(self, path: str, cwd: Optional[str] = None) -> str:
        """Returns the note identity for an existing file. See :func:`astronote.paths.confine`."""
        return confine(path, self.root_path, cwd)

    def absolute_path(self, note: Note) -> str:
        return os.path.join(self.root_path, note.path)

    def add(self, paths: Iterable[str], cwd: Optional[str] = None, now: Optional[datetime] = None) -> List[Note]:
        """Starts tracking the given files, which become due immediately.

        Directories are skipped, as are files that are already tracked. Returns the newly created notes.
        All paths are validated before any note is created.
        """
        identities = []
        for path in paths:
            identity = self.identity(path, cwd)
            if os.path.isfile(os.path.join(self.root_path, identity)):
                identities.append(identity)
            else:
                logger.info('Skipping directory %s', identity)
        added = []
        for identity in identities:
            note = Note.new(identity, now=now)
            if self.repo.create(note):
                added.append(note)
        return added

    def find(self, path: str, cwd: Optional[str] = None) -> Note:
        """Returns the note for the given file path.

        The file itself does not need to exist anymore, but its path must still be inside the root.
        """
        return self.repo.find(confine(path, self.root_path, cwd, must_exist=False))

    def due(self, limit: Optional[int] = None, ignore_schedule: bool = False,
            now: Optional[datetime] = None) -> List[Note]:
        """Returns the notes that are due for review, earliest first.

        See :meth:`astronote.repos.base.NoteRepo.list_due`.
        """
        return self.repo.list_due(limit, now, ignore_schedule)

    def review(self, note: Note, quality: int, now: Optional[datetime] = None) -> datetime:
        """Records a review of the given quality (0 to 6), saves the note, and returns its new due date."""
        next_due = note.review(quality, now)
        self.repo.update(note)
        logger.info('Reviewed %s with quality %s, next due %s', note.path, quality, next_due)
        return next_due

    def reset(self, paths: Iterable[str], cwd: Optional[str] = None, now: Optional[datetime] = None) -> List[Note]:
        """Discards the review history of the given notes and makes them due now. Returns the changed notes."""
        notes = [self.find(p, cwd) for p in paths]
        for note in notes:
            note.reset(now)
            self.repo.update(note)
        return notes

    def force_next(self, paths: Iterable[str], days: int, cwd: Optional[str] = None,
                   now: Optional[datetime] = None) -> List[Note]:
        """Makes the given notes due ``days`` days from now, bypassing the scheduling algorithm.

        See :meth:`astronote.models.Note.force_next`. Returns the changed notes.
        """
        notes = [self.find(p, cwd) for p in paths]
        for note in notes:
            note.force_next(days, now)
            self.repo.update(note)
        return notes

    def remove(self, paths: Iterable[str], cwd: Optional[str] = None) -> List[Note]:
        """Stops tracking the given notes. The files themselves are not touched. Returns the removed notes."""
        notes = [self.find(p, cwd) for p in paths]
        for note in notes:
            self.repo.delete(note)
        return notes

    def open_in_editor(self, note: Note, editor: Optional[str] = None) -> None:
        """Opens the note's file with the given editor command (default: the configured one) and waits for it.

        Raises :exc:`astronote.errors.EditorError` if the editor cannot be started or exits with a failure status.
        """
        command = shlex.split(editor or self.conf.editor_command)
        if not command:
            raise EditorError('No editor command configured', note.path)
        path = confine(self.absolute_path(note), self.root_path)
        try:
            result = subprocess.run(command + [os.path.join(self.root_path, path)])
        except OSError as ex:
            raise EditorError(f'Failed to run editor {command[0]}', note.path, ex) from ex
        if not result.returncode == 0:
            raise EditorError(f'Editor {command[0]} exited with status {result.returncode}', note.path)

    def close(self):
        """Closes the associated repo and releases any other resources."""
        self.repo.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.repo.close()
