"""Provides the :class:`DirectRepo` class."""

import logging
import os
import os.path
from datetime import datetime
from typing import Iterator, List, Optional

import yaml

from astronote.conf import DirectRepoConf
from astronote.errors import NotFoundError, SerializationError, StorageError
from astronote.models import Note, SerializedNote
from astronote.paths import check_identity
from astronote.repos.base import NoteRepo

logger = logging.getLogger(__name__)

METADATA_SUFFIX = '.metadata'

MAX_METADATA_SIZE = 10 * 1024
"""Metadata files larger than this many bytes are rejected rather than parsed."""


class DirectRepo(NoteRepo):
    """Stores each note in its own small YAML file, in a directory tree mirroring the note identities.

    The note ``a/b/c.md`` is stored at ``<metadata_path>/a/b/c.md.metadata``. Directories are created when a
    note is first written beneath them. The files are meant to be human-readable; here's an example:

    .. code-block:: yaml

       path: a/b/c.md
       next_due: 2023-04-05 06:07:08.123456
       scheduler:
         type: SuperMemo2
         state:
           repetition_count: 1
           interval_days: 1
           easiness_factor: 2.5

    Listing notes requires reading every metadata file, so :meth:`list_due` gets slower as the collection grows;
    :class:`astronote.repos.sqlite.SqliteRepo` does not have that problem.

    .. attribute:: conf
       :type: astronote.conf.DirectRepoConf
    """
    def __init__(self, conf: DirectRepoConf):
        self.conf = conf
        if not conf.metadata_path:
            raise ValueError('`metadata_path` must be set in DirectRepoConf.')

    def metadata_path(self, path: str) -> str:
        """Returns the location of the metadata file for the given note identity."""
        check_identity(path)
        return os.path.join(self.conf.metadata_path, path + METADATA_SUFFIX)

    def _read(self, filepath: str) -> Note:
        try:
            with open(filepath, 'rb') as file:
                data = file.read(MAX_METADATA_SIZE + 1)
        except OSError as ex:
            raise StorageError('Failed to read metadata file', filepath, ex) from ex
        if len(data) > MAX_METADATA_SIZE:
            raise SerializationError(f'Metadata file exceeds {MAX_METADATA_SIZE} bytes', filepath)
        try:
            value = yaml.safe_load(data.decode('utf-8'))
        except (UnicodeDecodeError, yaml.YAMLError) as ex:
            raise SerializationError('Failed to parse metadata file', filepath, ex) from ex
        try:
            return SerializedNote.from_dict(value).to_note()
        except SerializationError as ex:
            ex.message = f'{ex.message} (in {filepath})'
            raise

    def _write(self, note: Note, filepath: str) -> None:
        text = yaml.safe_dump(SerializedNote.from_note(note).as_dict(), sort_keys=False, default_flow_style=False)
        try:
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
            with open(filepath, 'w') as file:
                file.write(text)
        except OSError as ex:
            raise StorageError('Failed to write metadata file', filepath, ex) from ex

    def create(self, note: Note) -> bool:
        filepath = self.metadata_path(note.path)
        if os.path.exists(filepath):
            logger.debug('Note already exists, not creating: %s', note.path)
            return False
        self._write(note, filepath)
        logger.debug('Created note %s at %s', note.path, filepath)
        return True

    def update(self, note: Note) -> bool:
        filepath = self.metadata_path(note.path)
        if not os.path.exists(filepath):
            logger.debug('Note does not exist, not updating: %s', note.path)
            return False
        self._write(note, filepath)
        logger.debug('Updated note %s, next due %s', note.path, note.next_due)
        return True

    def find(self, path: str) -> Note:
        filepath = self.metadata_path(path)
        if not os.path.isfile(filepath):
            raise NotFoundError('Note is not tracked', path)
        return self._read(filepath)

    def _paths(self) -> Iterator[str]:
        if os.path.isdir(self.conf.metadata_path):
            yield from self._paths_in(self.conf.metadata_path)

    def _paths_in(self, dirpath: str) -> Iterator[str]:
        try:
            entries = list(os.scandir(dirpath))
        except OSError as ex:
            raise StorageError('Failed to list metadata directory', dirpath, ex) from ex
        for entry in entries:
            if entry.is_symlink():
                continue
            if entry.is_dir():
                yield from self._paths_in(entry.path)
            elif entry.name.endswith(METADATA_SUFFIX):
                yield entry.path

    def list_due(self, limit: Optional[int] = None, now: Optional[datetime] = None,
                 ignore_schedule: bool = False) -> List[Note]:
        if now is None:
            now = datetime.now()
        notes = [self._read(p) for p in self._paths()]
        if not ignore_schedule:
            notes = [n for n in notes if n.next_due <= now]
        notes.sort(key=lambda n: (n.next_due, n.path))
        return notes if limit is None else notes[:max(limit, 0)]

    def delete(self, note: Note) -> None:
        filepath = self.metadata_path(note.path)
        if not os.path.isfile(filepath):
            raise NotFoundError('Note is not tracked', note.path)
        try:
            os.remove(filepath)
        except OSError as ex:
            raise StorageError('Failed to remove metadata file', filepath, ex) from ex
        logger.debug('Deleted note %s', note.path)
        self._prune(os.path.dirname(filepath))

    def _prune(self, dirpath: str) -> None:
        # removes directories left empty, stopping at metadata_path itself
        while dirpath.startswith(self.conf.metadata_path + os.sep):
            try:
                if os.listdir(dirpath):
                    return
                os.rmdir(dirpath)
            except OSError as ex:
                raise StorageError('Failed to remove empty metadata directory', dirpath, ex) from ex
            logger.debug('Removed empty metadata directory %s', dirpath)
            dirpath = os.path.dirname(dirpath)
