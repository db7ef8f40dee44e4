"""Provides the :class:`SqliteRepo` class."""

from collections import namedtuple
from datetime import datetime
import json
import logging
import os.path
import sqlite3
from typing import List, Optional

from astronote.conf import SqliteRepoConf
from astronote.errors import NotFoundError, SerializationError, StorageError
from astronote.models import Note, SerializedNote
from astronote.repos.base import NoteRepo

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_SQL_CREATE_SCHEMA = """
CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    path TEXT NOT NULL UNIQUE,
    next_due TEXT NOT NULL,
    scheduler_state TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS notes_index_next_due ON notes (next_due);
"""

_SQL_SELECT = 'SELECT id, path, next_due, scheduler_state FROM notes'
_SqlNoteRow = namedtuple('SqlNoteRow', ['id', 'path', 'next_due', 'scheduler_state'])

_SQL_INSERT_NOTE = 'INSERT OR IGNORE INTO notes (path, next_due, scheduler_state) VALUES (?, ?, ?)'

_SQL_UPDATE_NOTE = 'UPDATE notes SET next_due = ?, scheduler_state = ? WHERE path = ?'


def _format_due(value: datetime) -> str:
    # fixed width keeps lexical order equal to chronological order
    return value.isoformat(timespec='microseconds')


class SqliteRepo(NoteRepo):
    """Stores notes in a single table of a SQLite database.

    The table is keyed by a unique path column, with the due date stored as ISO-8601 text and the tagged scheduler
    state stored as JSON. The schema is created the first time a database is opened; the database's
    ``user_version`` records the schema version.

    .. attribute:: conf
       :type: astronote.conf.SqliteRepoConf
    """
    def __init__(self, conf: SqliteRepoConf):
        self.conf = conf
        if not conf.database_path:
            raise ValueError('`database_path` must be set in SqliteRepoConf.')
        self.connection = None
        self._connect()

    def _connect(self):
        path = self.conf.database_path
        try:
            if not path == ':memory:':
                parent = os.path.dirname(path)
                if parent:
                    os.makedirs(parent, exist_ok=True)
            self.connection = sqlite3.connect(path)
        except (OSError, sqlite3.Error) as ex:
            raise StorageError('Failed to open database', path, ex) from ex
        try:
            self._migrate()
        except StorageError:
            self.close()
            raise

    def _migrate(self):
        try:
            version = self.connection.execute('PRAGMA user_version').fetchone()[0]
            if version > SCHEMA_VERSION:
                raise StorageError(f'Database schema version {version} is newer than supported version '
                                   f'{SCHEMA_VERSION}', self.conf.database_path)
            if version < SCHEMA_VERSION:
                logger.debug('Creating schema version %d in %s', SCHEMA_VERSION, self.conf.database_path)
                self.connection.executescript(_SQL_CREATE_SCHEMA)
                self.connection.execute(f'PRAGMA user_version = {SCHEMA_VERSION}')
                self.connection.commit()
        except sqlite3.Error as ex:
            raise StorageError('Failed to create database schema', self.conf.database_path, ex) from ex

    def _execute(self, action: str, path: Optional[str], sql: str, params=()) -> sqlite3.Cursor:
        try:
            cursor = self.connection.execute(sql, params)
            self.connection.commit()
            return cursor
        except sqlite3.Error as ex:
            raise StorageError(f'Failed to {action}', path, ex) from ex

    @staticmethod
    def _note_from_row(row: _SqlNoteRow) -> Note:
        try:
            next_due = datetime.fromisoformat(row.next_due)
            scheduler = json.loads(row.scheduler_state)
        except (TypeError, ValueError) as ex:
            raise SerializationError('Failed to decode stored note', row.path, ex) from ex
        return SerializedNote.from_dict({'path': row.path, 'next_due': next_due, 'scheduler': scheduler},
                                        id=row.id).to_note()

    @staticmethod
    def _encode(note: Note):
        serialized = SerializedNote.from_note(note)
        try:
            return _format_due(serialized.next_due), json.dumps(serialized.scheduler)
        except (TypeError, ValueError) as ex:
            raise SerializationError('Failed to encode note', note.path, ex) from ex

    def create(self, note: Note) -> bool:
        next_due, state = self._encode(note)
        cursor = self._execute('create note', note.path, _SQL_INSERT_NOTE, (note.path, next_due, state))
        if cursor.rowcount == 0:
            logger.debug('Note already exists, not creating: %s', note.path)
            return False
        note.id = cursor.lastrowid
        logger.debug('Created note %s with id %d', note.path, note.id)
        return True

    def update(self, note: Note) -> bool:
        next_due, state = self._encode(note)
        cursor = self._execute('update note', note.path, _SQL_UPDATE_NOTE, (next_due, state, note.path))
        if cursor.rowcount == 0:
            logger.debug('Note does not exist, not updating: %s', note.path)
            return False
        logger.debug('Updated note %s, next due %s', note.path, next_due)
        return True

    def find(self, path: str) -> Note:
        cursor = self._execute('find note', path, f'{_SQL_SELECT} WHERE path = ?', (path,))
        row = cursor.fetchone()
        if not row:
            raise NotFoundError('Note is not tracked', path)
        return self._note_from_row(_SqlNoteRow(*row))

    def find_by_id(self, note_id: int) -> Note:
        """Returns the note with the given row id, or raises :exc:`astronote.errors.NotFoundError`."""
        cursor = self._execute('find note', str(note_id), f'{_SQL_SELECT} WHERE id = ?', (note_id,))
        row = cursor.fetchone()
        if not row:
            raise NotFoundError('No note with id', str(note_id))
        return self._note_from_row(_SqlNoteRow(*row))

    def list_due(self, limit: Optional[int] = None, now: Optional[datetime] = None,
                 ignore_schedule: bool = False) -> List[Note]:
        if now is None:
            now = datetime.now()
        sql = _SQL_SELECT
        params = ()
        if not ignore_schedule:
            sql += ' WHERE next_due <= ?'
            params += (_format_due(now),)
        sql += ' ORDER BY next_due, path LIMIT ?'
        params += (-1 if limit is None else max(limit, 0),)
        cursor = self._execute('list due notes', None, sql, params)
        return [self._note_from_row(_SqlNoteRow(*r)) for r in cursor.fetchall()]

    def delete(self, note: Note) -> None:
        cursor = self._execute('delete note', note.path, 'DELETE FROM notes WHERE path = ?', (note.path,))
        if cursor.rowcount == 0:
            raise NotFoundError('Note is not tracked', note.path)
        logger.debug('Deleted note %s', note.path)

    def close(self):
        if self.connection:
            self.connection.close()
            self.connection = None
