from __future__ import annotations
from dataclasses import dataclass, replace
import os
import os.path
from typing import Optional

from astronote.errors import ConfigError
from astronote.paths import find_config

CONFIG_FILENAME = '.astronote.conf.py'


@dataclass
class RepoConf:
    """Base class for repo config. Use a subclass such as :class:`SqliteRepoConf`."""

    root_path: str
    """The folder containing the notes you want to review.

    Note identities are paths relative to this folder, and only files inside it can be added.
    """

    def instantiate(self):
        raise NotImplementedError("Please use a subclass like SqliteRepoConf instead!")

    def with_location(self, path: str) -> RepoConf:
        """Returns a copy of this config that stores notes at the given location."""
        raise NotImplementedError()

    def standardize(self):
        return replace(
            self,
            root_path=os.path.realpath(self.root_path)
        )


@dataclass
class DirectRepoConf(RepoConf):
    """Configures astronote to store notes as individual metadata files, via :class:`astronote.repos.DirectRepo`."""

    metadata_path: str = None
    """Required. The folder under which metadata files are stored.

    It will be created if it does not exist. Each note gets a YAML file at the same relative path as the note
    itself, plus a ``.metadata`` suffix."""

    def instantiate(self):
        from astronote.repos.direct import DirectRepo
        return DirectRepo(self.standardize())

    def with_location(self, path: str) -> DirectRepoConf:
        return replace(self, metadata_path=path)

    def standardize(self):
        conf = super().standardize()
        if conf.metadata_path:
            conf.metadata_path = os.path.abspath(os.path.expanduser(conf.metadata_path))
        return conf


@dataclass
class SqliteRepoConf(RepoConf):
    """Configures astronote to store notes in a SQLite database, via :class:`astronote.repos.SqliteRepo`."""

    database_path: str = None
    """Required. Path where the SQLite database file should be stored.

    The file will be created if it does not exist. Use ``':memory:'`` for a temporary in-memory database."""

    def instantiate(self):
        from astronote.repos.sqlite import SqliteRepo
        return SqliteRepo(self.standardize())

    def with_location(self, path: str) -> SqliteRepoConf:
        return replace(self, database_path=path)

    def standardize(self):
        conf = super().standardize()
        if conf.database_path and not conf.database_path == ':memory:':
            conf.database_path = os.path.abspath(os.path.expanduser(conf.database_path))
        return conf


@dataclass
class AstronoteConf:
    repo_conf: RepoConf
    """Configures where notes are found and where their schedules are stored."""

    editor_command: str = 'vim'
    """The command used to open notes during review. It may include arguments, e.g. ``"code --wait"``.

    The ``review`` command offers this as the default, and you can type a different command at the prompt.
    """

    @classmethod
    def find_path(cls, cwd: Optional[str] = None) -> Optional[str]:
        """Returns the config file that applies to the given directory.

        That is the nearest ``.astronote.conf.py`` in the directory or one of its ancestors, or else
        ``~/.astronote.conf.py``. Returns None if neither exists.
        """
        found = find_config(cwd if cwd is not None else os.getcwd(), CONFIG_FILENAME)
        if found:
            return found
        home = os.path.expanduser(os.path.join('~', CONFIG_FILENAME))
        return home if os.path.isfile(home) else None

    @classmethod
    def for_path(cls, cwd: Optional[str] = None) -> AstronoteConf:
        """Loads the config file that applies to the given directory (by default, the working directory).

        The file is a Python script that must assign an instance of :class:`AstronoteConf` to the variable
        ``conf``. The script's ``__file__`` is set, so relative paths can be computed from the file's location:

        .. code-block:: python

           import os.path
           from astronote.conf import *
           here = os.path.dirname(__file__)
           conf = AstronoteConf(
               repo_conf=SqliteRepoConf(
                   root_path=here,
                   database_path=os.path.join(here, '.astronote.db')
               ),
               editor_command='nano'
           )

        Raises :exc:`astronote.errors.ConfigError` if no file is found or it does not define the configuration.
        """
        path = cls.find_path(cwd)
        if not path:
            raise ConfigError(f'You need to create a {CONFIG_FILENAME} file in your notes directory or your home '
                              'directory')
        try:
            with open(path, 'r') as file:
                conf_script = file.read()
        except OSError as ex:
            raise ConfigError(f'Failed to read config file: {ex}', path, ex) from ex
        context = {'__file__': path}
        try:
            exec(compile(conf_script, path, 'exec'), context)
        except Exception as ex:
            raise ConfigError(f'Failed to run config file: {ex}', path, ex) from ex
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise ConfigError('You need to assign an instance of AstronoteConf to the variable `conf` '
                              'in your config file', path)
        return context['conf']

    def standardize(self):
        return replace(
            self,
            repo_conf=self.repo_conf.standardize()
        )

    def instantiate(self):
        from astronote.api import Astronote
        return Astronote(self.standardize())
