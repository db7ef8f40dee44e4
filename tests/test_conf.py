import os.path
import pytest
from astronote.conf import AstronoteConf, DirectRepoConf, SqliteRepoConf
from astronote.errors import ConfigError

CONF_PY = """from astronote.conf import *
conf = AstronoteConf(repo_conf=SqliteRepoConf(root_path='/notes', database_path=':memory:'), editor_command='nano')
"""


def test_for_path_no_file(fs):
    fs.create_dir('/notes/sub')
    with pytest.raises(ConfigError, match=r'You need to create a \.astronote\.conf\.py file'):
        AstronoteConf.for_path('/notes/sub')


def test_for_path_walks_up(fs):
    fs.create_file('/notes/.astronote.conf.py', contents=CONF_PY)
    fs.create_dir('/notes/a/b')
    conf = AstronoteConf.for_path('/notes/a/b')
    assert conf == AstronoteConf(SqliteRepoConf(root_path='/notes', database_path=':memory:'), 'nano')


def test_for_path_uses_cwd(fs):
    fs.create_file('/notes/.astronote.conf.py', contents=CONF_PY)
    fs.create_dir('/notes/a')
    fs.cwd = '/notes/a'
    assert AstronoteConf.for_path().editor_command == 'nano'


def test_for_path_falls_back_to_home(fs):
    fs.create_file(os.path.expanduser('~/.astronote.conf.py'), contents=CONF_PY)
    fs.create_dir('/elsewhere')
    assert AstronoteConf.find_path('/elsewhere') == os.path.expanduser('~/.astronote.conf.py')
    assert AstronoteConf.for_path('/elsewhere').editor_command == 'nano'


def test_for_path_defines_file(fs):
    fs.create_file('/notes/.astronote.conf.py', contents="""import os.path
from astronote.conf import *
here = os.path.dirname(__file__)
conf = AstronoteConf(repo_conf=DirectRepoConf(root_path=here, metadata_path=os.path.join(here, '.astronote')))
""")
    conf = AstronoteConf.for_path('/notes')
    assert conf.repo_conf == DirectRepoConf(root_path='/notes', metadata_path='/notes/.astronote')
    assert conf.editor_command == 'vim'


def test_for_path_without_conf_variable(fs):
    fs.create_file('/notes/.astronote.conf.py', contents='config = 3\n')
    with pytest.raises(ConfigError, match='assign an instance of AstronoteConf') as excinfo:
        AstronoteConf.for_path('/notes')
    assert excinfo.value.path == '/notes/.astronote.conf.py'


def test_for_path_broken_script(fs):
    fs.create_file('/notes/.astronote.conf.py', contents='raise RuntimeError("oops")\n')
    with pytest.raises(ConfigError, match='oops'):
        AstronoteConf.for_path('/notes')


def test_for_path_unreadable_file(fs, mocker):
    fs.create_file('/notes/.astronote.conf.py', contents=CONF_PY)
    mocker.patch('astronote.conf.open', side_effect=PermissionError('Permission denied'), create=True)
    with pytest.raises(ConfigError, match='Failed to read config file: Permission denied') as excinfo:
        AstronoteConf.for_path('/notes')
    assert excinfo.value.path == '/notes/.astronote.conf.py'


def test_standardize(fs):
    fs.create_dir('/real/notes')
    fs.create_symlink('/notes', '/real/notes')
    fs.cwd = '/real'
    conf = AstronoteConf(SqliteRepoConf(root_path='/notes', database_path='data/astronote.db')).standardize()
    assert conf.repo_conf == SqliteRepoConf(root_path='/real/notes', database_path='/real/data/astronote.db')
    conf = AstronoteConf(SqliteRepoConf(root_path='/notes', database_path=':memory:')).standardize()
    assert conf.repo_conf.database_path == ':memory:'
    conf = AstronoteConf(DirectRepoConf(root_path='notes', metadata_path='meta')).standardize()
    assert conf.repo_conf == DirectRepoConf(root_path='/real/notes', metadata_path='/real/meta')


def test_with_location():
    assert (SqliteRepoConf(root_path='/notes', database_path='a.db').with_location('b.db')
            == SqliteRepoConf(root_path='/notes', database_path='b.db'))
    assert (DirectRepoConf(root_path='/notes', metadata_path='/a').with_location('/b')
            == DirectRepoConf(root_path='/notes', metadata_path='/b'))
