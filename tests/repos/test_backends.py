from datetime import datetime
from astronote.conf import DirectRepoConf, SqliteRepoConf
from astronote.models import Note
from astronote.schedulers.sm2 import SuperMemo2

NOW = datetime(2023, 4, 5, 6, 7, 8)


def test_backends_decode_identical_notes(fs):
    notes = [Note('one.md', NOW, SuperMemo2()),
             Note('a/b/two.md', datetime(2023, 1, 2, 3, 4, 5, 6), SuperMemo2(6, 211, 1.3)),
             Note('three.txt', datetime(2022, 12, 31, 23, 59, 59), SuperMemo2(3, 15, 2.3600000000000003))]
    direct = DirectRepoConf(root_path='/notes', metadata_path='/meta').instantiate()
    with SqliteRepoConf(root_path='/notes', database_path=':memory:').instantiate() as sqlite:
        for note in notes:
            direct.create(note)
            sqlite.create(note)
        for note in notes:
            assert direct.find(note.path) == sqlite.find(note.path) == note
        assert direct.list_due(now=NOW) == sqlite.list_due(now=NOW)
        assert [n.path for n in sqlite.list_due(now=NOW)] == ['three.txt', 'a/b/two.md', 'one.md']
