"""
Tests for utils/local_cache.py: files under tmp_path, nothing else.
"""
import os

from utils.local_cache import LocalCache


def _write(cache, key, text):
    os.makedirs(cache.directory, exist_ok=True)
    with open(cache._path(key), 'w', encoding='utf-8') as f:
        f.write(text)


class TestLoad:
    def test_missing_key_returns_default(self, tmp_path):
        assert LocalCache(str(tmp_path)).load('decks', []) == []

    def test_default_is_a_fresh_copy(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        default = {'studySessions': []}
        loaded = cache.load('stats', default)
        loaded['studySessions'].append('x')
        assert default == {'studySessions': []}

    def test_corrupt_json_returns_default(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        _write(cache, 'decks', '[{"name": ')
        assert cache.load('decks', []) == []

    def test_wrong_type_returns_default(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        _write(cache, 'folders', '{"not": "a list"}')
        assert cache.load('folders', []) == []

    def test_no_default_accepts_any_type(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        _write(cache, 'anything', '42')
        assert cache.load('anything') == 42


class TestSave:
    def test_save_then_load(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        decks = [{'name': 'Cells', 'cards': [{'front': 'Q', 'back': 'Ä'}]}]
        assert cache.save('decks', decks) is True
        assert LocalCache(str(tmp_path)).load('decks', []) == decks

    def test_save_replaces_whole_value(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        cache.save('settings', {'a': 1, 'b': 2})
        cache.save('settings', {'c': 3})
        assert cache.load('settings', {}) == {'c': 3}

    def test_unserializable_value_fails_and_keeps_old(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        cache.save('decks', [1])
        assert cache.save('decks', [object()]) is False
        assert cache.load('decks', []) == [1]

    def test_write_failure_returns_false(self, tmp_path):
        blocker = tmp_path / 'blocked'
        blocker.write_text('i am a file')
        cache = LocalCache(str(blocker))
        assert cache.save('decks', []) is False

    def test_no_temp_files_left_behind(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        cache.save('decks', [1, 2, 3])
        assert os.listdir(cache.directory) == ['decks.json']


class TestOrigins:
    def test_origins_are_isolated(self, tmp_path):
        a = LocalCache(str(tmp_path), 'https://a.example')
        b = LocalCache(str(tmp_path), 'https://b.example')
        a.save('decks', ['a'])
        assert b.load('decks', []) == []
        assert a.directory != b.directory

    def test_remove(self, tmp_path):
        cache = LocalCache(str(tmp_path))
        cache.save('muted', True)
        assert cache.remove('muted') is True
        assert cache.load('muted', False) is False
        assert cache.remove('muted') is True
