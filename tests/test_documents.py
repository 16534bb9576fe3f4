"""Tests for the JSON locale store."""

import json
import tempfile
from pathlib import Path

import pytest

from locale_sync.core.documents import LocaleStore
from locale_sync.core.errors import LoadError


class TestLocaleStoreLoad:
    """Test cases for LocaleStore.load."""

    def test_loads_valid_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'en.json'
            path.write_text('{"b": "2", "a": {"c": "3"}}', encoding='utf-8')

            data = LocaleStore(Path(tmpdir)).load(path)

            assert data == {'b': '2', 'a': {'c': '3'}}
            assert list(data) == ['b', 'a']

    def test_raises_on_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'en.json'
            path.write_text('{"a": ', encoding='utf-8')

            with pytest.raises(LoadError) as exc_info:
                LocaleStore(Path(tmpdir)).load(path)

            assert exc_info.value.path == path
            assert 'invalid JSON' in str(exc_info.value)

    def test_raises_on_missing_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(LoadError):
                LocaleStore(Path(tmpdir)).load(Path(tmpdir) / 'nope.json')

    def test_raises_on_non_object(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'en.json'
            path.write_text('["a", "b"]', encoding='utf-8')

            with pytest.raises(LoadError) as exc_info:
                LocaleStore(Path(tmpdir)).load(path)

            assert 'expected a JSON object' in str(exc_info.value)


class TestLocaleStoreSave:
    """Test cases for LocaleStore.save."""

    def test_writes_json_with_two_space_indent(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'fr.json'
            LocaleStore(Path(tmpdir)).save(path, {'z': 'Zut', 'a': {'b': 'Bonjour'}})

            content = path.read_text(encoding='utf-8')
            assert content == '{\n  "z": "Zut",\n  "a": {\n    "b": "Bonjour"\n  }\n}\n'

    def test_keeps_non_ascii_characters(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'tr.json'
            LocaleStore(Path(tmpdir)).save(path, {'world': 'Dünya'})

            assert 'Dünya' in path.read_text(encoding='utf-8')

    def test_overwrites_and_leaves_no_temp_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = LocaleStore(Path(tmpdir))
            path = Path(tmpdir) / 'de.json'
            path.write_text('{"old": "x"}', encoding='utf-8')

            store.save(path, {'new': 'y'})

            assert json.loads(path.read_text(encoding='utf-8')) == {'new': 'y'}
            assert [p.name for p in Path(tmpdir).iterdir()] == ['de.json']

    def test_save_then_load(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = LocaleStore(Path(tmpdir))
            path = store.path_for('es.json')
            document = {'a': {'b': 'c'}, 'n': 1, 'l': ['x']}

            store.save(path, document)

            assert store.load(path) == document


class TestLocaleStoreDiscover:
    """Test cases for LocaleStore.discover."""

    def test_finds_json_files_except_base(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            for name in ['fr.json', 'en.json', 'de.json', 'notes.txt']:
                (Path(tmpdir) / name).write_text('{}', encoding='utf-8')
            (Path(tmpdir) / 'nested').mkdir()
            (Path(tmpdir) / 'nested' / 'it.json').write_text('{}', encoding='utf-8')

            found = LocaleStore(Path(tmpdir)).discover(exclude='en.json')

            assert list(found) == ['de', 'fr']
            assert found['fr'] == Path(tmpdir) / 'fr.json'

    def test_missing_directory(self):
        assert LocaleStore(Path('/nonexistent/locales')).discover() == {}
