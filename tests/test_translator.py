"""Tests for the batch translator."""

import json
from unittest.mock import MagicMock, patch

import pytest

from locale_sync.core.errors import BackendError
from locale_sync.features.translator import (
    BatchTranslator,
    TEST_PREFIX,
    build_system_prompt,
    chunk_key_map,
    dummy_translations,
    parse_translation_response,
)
from locale_sync.utils.config import TranslationConfig
from locale_sync.utils.logging import reset_logger


def make_keys(count):
    """Build an ordered key map with ``count`` entries."""
    return {f"key{i:02d}": f"Value {i}" for i in range(count)}


class EchoBackend:
    """Backend that 'translates' by upper-casing every value."""

    def __init__(self, fail_on_calls=()):
        self.calls = []
        self.fail_on_calls = set(fail_on_calls)

    def complete(self, system_prompt, user_payload):
        self.calls.append((system_prompt, user_payload))
        if len(self.calls) in self.fail_on_calls:
            raise BackendError('rate limited', 'echo')
        data = json.loads(user_payload)
        return json.dumps({k: v.upper() for k, v in data.items()})


@pytest.fixture(autouse=True)
def fresh_logger():
    reset_logger()
    yield
    reset_logger()


class TestHelpers:
    """Test cases for module-level helpers."""

    def test_dummy_translations(self):
        assert dummy_translations({'Hello': 'Hello'}) == {'Hello': '[TEST] Hello'}

    def test_dummy_translations_non_string_values(self):
        """Non-string leaves are written the way JSON spells them."""
        result = dummy_translations({'on': True, 'none': None, 'n': 3, 'tags': ['a', 'é']})
        assert result == {
            'on': '[TEST] true',
            'none': '[TEST] null',
            'n': '[TEST] 3',
            'tags': '[TEST] ["a", "é"]',
        }

    def test_chunk_key_map_preserves_order(self):
        chunks = list(chunk_key_map(make_keys(7), 3))
        assert [len(c) for c in chunks] == [3, 3, 1]
        assert list(chunks[0]) == ['key00', 'key01', 'key02']
        assert list(chunks[2]) == ['key06']

    def test_chunk_key_map_rejects_zero(self):
        with pytest.raises(ValueError):
            list(chunk_key_map(make_keys(3), 0))

    def test_system_prompt_mentions_languages_and_placeholders(self):
        prompt = build_system_prompt('en', 'fr')
        assert 'English (en)' in prompt
        assert 'French (fr)' in prompt
        assert '{{name}}' in prompt
        assert 'valid JSON' in prompt

    def test_system_prompt_unknown_language_code(self):
        assert 'into xx-YY' in build_system_prompt('en', 'xx-YY')

    def test_parse_plain_json(self):
        assert parse_translation_response('{"a": "b"}') == {'a': 'b'}

    def test_parse_code_fenced_json(self):
        content = '```json\n{"a": "b"}\n```'
        assert parse_translation_response(content) == {'a': 'b'}

    def test_parse_invalid_json_raises_backend_error(self):
        with pytest.raises(BackendError):
            parse_translation_response('Sure! Here is the translation: {"a": "b"}')

    def test_parse_non_object_raises_backend_error(self):
        with pytest.raises(BackendError):
            parse_translation_response('["a", "b"]')


class TestTranslateBatch:
    """Test cases for BatchTranslator.translate_batch."""

    def test_returns_dummy_translations_in_test_mode(self):
        translator = BatchTranslator(TranslationConfig(test_mode=True))
        assert translator.backend is None

        for lang in ['fr', 'de', 'ja']:
            result = translator.translate_batch({'Hello': 'Hello'}, lang, 'prompt')
            assert result == {'Hello': '[TEST] Hello'}

    def test_test_mode_never_calls_backend(self):
        backend = MagicMock()
        translator = BatchTranslator(TranslationConfig(test_mode=True), backend=backend)

        translator.translate_batch({'a': 'b'}, 'fr', 'prompt')

        backend.complete.assert_not_called()

    def test_sends_prompt_and_json_payload(self):
        backend = EchoBackend()
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        result = translator.translate_batch({'greet': 'Grüß {{name}}'}, 'en', 'SYSTEM')

        assert result == {'greet': 'GRÜSS {{NAME}}'}
        system_prompt, payload = backend.calls[0]
        assert system_prompt == 'SYSTEM'
        assert payload == '{"greet": "Grüß {{name}}"}'

    def test_handles_api_errors_gracefully(self, capfd):
        backend = MagicMock()
        backend.complete.side_effect = BackendError('HTTP 500', 'openai')
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.translate_batch({'a': 'b'}, 'fr', 'prompt') is None
        assert 'HTTP 500' in capfd.readouterr().out

    def test_unparseable_response_returns_none(self):
        backend = MagicMock()
        backend.complete.return_value = 'not json at all'
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.translate_batch({'a': 'b'}, 'fr', 'prompt') is None

    def test_drops_unexpected_keys(self, capfd):
        backend = MagicMock()
        backend.complete.return_value = '{"a": "A", "invented": "X"}'
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.translate_batch({'a': 'b'}, 'fr', 'prompt') == {'a': 'A'}
        assert 'invented' in capfd.readouterr().out

    def test_unexpected_backend_exception_returns_none(self, capfd):
        """Any exception from the backend fails only this batch."""
        backend = MagicMock()
        backend.complete.side_effect = RuntimeError('provider SDK blew up')
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.translate_batch({'a': 'b'}, 'fr', 'prompt') is None
        assert 'provider SDK blew up' in capfd.readouterr().out

    def test_undecodable_reply_returns_none(self):
        backend = MagicMock()
        backend.complete.side_effect = UnicodeDecodeError('utf-8', b'\xff\xfe', 0, 1, 'invalid start byte')
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.translate_batch({'a': 'b'}, 'fr', 'prompt') is None

    def test_warns_when_no_requested_key_comes_back(self, capfd):
        backend = MagicMock()
        backend.complete.return_value = '{"other": "X"}'
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.translate_batch({'a': 'b'}, 'fr', 'prompt') == {}
        assert 'none of the 1 requested keys' in capfd.readouterr().out

    def test_creates_backend_from_config(self):
        config = TranslationConfig(provider='anthropic', api_key='sk-test')
        translator = BatchTranslator(config)
        assert translator.backend.name == 'anthropic'

    def test_missing_api_key_raises(self):
        with pytest.raises(BackendError):
            BatchTranslator(TranslationConfig(provider='openai', api_key=None))


class TestFetchTranslations:
    """Test cases for BatchTranslator.fetch_translations."""

    def test_handles_small_batches_directly(self):
        translator = BatchTranslator(TranslationConfig(batch_size=25), backend=EchoBackend())

        with patch.object(translator, 'translate_batch', wraps=translator.translate_batch) as spy:
            result = translator.fetch_translations(make_keys(25), 'fr')

        assert spy.call_count == 1
        assert len(result) == 25

    def test_processes_large_content_in_batches(self):
        backend = EchoBackend()
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        result = translator.fetch_translations(make_keys(30), 'fr', batch_size=10)

        assert len(backend.calls) == 3
        assert list(result) == list(make_keys(30))
        assert result['key29'] == 'VALUE 29'

    def test_default_batch_size_from_config(self):
        backend = EchoBackend()
        translator = BatchTranslator(TranslationConfig(batch_size=4), backend=backend)

        translator.fetch_translations(make_keys(9), 'fr')

        assert len(backend.calls) == 3

    def test_partial_batch_success(self):
        """A failed middle batch drops only its own keys."""
        backend = EchoBackend(fail_on_calls={2})
        translator = BatchTranslator(TranslationConfig(), backend=backend)
        keys = make_keys(30)

        result = translator.fetch_translations(keys, 'fr', batch_size=10)

        assert result is not None
        assert len(backend.calls) == 3
        assert set(result) == set(list(keys)[:10] + list(keys)[20:])

    def test_total_batch_failure_returns_none(self):
        backend = EchoBackend(fail_on_calls={1, 2, 3})
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.fetch_translations(make_keys(30), 'fr', batch_size=10) is None
        assert len(backend.calls) == 3

    def test_unexpected_exception_keeps_other_batches(self):
        class FlakyBackend(EchoBackend):
            def complete(self, system_prompt, user_payload):
                if len(self.calls) == 1:
                    self.calls.append((system_prompt, user_payload))
                    raise RuntimeError('provider SDK blew up')
                return super().complete(system_prompt, user_payload)

        backend = FlakyBackend()
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        result = translator.fetch_translations(make_keys(30), 'fr', batch_size=10)

        assert len(backend.calls) == 3
        assert len(result) == 20
        assert 'key15' not in result

    def test_unexpected_exception_in_every_batch_returns_none(self):
        backend = MagicMock()
        backend.complete.side_effect = RuntimeError('provider SDK blew up')
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.fetch_translations(make_keys(30), 'fr', batch_size=10) is None
        assert backend.complete.call_count == 3

    def test_single_batch_failure_returns_none(self):
        backend = EchoBackend(fail_on_calls={1})
        translator = BatchTranslator(TranslationConfig(), backend=backend)

        assert translator.fetch_translations(make_keys(3), 'fr') is None

    def test_returns_dummy_translations_in_test_mode(self):
        translator = BatchTranslator(TranslationConfig(test_mode=True))

        result = translator.fetch_translations(make_keys(60), 'de', 'en', batch_size=25)

        assert len(result) == 60
        assert all(value.startswith(TEST_PREFIX) for value in result.values())

    def test_prompt_uses_base_language(self):
        backend = EchoBackend()
        translator = BatchTranslator(TranslationConfig(), source_lang='tr', backend=backend)

        translator.fetch_translations({'a': 'b'}, 'de')
        assert 'Turkish (tr)' in backend.calls[0][0]

        translator.fetch_translations({'a': 'b'}, 'de', base_lang='fr')
        assert 'French (fr)' in backend.calls[1][0]

    def test_logs_batch_progress(self, capfd):
        translator = BatchTranslator(TranslationConfig(test_mode=True))

        translator.fetch_translations(make_keys(5), 'fr', batch_size=2)

        out = capfd.readouterr().out
        assert 'Translating batch 1 of 3 (2 keys)' in out
        assert 'Translating batch 3 of 3 (1 keys)' in out

    def test_invalid_batch_size(self):
        translator = BatchTranslator(TranslationConfig(test_mode=True))
        with pytest.raises(ValueError):
            translator.fetch_translations(make_keys(3), 'fr', batch_size=0)
