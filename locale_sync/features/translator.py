"""Batched translation of flat key maps."""

import json
from typing import Any, Dict, Iterator, Optional

from ..backends import BaseBackend, create_backend
from ..core.errors import BackendError
from ..core.keys import FlatKeyMap
from ..utils.config import TranslationConfig
from ..utils.logging import get_logger

TEST_PREFIX = '[TEST] '

# Dil kodları ve isimleri
LANGUAGE_NAMES = {
    'en': 'English',
    'tr': 'Turkish',
    'de': 'German',
    'fr': 'French',
    'es': 'Spanish',
    'it': 'Italian',
    'pt': 'Portuguese',
    'pt-BR': 'Brazilian Portuguese',
    'ru': 'Russian',
    'ja': 'Japanese',
    'ko': 'Korean',
    'zh': 'Chinese',
    'zh-Hans': 'Simplified Chinese',
    'zh-Hant': 'Traditional Chinese',
    'ar': 'Arabic',
    'nl': 'Dutch',
    'pl': 'Polish',
    'sv': 'Swedish',
    'da': 'Danish',
    'no': 'Norwegian',
    'fi': 'Finnish',
    'cs': 'Czech',
    'hu': 'Hungarian',
    'ro': 'Romanian',
    'uk': 'Ukrainian',
    'he': 'Hebrew',
    'hi': 'Hindi',
    'th': 'Thai',
    'vi': 'Vietnamese',
    'id': 'Indonesian',
    'ms': 'Malay',
}

SYSTEM_PROMPT = """You are a translator API that only responds with valid JSON. Translate the following {source} phrases into {target}.

IMPORTANT REQUIREMENTS:
1. Respond with ONLY a valid JSON object.
2. The JSON object must have exactly the same keys as the input; translate the values only.
3. Do not add any comments, explanations, or text outside the JSON object.
4. If a string contains text enclosed in double curly braces like {{{{name}}}}, do not translate that portion.
5. Ensure all quotes are properly escaped in the JSON.

Example input:
{{"greeting": "Hello, {{{{name}}}}", "welcome": "Welcome"}}

Example valid response (for French):
{{"greeting": "Bonjour, {{{{name}}}}", "welcome": "Bienvenue"}}

NO COMMENTS OR TEXT BEFORE OR AFTER THE JSON OBJECT ARE ALLOWED."""


def get_language_name(lang_code: str) -> str:
    """Dil kodundan prompt'ta kullanılacak dil ismini al."""
    name = LANGUAGE_NAMES.get(lang_code)
    return f"{name} ({lang_code})" if name else lang_code


def build_system_prompt(source_lang: str, target_lang: str) -> str:
    """
    Çeviri backend'i için sistem prompt'unu oluştur.

    Args:
        source_lang: Kaynak dil kodu
        target_lang: Hedef dil kodu

    Returns:
        Sistem prompt'u
    """
    return SYSTEM_PROMPT.format(
        source=get_language_name(source_lang),
        target=get_language_name(target_lang),
    )


def dummy_translations(key_map: FlatKeyMap) -> FlatKeyMap:
    """
    Test modu çevirisi: her değerin başına sabit bir önek ekle.

    String olmayan değerler JSON yazımıyla eklenir (true, null, ["a", "b"]).
    """
    result = {}
    for key, value in key_map.items():
        text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        result[key] = f"{TEST_PREFIX}{text}"
    return result


def chunk_key_map(key_map: FlatKeyMap, size: int) -> Iterator[FlatKeyMap]:
    """
    Key map'i sırayı koruyarak en fazla ``size`` elemanlı parçalara böl.

    Raises:
        ValueError: ``size`` 1'den küçükse
    """
    if size < 1:
        raise ValueError(f"batch size must be at least 1, got {size}")

    items = list(key_map.items())
    for start in range(0, len(items), size):
        yield dict(items[start:start + size])


def parse_translation_response(content: str) -> Dict[str, Any]:
    """
    Backend cevabını JSON nesnesi olarak çözümle.

    Cevap bir Markdown kod bloğu (```json ... ```) içindeyse blok açılır.

    Raises:
        BackendError: Cevap geçerli bir JSON nesnesi değilse
    """
    text = content.strip()

    if text.startswith('```'):
        lines = text.split('\n')
        # ilk satır açılış işareti, son satır kapanış işareti
        body = lines[1:-1] if lines[-1].strip().startswith('```') else lines[1:]
        text = '\n'.join(body).strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise BackendError(f"Response is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise BackendError(f"Invalid translation response format: expected object, got {type(parsed).__name__}")

    return parsed


class BatchTranslator:
    """
    Toplu çeviri servisi.

    Düz (flat) key map'leri sabit boyutlu parçalar halinde çeviri
    backend'ine gönderir ve sonuçları birleştirir. Bir parçanın başarısız
    olması diğerlerini durdurmaz; hiçbir parça başarılı olmazsa sonuç None'dır.
    """

    def __init__(
        self,
        config: TranslationConfig,
        source_lang: str = 'en',
        backend: Optional[BaseBackend] = None
    ):
        """
        Çeviri servisini başlat.

        Args:
            config: Çeviri yapılandırması (provider, model, batch boyutu, test modu)
            source_lang: Kaynak dil kodu
            backend: Kullanılacak backend (varsayılan: config'e göre oluşturulur)

        Raises:
            BackendError: Test modu kapalıyken backend oluşturulamazsa
        """
        self.config = config
        self.source_lang = source_lang

        if backend is None and not config.test_mode:
            backend = create_backend(config)
        self.backend = backend

    @property
    def test_mode(self) -> bool:
        return self.config.test_mode

    def translate_batch(
        self,
        key_map: FlatKeyMap,
        target_lang: str,
        system_prompt: str
    ) -> Optional[FlatKeyMap]:
        """
        Tek bir parçayı çevir.

        Args:
            key_map: Çevrilecek {key: değer} sözlüğü
            target_lang: Hedef dil kodu
            system_prompt: Backend'e gönderilecek sistem prompt'u

        Returns:
            {key: çeviri} sözlüğü veya None (hata durumunda)
        """
        if self.test_mode:
            return dummy_translations(key_map)

        log = get_logger()
        payload = json.dumps(key_map, ensure_ascii=False)

        try:
            content = self.backend.complete(system_prompt, payload)
            parsed = parse_translation_response(content)
        except BackendError as e:
            log.error(f"Error in translation batch ({target_lang}): {e}")
            return None
        except Exception as e:
            log.error(f"Unexpected error in translation batch ({target_lang}): {type(e).__name__}: {e}")
            return None

        unexpected = [key for key in parsed if key not in key_map]
        if unexpected:
            log.warning(
                f"Ignoring {len(unexpected)} unexpected keys from backend ({target_lang}): "
                f"{', '.join(unexpected[:5])}"
            )

        translations = {key: value for key, value in parsed.items() if key in key_map}
        if key_map and not translations:
            log.warning(f"Backend returned none of the {len(key_map)} requested keys ({target_lang})")

        return translations

    def fetch_translations(
        self,
        key_map: FlatKeyMap,
        target_lang: str,
        base_lang: Optional[str] = None,
        batch_size: Optional[int] = None
    ) -> Optional[FlatKeyMap]:
        """
        Key map'i gerekirse parçalara bölerek çevir.

        Args:
            key_map: Çevrilecek {key: değer} sözlüğü
            target_lang: Hedef dil kodu
            base_lang: Kaynak dil kodu (varsayılan: self.source_lang)
            batch_size: Parça boyutu (varsayılan: config.batch_size)

        Returns:
            Başarılı parçaların birleşimi; hiçbir parça başarılı olmazsa None
        """
        base_lang = base_lang or self.source_lang
        if batch_size is None:
            batch_size = self.config.batch_size
        if batch_size < 1:
            raise ValueError(f"batch size must be at least 1, got {batch_size}")

        system_prompt = build_system_prompt(base_lang, target_lang)

        total_keys = len(key_map)
        if total_keys <= batch_size:
            return self.translate_batch(key_map, target_lang, system_prompt)

        log = get_logger()
        total_batches = -(-total_keys // batch_size)
        results: FlatKeyMap = {}

        for index, batch in enumerate(chunk_key_map(key_map, batch_size), start=1):
            log.info(f"Translating batch {index} of {total_batches} ({len(batch)} keys)...")

            batch_results = self.translate_batch(batch, target_lang, system_prompt)

            if batch_results:
                results.update(batch_results)
            elif batch_results is None:
                log.warning(f"Batch {index} of {total_batches} failed, skipping {len(batch)} keys")

        return results or None
