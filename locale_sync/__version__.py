"""Version information for locale-sync."""

__version__ = "0.4.0"
__author__ = "locale-sync contributors"
__description__ = "Keep JSON locale files in sync with a base language using LLM translation"

# Changelog:
# 0.4.0 - Explicit configuration
#       - .locale-sync.yml config file (locales, translation, history, sync)
#       - Environment overrides (AI_PROVIDER, AI_MODEL, AI_API_KEY) via .env
#       - Config validation before every run
#       - OpenAI and Anthropic backends on the official SDKs
#
# 0.3.0 - Batched translation
#       - Large change sets are sent in batches of 25 keys
#       - A failed batch no longer drops the whole language
#       - Backend replies wrapped in ```json fences are accepted
#
# 0.2.0 - Deleted key handling
#       - Keys removed from the base file are removed from every locale
#       - Empty parent objects are pruned after removal
#       - --dry-run, --backup and JSON/Markdown reports
#
# 0.1.0 - Initial release
#       - Changed and missing key detection against HEAD^
#       - Nested key flattening and re-nesting
#       - --test mode for running without a backend
