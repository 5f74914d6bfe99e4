"""
Constants for AI traffic classification, time windows and table names.
"""

from datetime import datetime, timedelta, timezone

# =============================================================================
# Classification Rule Tables
# =============================================================================

# Bump whenever a table below changes so stored events can be traced back
# to the rule set that labelled them.
RULES_VERSION = "2025.06"

# Referrer host/path patterns of AI assistants, in priority order.
# Matching is case-insensitive substring matching on "host/path".
AI_REFERRER_RULES = [
    # OpenAI
    {"pattern": "chatgpt.com", "source": "chatgpt"},
    {"pattern": "chat.openai.com", "source": "chatgpt"},
    # Perplexity
    {"pattern": "perplexity.ai", "source": "perplexity"},
    # Microsoft - bing.com is a search engine, only the chat surface counts
    {"pattern": "copilot.microsoft.com", "source": "copilot"},
    {"pattern": "bing.com/chat", "source": "copilot"},
    # Anthropic
    {"pattern": "claude.ai", "source": "claude"},
    # Google
    {"pattern": "gemini.google.com", "source": "gemini"},
    {"pattern": "bard.google.com", "source": "gemini"},
    # Others
    {"pattern": "chat.deepseek.com", "source": "deepseek"},
    {"pattern": "chat.mistral.ai", "source": "mistral"},
    {"pattern": "poe.com", "source": "poe"},
    {"pattern": "phind.com", "source": "phind"},
    {"pattern": "meta.ai", "source": "meta-ai"},
    {"pattern": "grok.com", "source": "grok"},
]

# Search engines whose AI answer surfaces are identified by query markers.
# "value" of None means the parameter only needs to be present.
SEARCH_AI_OVERVIEW_MARKERS = [
    # Google AI Mode
    {"pattern": "google.", "param": "udm", "value": "50"},
    # Bing conversational answers
    {"pattern": "bing.com", "param": "showconv", "value": "1"},
]

# Maps crawler user-agent signatures to their label, provider and category
AI_CRAWLER_RULES = {
    # OpenAI
    "GPTBot": {"label": "gptbot", "provider": "OpenAI", "category": "training"},
    "ChatGPT-User": {
        "label": "chatgpt-user",
        "provider": "OpenAI",
        "category": "user_request",
    },
    "OAI-SearchBot": {
        "label": "oai-searchbot",
        "provider": "OpenAI",
        "category": "user_request",
    },
    # Anthropic
    "ClaudeBot": {"label": "claudebot", "provider": "Anthropic", "category": "training"},
    "Claude-User": {
        "label": "claude-user",
        "provider": "Anthropic",
        "category": "user_request",
    },
    "Claude-SearchBot": {
        "label": "claude-searchbot",
        "provider": "Anthropic",
        "category": "user_request",
    },
    "anthropic-ai": {
        "label": "anthropic-ai",
        "provider": "Anthropic",
        "category": "training",
    },
    # Perplexity
    "PerplexityBot": {
        "label": "perplexitybot",
        "provider": "Perplexity",
        "category": "user_request",
    },
    "Perplexity-User": {
        "label": "perplexity-user",
        "provider": "Perplexity",
        "category": "user_request",
    },
    # Google
    "Google-Extended": {
        "label": "google-extended",
        "provider": "Google",
        "category": "training",
    },
    # Apple
    "Applebot-Extended": {
        "label": "applebot-extended",
        "provider": "Apple",
        "category": "training",
    },
    # Others
    "CCBot": {"label": "ccbot", "provider": "Common Crawl", "category": "training"},
    "Bytespider": {"label": "bytespider", "provider": "ByteDance", "category": "training"},
    "meta-externalagent": {
        "label": "meta-externalagent",
        "provider": "Meta",
        "category": "training",
    },
    "Amazonbot": {"label": "amazonbot", "provider": "Amazon", "category": "training"},
    "cohere-ai": {"label": "cohere-ai", "provider": "Cohere", "category": "training"},
    "YouBot": {"label": "youbot", "provider": "You.com", "category": "user_request"},
}

# Platform names recognised in source-attribution query parameters.
# Keys are substrings looked for in the value, values the canonical source.
AI_PLATFORM_NAMES = {
    "chatgpt": "chatgpt",
    "openai": "chatgpt",
    "perplexity": "perplexity",
    "copilot": "copilot",
    "claude": "claude",
    "bard": "gemini",
    "gemini": "gemini",
    "deepseek": "deepseek",
    "mistral": "mistral",
    "phind": "phind",
    "grok": "grok",
}

# Query parameters that may carry a source override, checked in order
SOURCE_ATTRIBUTION_PARAMS = ["utm_source", "ref", "source"]

# Host fragments that make an otherwise unknown referrer look AI-like.
# Entries starting with "." must match the end of the host (a TLD).
AI_HINT_PATTERNS = [".ai", "gpt", "llm", "chatbot", "copilot"]

# =============================================================================
# Sources and Visit Types
# =============================================================================

SOURCE_DIRECT = "direct"
SOURCE_UNKNOWN = "unknown"
SOURCE_UNKNOWN_AI = "unknown-ai"
SOURCE_SEARCH_AI_OVERVIEW = "search-ai-overview"

VISIT_TYPE_REFERRAL = "referral"
VISIT_TYPE_CRAWLER = "crawler"
VISIT_TYPE_DIRECT = "direct"
VISIT_TYPE_STANDARD = "standard"

VISIT_TYPES = frozenset(
    [VISIT_TYPE_REFERRAL, VISIT_TYPE_CRAWLER, VISIT_TYPE_DIRECT, VISIT_TYPE_STANDARD]
)

# Source stored when the ingestion payload carries none
DEFAULT_INGEST_SOURCE = SOURCE_UNKNOWN_AI
DEFAULT_INGEST_VISIT_TYPE = VISIT_TYPE_REFERRAL

# =============================================================================
# Time Windows
# =============================================================================

# "all" has no lookback and starts at the epoch floor
TIME_WINDOWS = {
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "all": None,
}

DEFAULT_TIME_WINDOW = "7d"

EPOCH_FLOOR = datetime(1970, 1, 1, tzinfo=timezone.utc)

GRANULARITY_HOUR = "hour"
GRANULARITY_DAY = "day"
GRANULARITY_MONTH = "month"

WINDOW_GRANULARITY = {
    "24h": GRANULARITY_HOUR,
    "7d": GRANULARITY_DAY,
    "30d": GRANULARITY_DAY,
    "90d": GRANULARITY_MONTH,
    "all": GRANULARITY_MONTH,
}

TOP_PAGES_LIMIT = 10
RECENT_VISITS_LIMIT = 10

# =============================================================================
# Storage
# =============================================================================

# SQLite table names
TABLE_USERS = "users"
TABLE_WEBSITES = "websites"
TABLE_AI_TRAFFIC = "ai_traffic"

DEFAULT_SQLITE_DB_PATH = "data/ai-traffic.db"
