"""
Unit tests for the traffic classifier.

Tests referrer, search AI-overview, crawler, attribution parameter and
fallback classification in priority order.
"""

import pytest

from ai_traffic_analytics.classifier import (
    classify_crawler,
    classify_visit,
    classify_visit_dict,
    get_crawler_labels_by_category,
    get_crawler_labels_by_provider,
    is_ai_crawler,
    match_platform_name,
)
from ai_traffic_analytics.classifier.engine import (
    RULE_AI_HINT,
    RULE_ATTRIBUTION_PARAM,
    RULE_CRAWLER,
    RULE_NO_REFERRER,
    RULE_REFERRER,
    RULE_SEARCH_AI_OVERVIEW,
    RULE_UNMATCHED_REFERRER,
)

BROWSER_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/124.0 Safari/537.36"
GPTBOT_UA = "Mozilla/5.0 AppleWebKit/537.36 (KHTML, like Gecko; compatible; GPTBot/1.0; +https://openai.com/gptbot)"


class TestReferrerRules:
    """Tests for AI assistant referrer matching."""

    def test_chat_openai_is_chatgpt_referral(self):
        """chat.openai.com referrer should be a ChatGPT referral."""
        result = classify_visit("https://chat.openai.com/c/abc", BROWSER_UA)

        assert result.source == "chatgpt"
        assert result.visit_type == "referral"
        assert result.rule == RULE_REFERRER

    @pytest.mark.parametrize(
        "referrer,expected",
        [
            ("https://chatgpt.com/", "chatgpt"),
            ("https://www.perplexity.ai/search?q=x", "perplexity"),
            ("https://copilot.microsoft.com/", "copilot"),
            ("https://www.bing.com/chat?q=x", "copilot"),
            ("https://claude.ai/chat/123", "claude"),
            ("https://gemini.google.com/app", "gemini"),
            ("https://bard.google.com/", "gemini"),
        ],
    )
    def test_known_assistants(self, referrer, expected):
        """Each known assistant domain maps to its canonical source."""
        result = classify_visit(referrer, BROWSER_UA)
        assert result.source == expected
        assert result.visit_type == "referral"

    def test_matching_is_case_insensitive(self):
        """Upper-case referrers should still match."""
        result = classify_visit("HTTPS://CHAT.OPENAI.COM/C/ABC", BROWSER_UA)
        assert result.source == "chatgpt"

    def test_referrer_without_scheme(self):
        """A bare host referrer is still parsed."""
        result = classify_visit("claude.ai/chat", BROWSER_UA)
        assert result.source == "claude"

    def test_referrer_wins_over_crawler(self):
        """Referrer rules are evaluated before crawler signatures."""
        result = classify_visit("https://chatgpt.com/", GPTBOT_UA)
        assert result.source == "chatgpt"
        assert result.visit_type == "referral"

    def test_plain_bing_is_not_copilot(self):
        """Bing search without the chat path is ordinary search traffic."""
        result = classify_visit("https://www.bing.com/search?q=x", BROWSER_UA)
        assert result.source == "unknown"
        assert result.visit_type == "standard"


class TestSearchAIOverview:
    """Tests for search engine AI answer markers."""

    def test_google_ai_mode(self):
        """Google with udm=50 is an AI overview referral."""
        result = classify_visit("https://www.google.com/search?q=x&udm=50", BROWSER_UA)

        assert result.source == "search-ai-overview"
        assert result.visit_type == "referral"
        assert result.rule == RULE_SEARCH_AI_OVERVIEW

    def test_google_without_marker(self):
        """Google without the marker is unknown standard traffic."""
        result = classify_visit("https://www.google.com/search?q=x", BROWSER_UA)
        assert result.source == "unknown"

    def test_marker_value_must_match(self):
        """A different udm value is not the AI surface."""
        result = classify_visit("https://www.google.com/search?udm=2", BROWSER_UA)
        assert result.source == "unknown"


class TestCrawlerRules:
    """Tests for AI crawler user-agent matching."""

    def test_empty_referrer_gptbot(self):
        """Empty referrer with GPTBot UA is a gptbot crawler hit."""
        result = classify_visit("", GPTBOT_UA)

        assert result.source == "gptbot"
        assert result.visit_type == "crawler"
        assert result.rule == RULE_CRAWLER

    def test_crawler_signature_case_insensitive(self):
        """Signatures match regardless of case."""
        result = classify_visit(None, "mozilla/5.0 (compatible; claudebot/1.0)")
        assert result.source == "claudebot"

    def test_classify_crawler_details(self):
        """classify_crawler should return provider and category."""
        match = classify_crawler("Mozilla/5.0 (compatible; ChatGPT-User/1.0)")

        assert match is not None
        assert match.label == "chatgpt-user"
        assert match.provider == "OpenAI"
        assert match.category == "user_request"

    def test_classify_crawler_regular_browser(self):
        assert classify_crawler(BROWSER_UA) is None

    def test_classify_crawler_empty(self):
        assert classify_crawler("") is None
        assert classify_crawler(None) is None

    def test_is_ai_crawler(self):
        assert is_ai_crawler(GPTBOT_UA) is True
        assert is_ai_crawler(BROWSER_UA) is False

    def test_labels_by_provider(self):
        """Anthropic crawlers are listed by provider."""
        labels = get_crawler_labels_by_provider("Anthropic")
        assert "claudebot" in labels
        assert "claude-user" in labels
        assert "gptbot" not in labels

    def test_labels_by_category(self):
        """Training crawlers are listed by category."""
        labels = get_crawler_labels_by_category("training")
        assert "gptbot" in labels
        assert "chatgpt-user" not in labels


class TestAttributionParams:
    """Tests for source-attribution query parameters."""

    def test_utm_source_chatgpt(self):
        """utm_source=chatgpt.com is a ChatGPT referral."""
        result = classify_visit("", BROWSER_UA, {"utm_source": "chatgpt.com"})

        assert result.source == "chatgpt"
        assert result.visit_type == "referral"
        assert result.rule == RULE_ATTRIBUTION_PARAM

    def test_platform_names_canonicalized(self):
        """Aliases map to canonical names."""
        assert classify_visit("", BROWSER_UA, {"utm_source": "OpenAI"}).source == "chatgpt"
        assert classify_visit("", BROWSER_UA, {"ref": "bard"}).source == "gemini"

    def test_param_priority(self):
        """utm_source is checked before ref and source."""
        params = {"source": "claude", "utm_source": "perplexity"}
        assert classify_visit("", BROWSER_UA, params).source == "perplexity"

    def test_param_keys_case_insensitive(self):
        result = classify_visit("", BROWSER_UA, {"UTM_SOURCE": "claude"})
        assert result.source == "claude"

    def test_non_ai_utm_is_ignored(self):
        """A newsletter utm_source does not make a visit AI traffic."""
        result = classify_visit("", BROWSER_UA, {"utm_source": "newsletter"})
        assert result.source == "direct"

    def test_crawler_wins_over_param(self):
        result = classify_visit("", GPTBOT_UA, {"utm_source": "claude"})
        assert result.source == "gptbot"

    def test_match_platform_name(self):
        assert match_platform_name("ChatGPT.com") == "chatgpt"
        assert match_platform_name("newsletter") is None
        assert match_platform_name(None) is None


class TestFallbacks:
    """Tests for unknown-ai, unknown and direct fallbacks."""

    def test_ai_tld_is_unknown_ai(self):
        """An unlisted .ai host is an unknown AI referral."""
        result = classify_visit("https://answers.example.ai/q/1", BROWSER_UA)

        assert result.source == "unknown-ai"
        assert result.visit_type == "referral"
        assert result.rule == RULE_AI_HINT

    def test_ai_hint_inside_host(self):
        result = classify_visit("https://mygpt-tools.com/", BROWSER_UA)
        assert result.source == "unknown-ai"

    def test_ai_suffix_only_matches_tld(self):
        """'.ai' in the middle of a host is not a hint."""
        result = classify_visit("https://mail.aidan.com/", BROWSER_UA)
        assert result.source == "unknown"

    def test_unknown_referrer_is_standard(self):
        result = classify_visit("https://news.ycombinator.com/item?id=1", BROWSER_UA)

        assert result.source == "unknown"
        assert result.visit_type == "standard"
        assert result.rule == RULE_UNMATCHED_REFERRER

    def test_empty_referrer_is_direct(self):
        result = classify_visit("", BROWSER_UA)

        assert result.source == "direct"
        assert result.visit_type == "direct"
        assert result.rule == RULE_NO_REFERRER

    def test_whitespace_referrer_is_direct(self):
        assert classify_visit("   ", BROWSER_UA).source == "direct"

    def test_is_ai_property(self):
        assert classify_visit("https://claude.ai/", BROWSER_UA).is_ai is True
        assert classify_visit("", GPTBOT_UA).is_ai is True
        assert classify_visit("", BROWSER_UA).is_ai is False


class TestClassifyVisitDict:
    """Tests for classify_visit_dict function."""

    def test_returns_dict(self):
        result = classify_visit_dict("https://claude.ai/", BROWSER_UA)

        assert result == {
            "source": "claude",
            "visit_type": "referral",
            "rule": RULE_REFERRER,
        }
