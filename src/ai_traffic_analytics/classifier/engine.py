"""
AI traffic classification from browsing context.

Turns the referrer, user-agent and page query parameters of a page load
into a {source, visit_type} label. Rules are tried in priority order and
the first match wins:

1. AI assistant referrer domain      -> referral
2. Search engine AI answer marker    -> search-ai-overview / referral
3. AI crawler user-agent signature   -> crawler
4. AI platform in a source parameter -> referral
5. AI-looking unknown referrer       -> unknown-ai / referral
6. Any other referrer                -> unknown / standard
7. No referrer                       -> direct / direct
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from ..config.constants import (
    SOURCE_DIRECT,
    SOURCE_UNKNOWN,
    SOURCE_UNKNOWN_AI,
    VISIT_TYPE_CRAWLER,
    VISIT_TYPE_DIRECT,
    VISIT_TYPE_REFERRAL,
    VISIT_TYPE_STANDARD,
)
from ..utils.url_utils import ParsedReferrer, lower_keys, parse_referrer
from .rules import RuleSet, default_rule_set

# Names of the rule that produced a classification
RULE_REFERRER = "referrer_domain"
RULE_SEARCH_AI_OVERVIEW = "search_ai_overview"
RULE_CRAWLER = "crawler_user_agent"
RULE_ATTRIBUTION_PARAM = "attribution_param"
RULE_AI_HINT = "ai_hint"
RULE_UNMATCHED_REFERRER = "unmatched_referrer"
RULE_NO_REFERRER = "no_referrer"


@dataclass(frozen=True)
class TrafficClassification:
    """Result of traffic classification."""

    source: str
    visit_type: str
    rule: str

    @property
    def is_ai(self) -> bool:
        """True for referrals from AI surfaces and AI crawler hits."""
        return self.visit_type in (VISIT_TYPE_REFERRAL, VISIT_TYPE_CRAWLER)

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "visit_type": self.visit_type,
            "rule": self.rule,
        }


@dataclass(frozen=True)
class CrawlerMatch:
    """An AI crawler identified from its user-agent."""

    signature: str
    label: str
    provider: str
    category: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary."""
        return {
            "signature": self.signature,
            "label": self.label,
            "provider": self.provider,
            "category": self.category,
        }


def classify_visit(
    referrer: Optional[str],
    user_agent: Optional[str],
    query_params: Optional[Mapping[str, str]] = None,
    rules: Optional[RuleSet] = None,
) -> TrafficClassification:
    """
    Classify a page load by its AI traffic source.

    Args:
        referrer: The document referrer, possibly empty
        user_agent: The browser's User-Agent string
        query_params: Query parameters of the current page URL
        rules: Rule set to evaluate (defaults to the built-in tables)

    Returns:
        TrafficClassification with source, visit_type and the matching rule

    Examples:
        >>> classify_visit("https://chat.openai.com/c/abc", "Mozilla/5.0").source
        'chatgpt'
        >>> classify_visit("", "Mozilla/5.0 (compatible; GPTBot/1.0)").visit_type
        'crawler'
        >>> classify_visit("", "Mozilla/5.0").source
        'direct'
    """
    rules = rules or default_rule_set()
    parsed = parse_referrer(referrer)
    has_referrer = bool(referrer and referrer.strip())

    if parsed is not None:
        target = parsed.host_and_path
        for rule in rules.referrer_rules:
            if rule.matches(target):
                return TrafficClassification(rule.source, rule.visit_type, RULE_REFERRER)

        for marker in rules.search_marker_rules:
            if marker.matches(parsed.host, lower_keys(parsed.query)):
                return TrafficClassification(
                    marker.source, marker.visit_type, RULE_SEARCH_AI_OVERVIEW
                )

    crawler = classify_crawler(user_agent, rules)
    if crawler is not None:
        return TrafficClassification(crawler.label, VISIT_TYPE_CRAWLER, RULE_CRAWLER)

    platform = _match_attribution_param(query_params, rules)
    if platform is not None:
        return TrafficClassification(platform, VISIT_TYPE_REFERRAL, RULE_ATTRIBUTION_PARAM)

    if parsed is not None and _looks_like_ai(parsed, rules):
        return TrafficClassification(SOURCE_UNKNOWN_AI, VISIT_TYPE_REFERRAL, RULE_AI_HINT)

    if has_referrer:
        return TrafficClassification(
            SOURCE_UNKNOWN, VISIT_TYPE_STANDARD, RULE_UNMATCHED_REFERRER
        )

    return TrafficClassification(SOURCE_DIRECT, VISIT_TYPE_DIRECT, RULE_NO_REFERRER)


def classify_visit_dict(
    referrer: Optional[str],
    user_agent: Optional[str],
    query_params: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Classify a visit and return the result as a dictionary."""
    return classify_visit(referrer, user_agent, query_params).to_dict()


def classify_crawler(
    user_agent: Optional[str],
    rules: Optional[RuleSet] = None,
) -> Optional[CrawlerMatch]:
    """
    Identify an AI crawler from its user-agent string.

    Args:
        user_agent: The HTTP User-Agent header value

    Returns:
        CrawlerMatch for the first matching signature, or None

    Examples:
        >>> classify_crawler("Mozilla/5.0 GPTBot/1.0").label
        'gptbot'
        >>> classify_crawler("Mozilla/5.0 (Windows NT 10.0) Chrome/120") is None
        True
    """
    if not user_agent:
        return None

    rules = rules or default_rule_set()
    ua = user_agent.lower()

    for rule in rules.crawler_rules:
        if rule.matches(ua):
            return CrawlerMatch(
                signature=rule.signature,
                label=rule.label,
                provider=rule.provider,
                category=rule.category,
            )

    return None


def is_ai_crawler(user_agent: Optional[str]) -> bool:
    """Check if user-agent belongs to a known AI crawler."""
    return classify_crawler(user_agent) is not None


def get_crawler_labels_by_category(category: str) -> list[str]:
    """
    Get crawler labels for a specific category.

    Args:
        category: Either 'training' or 'user_request'
    """
    return [
        rule.label
        for rule in default_rule_set().crawler_rules
        if rule.category == category
    ]


def get_crawler_labels_by_provider(provider: str) -> list[str]:
    """
    Get crawler labels for a specific provider.

    Args:
        provider: Provider name (e.g., 'OpenAI', 'Anthropic', 'Google')
    """
    return [
        rule.label
        for rule in default_rule_set().crawler_rules
        if rule.provider == provider
    ]


def match_platform_name(value: Optional[str], rules: Optional[RuleSet] = None) -> Optional[str]:
    """
    Find the AI platform named in a free-form value such as a utm_source.

    Examples:
        >>> match_platform_name("ChatGPT.com")
        'chatgpt'
        >>> match_platform_name("newsletter") is None
        True
    """
    if not value:
        return None

    rules = rules or default_rule_set()
    lowered = value.lower()
    for name, source in rules.platform_names.items():
        if name in lowered:
            return source
    return None


def _match_attribution_param(
    query_params: Optional[Mapping[str, str]],
    rules: RuleSet,
) -> Optional[str]:
    params = lower_keys(query_params)
    for param in rules.attribution_params:
        platform = match_platform_name(params.get(param), rules)
        if platform is not None:
            return platform
    return None


def _looks_like_ai(parsed: ParsedReferrer, rules: RuleSet) -> bool:
    for hint in rules.ai_hint_patterns:
        if hint.startswith("."):
            if parsed.host.endswith(hint):
                return True
        elif hint in parsed.host:
            return True
    return False
