"""Traffic-source classification engine."""

from .engine import (
    CrawlerMatch,
    TrafficClassification,
    classify_crawler,
    classify_visit,
    classify_visit_dict,
    get_crawler_labels_by_category,
    get_crawler_labels_by_provider,
    is_ai_crawler,
    match_platform_name,
)
from .rules import (
    CrawlerRule,
    MatchRule,
    RuleSet,
    SearchMarkerRule,
    default_rule_set,
    load_rule_set,
)

__all__ = [
    # Classification
    "TrafficClassification",
    "CrawlerMatch",
    "classify_visit",
    "classify_visit_dict",
    "classify_crawler",
    "is_ai_crawler",
    "match_platform_name",
    "get_crawler_labels_by_category",
    "get_crawler_labels_by_provider",
    # Rule tables
    "RuleSet",
    "MatchRule",
    "SearchMarkerRule",
    "CrawlerRule",
    "default_rule_set",
    "load_rule_set",
]
