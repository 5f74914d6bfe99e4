"""
Classification rule tables.

A RuleSet bundles every curated lookup table the classifier uses under one
version string. The built-in tables live in config.constants; a YAML file can
replace any of them without code changes.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from ..config.constants import (
    AI_CRAWLER_RULES,
    AI_HINT_PATTERNS,
    AI_PLATFORM_NAMES,
    AI_REFERRER_RULES,
    RULES_VERSION,
    SEARCH_AI_OVERVIEW_MARKERS,
    SOURCE_ATTRIBUTION_PARAMS,
    SOURCE_SEARCH_AI_OVERVIEW,
    VISIT_TYPE_CRAWLER,
    VISIT_TYPE_REFERRAL,
)
from ..config.sops_loader import load_yaml_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchRule:
    """A lower-cased substring pattern mapped to a canonical source."""

    pattern: str
    source: str
    visit_type: str

    def matches(self, text: str) -> bool:
        return self.pattern in text


@dataclass(frozen=True)
class SearchMarkerRule:
    """Search engine host pattern plus the query marker of its AI surface."""

    pattern: str
    param: str
    value: Optional[str] = None
    source: str = SOURCE_SEARCH_AI_OVERVIEW
    visit_type: str = VISIT_TYPE_REFERRAL

    def matches(self, host: str, query: dict[str, str]) -> bool:
        if self.pattern not in host or self.param not in query:
            return False
        if self.value is None:
            return True
        return query[self.param].lower() == self.value


@dataclass(frozen=True)
class CrawlerRule:
    """User-agent signature of an AI company's bot."""

    signature: str
    label: str
    provider: str
    category: str
    visit_type: str = VISIT_TYPE_CRAWLER

    def matches(self, user_agent_lower: str) -> bool:
        return self.signature.lower() in user_agent_lower


class RuleSet:
    """
    Versioned, read-only set of classification rules.

    Rules within each table are evaluated in the order given.
    """

    def __init__(
        self,
        version: str,
        referrer_rules: list[MatchRule],
        search_marker_rules: list[SearchMarkerRule],
        crawler_rules: list[CrawlerRule],
        platform_names: dict[str, str],
        attribution_params: list[str],
        ai_hint_patterns: list[str],
    ):
        self.version = version
        self.referrer_rules = tuple(referrer_rules)
        self.search_marker_rules = tuple(search_marker_rules)
        self.crawler_rules = tuple(crawler_rules)
        self.platform_names = dict(platform_names)
        self.attribution_params = tuple(p.lower() for p in attribution_params)
        self.ai_hint_patterns = tuple(p.lower() for p in ai_hint_patterns)

    def __repr__(self) -> str:
        return (
            f"RuleSet(version={self.version!r}, "
            f"referrers={len(self.referrer_rules)}, "
            f"crawlers={len(self.crawler_rules)})"
        )

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "RuleSet":
        """
        Build a RuleSet from a configuration mapping.

        Sections missing from the mapping keep their built-in defaults.

        Raises:
            ValueError: If a rule entry lacks a required key
        """
        try:
            referrers = [
                MatchRule(
                    pattern=str(entry["pattern"]).lower(),
                    source=str(entry["source"]),
                    visit_type=VISIT_TYPE_REFERRAL,
                )
                for entry in config.get("referrers", AI_REFERRER_RULES)
            ]
            markers = [
                SearchMarkerRule(
                    pattern=str(entry["pattern"]).lower(),
                    param=str(entry["param"]).lower(),
                    value=(
                        None
                        if entry.get("value") is None
                        else str(entry["value"]).lower()
                    ),
                )
                for entry in config.get(
                    "search_ai_overview", SEARCH_AI_OVERVIEW_MARKERS
                )
            ]
            crawlers = [
                CrawlerRule(
                    signature=str(signature),
                    label=str(info["label"]),
                    provider=str(info.get("provider", "")),
                    category=str(info.get("category", "training")),
                )
                for signature, info in config.get(
                    "crawlers", AI_CRAWLER_RULES
                ).items()
            ]
        except KeyError as e:
            raise ValueError(f"Classification rule is missing key {e}") from e

        platform_names = {
            str(k).lower(): str(v)
            for k, v in config.get("platform_names", AI_PLATFORM_NAMES).items()
        }

        return cls(
            version=str(config.get("version", RULES_VERSION)),
            referrer_rules=referrers,
            search_marker_rules=markers,
            crawler_rules=crawlers,
            platform_names=platform_names,
            attribution_params=config.get(
                "attribution_params", SOURCE_ATTRIBUTION_PARAMS
            ),
            ai_hint_patterns=config.get("ai_hints", AI_HINT_PATTERNS),
        )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "RuleSet":
        """Load a RuleSet from a YAML file."""
        config = load_yaml_file(Path(path))
        rules = cls.from_dict(config)
        logger.info(f"Loaded classification rules {rules.version} from {path}")
        return rules

    @property
    def crawler_labels(self) -> list[str]:
        return [rule.label for rule in self.crawler_rules]

    @property
    def sources(self) -> set[str]:
        """Every canonical AI source label the rule set can produce."""
        names = {rule.source for rule in self.referrer_rules}
        names.update(self.platform_names.values())
        names.update(self.crawler_labels)
        names.add(SOURCE_SEARCH_AI_OVERVIEW)
        return names


@lru_cache
def default_rule_set() -> RuleSet:
    """The built-in rule tables."""
    return RuleSet.from_dict({})


def load_rule_set(rules_path: Optional[str] = None) -> RuleSet:
    """Rules from a YAML file when a path is configured, else the built-ins."""
    if rules_path:
        return RuleSet.from_yaml(rules_path)
    return default_rule_set()
