"""
Rule engine - applies ordered pattern rules to classified entries.
"""

import logging
import re
from functools import lru_cache
from typing import Iterable, List, Optional

from syslog_analyzer.models.log_entry import LogEntry
from syslog_analyzer.models.rule import Rule
from syslog_analyzer.parsers.classifier import parse_raw_logs


logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> "re.Pattern[str]":
    return re.compile(pattern, re.IGNORECASE)


class RuleEngine:
    """
    Evaluates user-defined rules against log entries.

    The engine:
    1. Considers only enabled rules, in the order given
    2. Matches regex rules case-insensitively, plain rules by
       case-insensitive substring containment
    3. Stops at the first matching rule and applies its classification
    4. Skips rules whose pattern does not compile
    """

    def match(self, entry: LogEntry, rules: Iterable[Rule]) -> LogEntry:
        """
        Apply the first matching rule to an entry.

        Args:
            entry: Classified log entry
            rules: Ordered rules; callers should pass an immutable snapshot

        Returns:
            A copy carrying the rule's category, severity and explanation,
            or the entry unchanged if no enabled rule matches
        """
        for rule in rules:
            if not rule.enabled:
                continue

            try:
                matched = self._matches(rule, entry.message)
            except re.error as e:
                # Bad patterns are skipped, evaluation goes on
                logger.warning("Skipping rule %r (%s): invalid pattern: %s", rule.name, rule.id, e)
                continue

            if matched:
                logger.debug("Rule %r matched entry %s", rule.name, entry.id)
                return entry.model_copy(
                    update={
                        "category": rule.category,
                        "severity": rule.severity,
                        "ai_analysis": rule.explanation,
                    }
                )

        return entry

    def match_all(self, entries: Iterable[LogEntry], rules: Iterable[Rule]) -> List[LogEntry]:
        """Apply rules to each entry, preserving order."""
        rules = tuple(rules)
        return [self.match(entry, rules) for entry in entries]

    def parse_and_match(self, content: str, rules: Iterable[Rule]) -> List[LogEntry]:
        """Classify multi-line raw text and apply rules to every entry."""
        return self.match_all(parse_raw_logs(content), rules)

    @staticmethod
    def validate_pattern(pattern: str, is_regex: bool) -> Optional[str]:
        """
        Check that a rule pattern is usable.

        Returns:
            None if valid, otherwise a description of the problem
        """
        if not pattern:
            return "pattern must not be empty"
        if not is_regex:
            return None
        try:
            _compile_pattern(pattern)
        except re.error as e:
            return f"invalid regular expression: {e}"
        return None

    def _matches(self, rule: Rule, message: str) -> bool:
        if rule.is_regex:
            return _compile_pattern(rule.pattern).search(message) is not None
        return rule.pattern.lower() in message.lower()
