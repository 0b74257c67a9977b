"""
Tests for the rule engine and preset catalogue.
"""

import pytest

from syslog_analyzer.detection.engine import RuleEngine
from syslog_analyzer.detection.presets import PRESET_RULES, build_preset_rules
from syslog_analyzer.models.log_entry import Category, Severity
from syslog_analyzer.models.rule import Rule
from syslog_analyzer.parsers.classifier import classify_line

from conftest import FAILED_SSH_LINE


def create_rule(
    name: str,
    pattern: str,
    is_regex: bool = False,
    category: Category = Category.SECURITY,
    severity: Severity = Severity.CRITICAL,
    enabled: bool = True,
    description: str = "test rule",
) -> Rule:
    """Helper to create a rule."""
    return Rule(
        name=name,
        description=description,
        pattern=pattern,
        is_regex=is_regex,
        category=category,
        severity=severity,
        enabled=enabled,
    )


class TestRuleEngine:
    """Tests for RuleEngine.match."""

    def setup_method(self):
        self.engine = RuleEngine()
        self.entry = classify_line(FAILED_SSH_LINE)

    def test_plain_pattern_match(self):
        """A substring rule overrides classification and explains itself."""
        rule = create_rule(
            "SSH brute force",
            "Failed password",
            description="Repeated password failures",
        )

        result = self.engine.match(self.entry, [rule])

        assert result.category == Category.SECURITY
        assert result.severity == Severity.CRITICAL
        assert "SSH brute force" in result.ai_analysis
        assert "Repeated password failures" in result.ai_analysis
        assert result.id == self.entry.id

    def test_plain_pattern_is_case_insensitive(self):
        rule = create_rule("ssh", "FAILED PASSWORD", severity=Severity.WARNING)
        result = self.engine.match(self.entry, [rule])
        assert result.severity == Severity.WARNING

    def test_regex_pattern_is_case_insensitive(self):
        rule = create_rule("ssh", r"failed\s+PASSWORD for \w+", is_regex=True, severity=Severity.INFO)
        result = self.engine.match(self.entry, [rule])
        assert result.severity == Severity.INFO

    def test_invalid_regex_is_skipped(self):
        """A broken rule does not stop later rules from matching."""
        broken = create_rule("broken", "([unclosed", is_regex=True, category=Category.OTHER)
        valid = create_rule("valid", "sshd", category=Category.NETWORK, severity=Severity.WARNING)

        result = self.engine.match(self.entry, [broken, valid])

        assert result.category == Category.NETWORK
        assert "valid" in result.ai_analysis

    def test_first_match_wins(self):
        first = create_rule("first", "sshd", category=Category.NETWORK, severity=Severity.INFO)
        second = create_rule("second", "Failed", category=Category.SECURITY)

        result = self.engine.match(self.entry, [first, second])

        assert result.category == Category.NETWORK
        assert result.ai_analysis.startswith("Matched rule: first")

    def test_disabled_rules_ignored(self):
        disabled = create_rule("disabled", "sshd", category=Category.NETWORK, enabled=False)
        enabled = create_rule("enabled", "sshd", category=Category.OTHER, severity=Severity.INFO)

        result = self.engine.match(self.entry, [disabled, enabled])

        assert result.category == Category.OTHER

    def test_no_match_returns_entry_unchanged(self):
        rule = create_rule("nope", "kernel panic")
        result = self.engine.match(self.entry, [rule])
        assert result is self.entry

    def test_match_does_not_mutate_input(self):
        rule = create_rule("ssh", "sshd", category=Category.NETWORK, severity=Severity.INFO)
        self.engine.match(self.entry, [rule])

        assert self.entry.category is None
        assert self.entry.severity == Severity.CRITICAL
        assert self.entry.ai_analysis is None

    def test_parse_and_match(self):
        rule = create_rule("ssh", "Failed password")
        content = f"{FAILED_SSH_LINE}\nJan 3 10:24:12 host kernel: oom-kill"

        entries = self.engine.parse_and_match(content, [rule])

        assert len(entries) == 2
        assert entries[0].category == Category.SECURITY
        assert entries[1].category is None


class TestValidatePattern:
    """Tests for RuleEngine.validate_pattern."""

    def test_valid_regex(self):
        assert RuleEngine.validate_pattern(r"sshd\[\d+\]", True) is None

    def test_invalid_regex(self):
        problem = RuleEngine.validate_pattern("([unclosed", True)
        assert problem is not None
        assert "invalid regular expression" in problem

    def test_plain_text_with_regex_chars(self):
        assert RuleEngine.validate_pattern("([unclosed", False) is None

    def test_empty_pattern(self):
        assert RuleEngine.validate_pattern("", False) is not None


class TestRuleModel:
    """Tests for the Rule model."""

    def test_rule_is_frozen(self):
        rule = create_rule("ssh", "sshd")
        with pytest.raises(Exception):
            rule.enabled = False

    def test_rule_cannot_assign_normal(self):
        with pytest.raises(ValueError):
            create_rule("ssh", "sshd", severity=Severity.NORMAL)

    def test_camel_case_alias(self):
        rule = Rule.model_validate({
            "name": "ssh",
            "pattern": "sshd",
            "isRegex": False,
            "category": "security",
            "severity": "warning",
        })
        assert rule.is_regex is False
        assert rule.model_dump(by_alias=True)["isRegex"] is False


class TestPresetRules:
    """Tests for the built-in rule catalogue."""

    def setup_method(self):
        self.engine = RuleEngine()
        self.presets = build_preset_rules()

    def test_catalogue(self):
        assert len(self.presets) == len(PRESET_RULES) == 7
        assert all(r.enabled and r.preset and r.is_regex for r in self.presets)
        assert all(r.id.startswith("preset-") for r in self.presets)
        assert len({r.id for r in self.presets}) == 7

    def test_patterns_compile(self):
        for rule in self.presets:
            assert RuleEngine.validate_pattern(rule.pattern, rule.is_regex) is None, rule.name

    def test_failed_login(self):
        result = self.engine.match(classify_line(FAILED_SSH_LINE), self.presets)
        assert result.ai_analysis.startswith("Matched rule: Multiple Failed Login Attempts")
        assert result.category == Category.SECURITY

    def test_wan_inbound_allowed(self):
        entry = classify_line("Jan 3 10:23:45 firewall filterlog: ALLOW,in,4,0x0,wan,5678,TCP,6,64,198.51.100.23,192.168.1.5,22")
        result = self.engine.match(entry, self.presets)
        assert result.ai_analysis.startswith("Matched rule: WAN Inbound Traffic Allowed")
        assert result.severity == Severity.CRITICAL

    def test_ssh_from_public_ip(self):
        entry = classify_line("Jan 3 10:30:00 web sshd[2001]: Accepted publickey for deploy from 203.0.113.45 port 40022 ssh2")
        result = self.engine.match(entry, self.presets)
        assert result.ai_analysis.startswith("Matched rule: SSH from Public IP")
        assert result.severity == Severity.WARNING

    def test_ssh_from_private_ip_not_flagged(self):
        entry = classify_line("Jan 3 10:30:00 web sshd[2001]: Accepted publickey for deploy from 192.168.1.20 port 40022 ssh2")
        result = self.engine.match(entry, self.presets)
        assert result.ai_analysis is None

    def test_unifi_ap_disconnected(self):
        entry = classify_line("Jan 3 10:25:01 ap hostapd: wlan0: STA 00:11:22:33:44:55 disconnected")
        result = self.engine.match(entry, self.presets)
        assert result.category == Category.NETWORK
