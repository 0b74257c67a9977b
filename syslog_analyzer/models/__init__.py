"""
Pydantic models for Syslog Analyzer.
"""

from syslog_analyzer.models.log_entry import (
    LogEntry,
    LogSource,
    Severity,
    Category,
    ENRICHABLE_SEVERITIES,
)
from syslog_analyzer.models.rule import Rule, RuleSnapshot
from syslog_analyzer.models.enrichment import EnrichmentConfig

__all__ = [
    "LogEntry",
    "LogSource",
    "Severity",
    "Category",
    "ENRICHABLE_SEVERITIES",
    "Rule",
    "RuleSnapshot",
    "EnrichmentConfig",
]
