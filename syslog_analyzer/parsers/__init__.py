"""
Log line classification.
"""

from syslog_analyzer.parsers.classifier import (
    detect_source,
    detect_timestamp,
    detect_severity,
    find_timestamp,
    classify_line,
    parse_raw_logs,
)

__all__ = [
    "detect_source",
    "detect_timestamp",
    "detect_severity",
    "find_timestamp",
    "classify_line",
    "parse_raw_logs",
]
