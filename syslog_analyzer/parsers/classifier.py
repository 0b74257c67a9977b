"""
Line classifier for OPNsense, Linux syslog and Unifi messages.

Pure functions: a raw line in, (source, timestamp, severity) out. Nothing
here looks at structured syslog fields; classification is keyword and
pattern based.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from syslog_analyzer.models.log_entry import LogEntry, LogSource, Severity, new_entry_id


# Source markers, checked in precedence order
OPNSENSE_MARKERS = ("filterlog", "opnsense", "pf:")
UNIFI_MARKERS = ("unifi", "hostapd")
LINUX_MARKERS = ("kernel:", "systemd")

# Access point model tokens such as U7PG2, UAP or USW
UNIFI_DEVICE_PATTERN = re.compile(r"U[A-Z0-9]{2,}", re.IGNORECASE)
# "Jan 3 10:24:12" at the start of the line
SYSLOG_PREFIX_PATTERN = re.compile(r"^\w{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2}")
# PIDs and other bracketed tokens: sshd[12345]
BRACKETED_TOKEN_PATTERN = re.compile(r"\[.*\]")

# Timestamp formats, tried in order
TIMESTAMP_PATTERNS = (
    # ISO 8601: 2024-01-15T03:30:00 or 2024-01-15 03:30:00
    re.compile(r"\d{4}-\d{2}-\d{2}[T\s]\d{2}:\d{2}:\d{2}"),
    # Syslog: Jan 15 03:22:15
    re.compile(r"\w{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2}"),
    # Bare time at the start of the line: 03:22:15
    re.compile(r"^\d{2}:\d{2}:\d{2}"),
)

# Severity keyword classes, first matching class wins
SEVERITY_PATTERNS: Tuple[Tuple[Severity, "re.Pattern[str]"], ...] = (
    (
        Severity.CRITICAL,
        re.compile(r"\b(critical|fatal|panic|emergency|failed|error|denied|blocked)\b", re.IGNORECASE),
    ),
    (
        Severity.WARNING,
        re.compile(r"\b(warning|warn|alert|timeout|retry)\b", re.IGNORECASE),
    ),
    (
        Severity.INFO,
        re.compile(r"\b(info|notice|debug)\b", re.IGNORECASE),
    ),
)


def detect_source(line: str) -> LogSource:
    """
    Detect which kind of device emitted a line.

    OPNsense markers win over Unifi markers, which win over Linux markers.
    """
    if any(marker in line for marker in OPNSENSE_MARKERS):
        return LogSource.OPNSENSE

    if UNIFI_DEVICE_PATTERN.search(line) or any(marker in line for marker in UNIFI_MARKERS):
        return LogSource.UNIFI

    if (
        SYSLOG_PREFIX_PATTERN.match(line)
        or any(marker in line for marker in LINUX_MARKERS)
        or BRACKETED_TOKEN_PATTERN.search(line)
    ):
        return LogSource.LINUX

    return LogSource.UNKNOWN


def find_timestamp(line: str) -> Optional[str]:
    """
    Return the timestamp written in the line, verbatim.

    No year, timezone or format normalization is applied.

    Returns:
        The matched substring, or None if the line carries no timestamp
    """
    for pattern in TIMESTAMP_PATTERNS:
        match = pattern.search(line)
        if match:
            return match.group(0)
    return None


def ingestion_timestamp() -> str:
    """Current UTC time in ISO 8601 with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def detect_timestamp(line: str) -> str:
    """
    Timestamp for a line.

    Falls back to the ingestion time when the line has none of its own.
    Use find_timestamp() to tell the two cases apart.
    """
    found = find_timestamp(line)
    if found is not None:
        return found
    return ingestion_timestamp()


def detect_severity(line: str) -> Severity:
    """Classify severity by whole-word keyword match."""
    for severity, pattern in SEVERITY_PATTERNS:
        if pattern.search(line):
            return severity
    return Severity.NORMAL


def classify_line(line: str, entry_id: Optional[str] = None) -> LogEntry:
    """
    Classify a single raw line into a LogEntry.

    Args:
        line: Raw log line
        entry_id: Identifier to assign; a fresh one is generated if omitted

    Returns:
        LogEntry with source, timestamp and severity filled in
    """
    message = line.strip()
    return LogEntry(
        id=entry_id or new_entry_id(),
        timestamp=detect_timestamp(message),
        source=detect_source(message),
        severity=detect_severity(message),
        message=message,
    )


def parse_raw_logs(content: str) -> List[LogEntry]:
    """
    Classify every non-blank line of a multi-line string.

    Args:
        content: Raw log text, one message per line

    Returns:
        One LogEntry per non-blank line, in input order
    """
    entries = []
    for line in content.split("\n"):
        if not line.strip():
            continue
        entries.append(classify_line(line))
    return entries
