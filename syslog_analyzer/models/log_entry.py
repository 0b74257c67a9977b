"""
Log entry model.
Every ingested line, real-time or batch, becomes one of these.
"""

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class LogSource(str, Enum):
    """Device family a line was emitted by."""
    OPNSENSE = "opnsense"
    LINUX = "linux"
    UNIFI = "unifi"
    UNKNOWN = "unknown"


class Severity(str, Enum):
    """Severity classes, most severe first."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    NORMAL = "normal"


class Category(str, Enum):
    """What kind of problem an entry describes."""
    SECURITY = "security"
    SYSTEM_FAILURE = "system-failure"
    NETWORK = "network"
    OTHER = "other"


# Severities that make an entry eligible for AI enrichment
ENRICHABLE_SEVERITIES = frozenset({Severity.CRITICAL, Severity.WARNING})


def new_entry_id() -> str:
    """Generate an opaque entry identifier."""
    return f"log-{uuid.uuid4().hex}"


class LogEntry(BaseModel):
    """
    One classified, optionally rule-matched and AI-enriched log record.

    The `id` is assigned once at ingestion and never changes. Asynchronous
    updates locate the entry by `id`, never by position.
    """

    id: str = Field(
        default_factory=new_entry_id,
        description="Stable identifier assigned at ingestion"
    )
    timestamp: str = Field(
        description="Timestamp as found in the line, or ingestion time if none"
    )
    source: LogSource = Field(
        default=LogSource.UNKNOWN,
        description="Detected device family"
    )
    severity: Severity = Field(
        default=Severity.NORMAL,
        description="Severity class"
    )
    message: str = Field(
        description="Original trimmed log line"
    )
    category: Optional[Category] = Field(
        default=None,
        description="Category assigned by a rule or by the AI"
    )
    ai_analysis: Optional[str] = Field(
        default=None,
        alias="aiAnalysis",
        description="Rule explanation, AI analysis or enrichment error"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "log-3f2a9c1e0b7d4e5f8a6b2c1d0e9f8a7b",
                "timestamp": "Jan 3 10:24:12",
                "source": "linux",
                "severity": "critical",
                "message": "Jan 3 10:24:12 webserver sshd[12345]: Failed password for root from 203.0.113.45 port 52341 ssh2",
                "category": "security",
                "aiAnalysis": "Matched rule: Multiple Failed Login Attempts - Detects failed password attempts which may indicate brute force attack",
            }
        }
    )

    @property
    def needs_enrichment(self) -> bool:
        """True for critical/warning entries nobody has explained yet."""
        return self.severity in ENRICHABLE_SEVERITIES and not self.ai_analysis
