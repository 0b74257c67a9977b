"""
Shared fixtures and test doubles.
"""

import asyncio

import pytest

from syslog_analyzer.database import db as db_module
from syslog_analyzer.models.enrichment import EnrichmentConfig
from syslog_analyzer.models.log_entry import LogEntry, Category, Severity


FAILED_SSH_LINE = (
    "Jan 3 10:24:12 webserver sshd[12345]: Failed password for root "
    "from 203.0.113.45 port 52341 ssh2"
)


class StubAnalyzer:
    """Stands in for EnrichmentClient and records every call."""

    def __init__(self, category: Category = Category.SECURITY):
        self.category = category
        self.calls = []

    async def analyze(self, entry: LogEntry, config: EnrichmentConfig) -> LogEntry:
        self.calls.append(entry.id)
        return entry.model_copy(
            update={
                "category": self.category,
                "ai_analysis": f"AI: {entry.message[:30]}",
            }
        )


class GatedAnalyzer:
    """Holds each request until the test releases it by message."""

    def __init__(self):
        self.gates = {}
        self.started = []

    def _gate(self, message: str) -> asyncio.Event:
        return self.gates.setdefault(message, asyncio.Event())

    def release(self, message: str) -> None:
        self._gate(message).set()

    async def analyze(self, entry: LogEntry, config: EnrichmentConfig) -> LogEntry:
        self.started.append(entry.message)
        await self._gate(entry.message).wait()
        return entry.model_copy(
            update={
                "category": Category.SYSTEM_FAILURE,
                "severity": Severity.WARNING,
                "ai_analysis": f"analysis of {entry.message}",
            }
        )


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Yield to the event loop until predicate() is true."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def config():
    """Enrichment config pointing at a fake server."""
    return EnrichmentConfig(endpoint="http://ollama.test:11434/", model="llama3.2")


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Point the rule database at a temporary file."""
    path = tmp_path / "rules.db"
    monkeypatch.setattr(db_module, "DATABASE_PATH", path)
    return path
