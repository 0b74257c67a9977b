"""
Real-time ingestion pipeline.
"""

import logging
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional

from syslog_analyzer.config import get_settings
from syslog_analyzer.detection.engine import RuleEngine
from syslog_analyzer.llm.analyzer import EnrichmentClient
from syslog_analyzer.models.enrichment import EnrichmentConfig
from syslog_analyzer.models.log_entry import LogEntry, Category, Severity
from syslog_analyzer.models.rule import Rule, RuleSnapshot
from syslog_analyzer.parsers.classifier import classify_line
from syslog_analyzer.pipeline.store import EntryStore
from syslog_analyzer.pipeline.workers import EnrichmentPool


logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Stateful orchestrator for the live log stream.

    Every received line is classified, matched against the current rule
    snapshot and appended to the visible store straight away. Critical and
    warning entries that no rule explained are queued for AI enrichment;
    the result is merged back into the store by entry id whenever it
    arrives.

    Two independent switches:
    - listening / stopped: whether the transport should be delivering
    - active / paused: paused lines go to a FIFO buffer instead of the store

    The pipeline does not bind sockets. The transport bridge calls
    receive() for every message it gets.
    """

    def __init__(
        self,
        analyzer: Optional[EnrichmentClient] = None,
        engine: Optional[RuleEngine] = None,
        config: Optional[EnrichmentConfig] = None,
        concurrency: Optional[int] = None,
    ):
        settings = get_settings()
        self.engine = engine or RuleEngine()
        self.analyzer = analyzer or EnrichmentClient()
        self.config = config or EnrichmentConfig.from_settings()
        self.store = EntryStore()
        self.pool = EnrichmentPool(
            self.analyzer,
            on_result=self._on_enriched,
            concurrency=concurrency or settings.enrichment_concurrency,
        )

        self.port: Optional[int] = None
        self._listening = False
        self._paused = False
        self._buffer: Deque[str] = deque()
        self._rules: RuleSnapshot = ()
        self._received = 0
        self._last_message: Optional[str] = None

    @property
    def is_listening(self) -> bool:
        return self._listening

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def rules(self) -> RuleSnapshot:
        return self._rules

    def set_rules(self, rules: Iterable[Rule]) -> None:
        """Replace the rule snapshot used for lines received from now on."""
        self._rules = tuple(rules)
        logger.debug("Rule snapshot updated (%d rules)", len(self._rules))

    def set_config(self, config: EnrichmentConfig) -> None:
        """Use a new enrichment endpoint/model for later dispatches."""
        self.config = config
        logger.info("Enrichment config set to %s (model %s)", config.endpoint, config.model)

    def start(self, port: int) -> None:
        """Mark the pipeline as listening on `port`."""
        self.port = port
        self._listening = True
        logger.info("Syslog listener started on UDP/%d", port)

    def stop(self) -> int:
        """
        Stop listening and flush any buffered lines into the store.

        The pause flag is left as it is.

        Returns:
            Number of buffered lines processed
        """
        self._listening = False
        logger.info("Syslog listener stopped")
        return self._flush()

    def pause(self) -> None:
        """Hold incoming lines in the buffer until resume()."""
        self._paused = True
        logger.info("Log stream paused")

    def resume(self) -> int:
        """
        Process buffered lines in arrival order, then continue normally.

        Returns:
            Number of buffered lines processed
        """
        self._paused = False
        processed = self._flush()
        logger.info("Log stream resumed")
        return processed

    def receive(self, line: str) -> Optional[LogEntry]:
        """
        Accept one raw message from the transport.

        Returns:
            The stored entry, or None if the line was buffered or blank
        """
        if not line.strip():
            return None

        self._received += 1
        self._last_message = line
        return self._ingest(line)

    def _ingest(self, line: str) -> Optional[LogEntry]:
        if self._paused:
            self._buffer.append(line)
            return None
        return self._process(line)

    def _flush(self) -> int:
        processed = 0
        while self._buffer:
            self._process(self._buffer.popleft())
            processed += 1
        if processed:
            logger.info("Processed %d buffered logs", processed)
        return processed

    def _process(self, line: str) -> LogEntry:
        rules = self._rules
        entry = self.engine.match(classify_line(line), rules)
        self.store.append(entry)
        self._notify(entry)

        if entry.needs_enrichment:
            logger.debug("Sending %s for AI analysis: %s", entry.id, entry.message[:80])
            self.pool.submit(entry, self.config)

        return entry

    def clear(self) -> int:
        """
        Drop every visible and buffered entry.

        Enrichment already in flight still completes; its result is
        discarded.
        """
        self._buffer.clear()
        removed = self.store.clear()
        logger.info("Real-time logs cleared (%d entries)", removed)
        return removed

    def entries(self) -> List[LogEntry]:
        return self.store.entries()

    def get(self, entry_id: str) -> Optional[LogEntry]:
        return self.store.get(entry_id)

    def stats(self) -> Dict[str, int]:
        """Entry counts for the viewer."""
        counts = self.store.severity_counts()
        return {
            "total": len(self.store),
            "critical": counts.get(Severity.CRITICAL.value, 0),
            "warning": counts.get(Severity.WARNING.value, 0),
            "buffered": len(self._buffer),
        }

    def status(self) -> Dict[str, Any]:
        return {
            "listening": self._listening,
            "paused": self._paused,
            "port": self.port,
            "buffered": len(self._buffer),
            "entries": len(self.store),
            "pending_enrichments": self.pool.pending,
            "received": self._received,
            "last_message": self._last_message,
        }

    async def drain(self) -> None:
        """Wait for queued enrichment jobs to finish."""
        await self.pool.join()

    async def close(self) -> None:
        """Stop the enrichment workers."""
        await self.pool.close()

    def _on_enriched(self, result: LogEntry) -> None:
        if self.store.merge(result.id, result):
            logger.debug("AI analysis received for %s: %s", result.id, result.ai_analysis)

    def _notify(self, entry: LogEntry) -> None:
        if entry.severity == Severity.CRITICAL:
            logger.warning("Critical: %s", entry.message[:50])
        elif entry.category == Category.SECURITY:
            logger.warning("Security Alert: %s", entry.message[:50])
