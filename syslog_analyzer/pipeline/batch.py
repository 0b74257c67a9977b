"""
Batch enrichment of uploaded log sets.
"""

import logging
from typing import Callable, List, Optional, Sequence

from syslog_analyzer.config import get_settings
from syslog_analyzer.llm.analyzer import EnrichmentClient
from syslog_analyzer.models.enrichment import EnrichmentConfig
from syslog_analyzer.models.log_entry import LogEntry


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class BatchScheduler:
    """
    Sequentially enriches a bounded window of a classified log set.

    Only critical/warning entries without an existing analysis are sent,
    and only the first `limit` of those (the batch window). One request
    completes before the next starts.

    Output order is part of the contract: analyzed entries come first, in
    their original relative order, followed by every other entry in its
    original relative order.
    """

    def __init__(self, analyzer: Optional[EnrichmentClient] = None, limit: Optional[int] = None):
        self.analyzer = analyzer or EnrichmentClient()
        self.limit = limit if limit is not None else get_settings().batch_limit

    def select(self, entries: Sequence[LogEntry]) -> List[int]:
        """Indices of the entries inside the batch window."""
        eligible = [i for i, entry in enumerate(entries) if entry.needs_enrichment]
        return eligible[:self.limit]

    async def run(
        self,
        entries: Sequence[LogEntry],
        config: EnrichmentConfig,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[LogEntry]:
        """
        Enrich the batch window.

        Args:
            entries: Classified (and rule-matched) entries
            config: Endpoint and model to use for every call in this run
            on_progress: Called as on_progress(done, total) after each call

        Returns:
            analyzed window entries followed by the skipped entries
        """
        selected_indices = self.select(entries)
        selected_set = set(selected_indices)
        selected = [entries[i] for i in selected_indices]
        skipped = [entry for i, entry in enumerate(entries) if i not in selected_set]

        logger.info(
            "Batch analysis: %d of %d entries selected (limit %d)",
            len(selected), len(entries), self.limit,
        )

        analyzed = []
        for done, entry in enumerate(selected, start=1):
            analyzed.append(await self.analyzer.analyze(entry, config))
            if on_progress:
                on_progress(done, len(selected))

        return analyzed + skipped
