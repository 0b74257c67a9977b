"""
Visible entry store, keyed by entry id.
"""

import logging
from collections import Counter
from typing import Dict, Iterator, List, Optional

from syslog_analyzer.models.log_entry import LogEntry


logger = logging.getLogger(__name__)


class EntryStore:
    """
    Ordered collection of entries with id-keyed updates.

    Entries keep their arrival order. Asynchronous results are applied with
    merge(), which looks the target up by id, so completions arriving in any
    order land on the right entry and completions for cleared entries are
    dropped.

    Not thread-safe: all access happens on the event loop thread.
    """

    def __init__(self):
        self._entries: Dict[str, LogEntry] = {}

    def append(self, entry: LogEntry) -> LogEntry:
        """Add a new entry at the end."""
        if entry.id in self._entries:
            raise ValueError(f"Duplicate entry id: {entry.id}")
        self._entries[entry.id] = entry
        return entry

    def get(self, entry_id: str) -> Optional[LogEntry]:
        return self._entries.get(entry_id)

    def merge(self, entry_id: str, result: LogEntry) -> bool:
        """
        Apply an enrichment result to the stored entry with this id.

        Only category, severity and ai_analysis are taken from `result`.

        Returns:
            True if the entry was updated, False if it no longer exists
        """
        current = self._entries.get(entry_id)
        if current is None:
            logger.debug("Discarding result for %s: entry no longer stored", entry_id)
            return False

        self._entries[entry_id] = current.model_copy(
            update={
                "category": result.category,
                "severity": result.severity,
                "ai_analysis": result.ai_analysis,
            }
        )
        return True

    def clear(self) -> int:
        """Remove every entry. Returns how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        return count

    def entries(self) -> List[LogEntry]:
        """Snapshot of all entries in arrival order."""
        return list(self._entries.values())

    def severity_counts(self) -> Counter:
        return Counter(entry.severity.value for entry in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries())

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries
