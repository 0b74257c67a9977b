"""
Ingestion and enrichment scheduling.
"""

from syslog_analyzer.pipeline.store import EntryStore
from syslog_analyzer.pipeline.workers import EnrichmentPool
from syslog_analyzer.pipeline.ingestion import IngestionPipeline
from syslog_analyzer.pipeline.batch import BatchScheduler

__all__ = ["EntryStore", "EnrichmentPool", "IngestionPipeline", "BatchScheduler"]
