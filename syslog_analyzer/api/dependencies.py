"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache

from syslog_analyzer.detection.engine import RuleEngine
from syslog_analyzer.llm.analyzer import EnrichmentClient
from syslog_analyzer.pipeline.batch import BatchScheduler
from syslog_analyzer.pipeline.ingestion import IngestionPipeline


@lru_cache()
def get_rule_engine() -> RuleEngine:
    """Get cached rule engine instance."""
    return RuleEngine()


@lru_cache()
def get_analyzer() -> EnrichmentClient:
    """Get cached enrichment client (shares one HTTP connection pool)."""
    return EnrichmentClient()


@lru_cache()
def get_pipeline() -> IngestionPipeline:
    """Get the process-wide real-time pipeline."""
    return IngestionPipeline(analyzer=get_analyzer(), engine=get_rule_engine())


def get_batch_scheduler() -> BatchScheduler:
    """Get batch scheduler instance (new each request)."""
    return BatchScheduler(analyzer=get_analyzer())
