"""
FastAPI API routes.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from syslog_analyzer import __version__
from syslog_analyzer.config import get_settings
from syslog_analyzer.database.repositories import RuleRepository
from syslog_analyzer.detection.engine import RuleEngine
from syslog_analyzer.detection.presets import build_preset_rules
from syslog_analyzer.models.enrichment import EnrichmentConfig
from syslog_analyzer.models.log_entry import LogEntry, Category, Severity
from syslog_analyzer.models.rule import Rule
from syslog_analyzer.pipeline.batch import BatchScheduler
from syslog_analyzer.pipeline.ingestion import IngestionPipeline
from syslog_analyzer.api.dependencies import (
    get_pipeline,
    get_rule_engine,
    get_batch_scheduler,
)


logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response Models
class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class StartRequest(BaseModel):
    """Listener start request."""
    port: int = Field(
        default_factory=lambda: get_settings().default_listen_port,
        ge=1,
        le=65535,
    )


class ReceiveRequest(BaseModel):
    """One message delivered by the transport bridge."""
    message: str


class ReceiveResponse(BaseModel):
    """Result of delivering a message."""
    entry: Optional[LogEntry] = None
    buffered: bool = False


class RuleRequest(BaseModel):
    """Rule fields accepted from the rule manager."""
    name: str = Field(min_length=1)
    description: str = ""
    pattern: str = Field(min_length=1)
    is_regex: bool = Field(default=True, alias="isRegex")
    category: Category
    severity: Severity
    enabled: bool = True

    model_config = ConfigDict(populate_by_name=True)


class AnalyzeRequest(BaseModel):
    """Request model for batch log analysis."""
    log_content: str


class AnalyzeResponse(BaseModel):
    """Response model for batch log analysis."""
    entries: List[LogEntry]
    analyzed: int
    processing_time_ms: int


# Health
@router.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


# Enrichment configuration
@router.get("/api/config", response_model=EnrichmentConfig)
async def get_config(pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Current Ollama endpoint and model."""
    return pipeline.config


@router.put("/api/config", response_model=EnrichmentConfig)
async def update_config(
    config: EnrichmentConfig,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """Swap the Ollama endpoint/model used by subsequent enrichment calls."""
    pipeline.set_config(config)
    return pipeline.config


@router.get("/api/config/check")
async def check_config(pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Check whether the configured Ollama server is reachable."""
    reachable = await pipeline.analyzer.client.health_check(pipeline.config)
    return {"endpoint": pipeline.config.endpoint, "reachable": reachable}


# Rules
async def _refresh_rules(pipeline: IngestionPipeline) -> None:
    pipeline.set_rules(await RuleRepository.snapshot())


def _build_rule(request: RuleRequest, engine: RuleEngine, **extra: Any) -> Rule:
    problem = engine.validate_pattern(request.pattern, request.is_regex)
    if problem:
        raise HTTPException(status_code=400, detail=problem)

    try:
        return Rule(**request.model_dump(), **extra)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/api/rules", response_model=List[Rule])
async def list_rules():
    """List all rules in evaluation order."""
    return await RuleRepository.get_all()


@router.post("/api/rules", response_model=Rule, status_code=201)
async def create_rule(
    request: RuleRequest,
    pipeline: IngestionPipeline = Depends(get_pipeline),
    engine: RuleEngine = Depends(get_rule_engine),
):
    """Append a rule; it is evaluated after all existing rules."""
    rule = _build_rule(request, engine)
    await RuleRepository.add(rule)
    await _refresh_rules(pipeline)
    return rule


@router.post("/api/rules/presets", response_model=List[Rule], status_code=201)
async def load_preset_rules(pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Append the built-in rule catalogue."""
    presets = build_preset_rules()
    await RuleRepository.add_many(presets)
    await _refresh_rules(pipeline)
    return presets


@router.put("/api/rules/{rule_id}", response_model=Rule)
async def update_rule(
    rule_id: str,
    request: RuleRequest,
    pipeline: IngestionPipeline = Depends(get_pipeline),
    engine: RuleEngine = Depends(get_rule_engine),
):
    """Replace a rule's fields, keeping its position."""
    existing = await RuleRepository.get_by_id(rule_id)

    if not existing:
        raise HTTPException(status_code=404, detail="Rule not found")

    rule = _build_rule(request, engine, id=rule_id, preset=existing.preset)
    await RuleRepository.update(rule)
    await _refresh_rules(pipeline)
    return rule


@router.patch("/api/rules/{rule_id}/enabled", response_model=Rule)
async def set_rule_enabled(
    rule_id: str,
    enabled: bool,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """Enable or disable a rule."""
    existing = await RuleRepository.get_by_id(rule_id)

    if not existing:
        raise HTTPException(status_code=404, detail="Rule not found")

    rule = existing.model_copy(update={"enabled": enabled})
    await RuleRepository.update(rule)
    await _refresh_rules(pipeline)
    return rule


@router.delete("/api/rules/{rule_id}")
async def delete_rule(rule_id: str, pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Delete a rule."""
    success = await RuleRepository.delete(rule_id)

    if not success:
        raise HTTPException(status_code=404, detail="Rule not found")

    await _refresh_rules(pipeline)
    return {"message": "Rule deleted", "id": rule_id}


# Real-time stream
def _stream_status(pipeline: IngestionPipeline) -> Dict[str, Any]:
    return {**pipeline.status(), "stats": pipeline.stats()}


@router.get("/api/stream/status")
async def stream_status(pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Listener state and entry counts."""
    return _stream_status(pipeline)


@router.post("/api/stream/start")
async def start_stream(
    request: Optional[StartRequest] = None,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """Start accepting messages from the transport bridge."""
    request = request or StartRequest()
    pipeline.start(request.port)
    return _stream_status(pipeline)


@router.post("/api/stream/stop")
async def stop_stream(pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Stop listening; buffered messages are processed first."""
    flushed = pipeline.stop()
    return {**_stream_status(pipeline), "flushed": flushed}


@router.post("/api/stream/pause")
async def pause_stream(pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Buffer incoming messages instead of processing them."""
    pipeline.pause()
    return _stream_status(pipeline)


@router.post("/api/stream/resume")
async def resume_stream(pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Process buffered messages and continue."""
    flushed = pipeline.resume()
    return {**_stream_status(pipeline), "flushed": flushed}


@router.post("/api/stream/receive", response_model=ReceiveResponse)
async def receive_message(
    request: ReceiveRequest,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """Entry point for the transport bridge: one message per call."""
    if not pipeline.is_listening:
        raise HTTPException(status_code=409, detail="Listener is stopped")

    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message is empty")

    entry = pipeline.receive(request.message)
    return ReceiveResponse(entry=entry, buffered=entry is None)


@router.get("/api/stream/entries", response_model=List[LogEntry])
async def list_entries(
    severity: Optional[Severity] = None,
    limit: Optional[int] = None,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """
    List visible entries in arrival order.

    Args:
        severity: Only entries with this severity
        limit: Only the most recent `limit` entries
    """
    entries = pipeline.entries()

    if severity:
        entries = [e for e in entries if e.severity == severity]

    if limit is not None:
        entries = entries[-limit:] if limit > 0 else []

    return entries


@router.get("/api/stream/entries/{entry_id}", response_model=LogEntry)
async def get_entry(entry_id: str, pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Get a specific entry by ID."""
    entry = pipeline.get(entry_id)

    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")

    return entry


@router.delete("/api/stream/entries")
async def clear_entries(pipeline: IngestionPipeline = Depends(get_pipeline)):
    """Remove all visible and buffered entries."""
    removed = pipeline.clear()
    return {"message": "Real-time logs cleared", "cleared": removed}


# Batch analysis
@router.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze_logs(
    request: AnalyzeRequest,
    pipeline: IngestionPipeline = Depends(get_pipeline),
    engine: RuleEngine = Depends(get_rule_engine),
    scheduler: BatchScheduler = Depends(get_batch_scheduler),
):
    """
    Classify and enrich a block of log lines.

    This endpoint:
    1. Classifies every non-blank line
    2. Applies the current rules
    3. Sends the batch window to the model, one entry at a time
    """
    start_time = time.time()

    # Validate input
    if not request.log_content or not request.log_content.strip():
        raise HTTPException(status_code=400, detail="Log content is required")

    entries = engine.parse_and_match(request.log_content, pipeline.rules)
    logger.info("Parsed %d log entries", len(entries))

    def on_progress(done: int, total: int) -> None:
        logger.info("Analyzing logs with Ollama AI: %d/%d", done, total)

    window = len(scheduler.select(entries))
    results = await scheduler.run(entries, pipeline.config, on_progress)

    return AnalyzeResponse(
        entries=results,
        analyzed=window,
        processing_time_ms=int((time.time() - start_time) * 1000),
    )


@router.post("/api/analyze/upload", response_model=AnalyzeResponse)
async def analyze_upload(
    file: UploadFile = File(...),
    pipeline: IngestionPipeline = Depends(get_pipeline),
    engine: RuleEngine = Depends(get_rule_engine),
    scheduler: BatchScheduler = Depends(get_batch_scheduler),
):
    """
    Analyze uploaded log file.

    Accepts file upload and processes it through the batch pipeline.
    """
    content = await file.read()

    try:
        log_content = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=400,
            detail="File must be UTF-8 encoded text"
        )

    request = AnalyzeRequest(log_content=log_content)
    return await analyze_logs(request, pipeline, engine, scheduler)
