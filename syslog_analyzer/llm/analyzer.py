"""
Entry enrichment - asks the model to judge and explain one log entry.
"""

import logging
import re
from enum import Enum
from typing import Optional, Type, TypeVar

from syslog_analyzer.config import get_settings
from syslog_analyzer.llm.client import OllamaClient, EnrichmentError
from syslog_analyzer.llm.prompts import PromptTemplates
from syslog_analyzer.models.enrichment import EnrichmentConfig
from syslog_analyzer.models.log_entry import LogEntry, Category, Severity


logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Labeled fields in the model's reply
CATEGORY_PATTERN = re.compile(r"Category:\s*\[?(\w+[-\w]*)", re.IGNORECASE)
SEVERITY_PATTERN = re.compile(r"Severity:\s*\[?(\w+)", re.IGNORECASE)
ANALYSIS_PATTERN = re.compile(r"Analysis:\s*(.+?)(?:\n|$)", re.IGNORECASE)


def _to_enum(enum_type: Type[E], value: Optional[str]) -> Optional[E]:
    if not value:
        return None
    try:
        return enum_type(value.lower())
    except ValueError:
        return None


class EnrichmentClient:
    """
    Enriches a single entry via the configured model.

    Never raises: transport and API failures come back as an entry whose
    `ai_analysis` holds an error description.
    """

    def __init__(self, client: Optional[OllamaClient] = None):
        self.client = client or OllamaClient()
        self.max_chars = get_settings().analysis_max_chars

    async def analyze(self, entry: LogEntry, config: EnrichmentConfig) -> LogEntry:
        """
        Ask the model about an entry and merge its answer.

        Args:
            entry: Entry to enrich
            config: Endpoint and model to use for this call

        Returns:
            Copy of the entry with category, severity and ai_analysis updated
        """
        prompt = PromptTemplates.format_entry_prompt(entry.message)

        try:
            reply = await self.client.generate(prompt, config)
        except EnrichmentError as e:
            logger.warning("Enrichment failed for %s: %s", entry.id, e)
            return entry.model_copy(update={"ai_analysis": f"Error: {e}"})
        except Exception as e:
            logger.exception("Unexpected enrichment failure for %s", entry.id)
            return entry.model_copy(update={"ai_analysis": f"Error: {str(e) or 'Failed to analyze'}"})

        return self.apply_reply(entry, reply)

    def apply_reply(self, entry: LogEntry, reply: str) -> LogEntry:
        """
        Extract the labeled fields from a reply.

        Fields that are missing or hold values outside the known categories
        and severities keep the entry's current value. A missing analysis is
        replaced by the start of the raw reply.
        """
        category_match = CATEGORY_PATTERN.search(reply)
        severity_match = SEVERITY_PATTERN.search(reply)
        analysis_match = ANALYSIS_PATTERN.search(reply)

        category = _to_enum(Category, category_match.group(1) if category_match else None)
        severity = _to_enum(Severity, severity_match.group(1) if severity_match else None)
        analysis = analysis_match.group(1).strip() if analysis_match else None

        return entry.model_copy(
            update={
                "category": category or entry.category,
                "severity": severity or entry.severity,
                "ai_analysis": analysis or reply[:self.max_chars],
            }
        )
