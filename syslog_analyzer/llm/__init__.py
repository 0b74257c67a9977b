"""
LLM integration module.
"""

from syslog_analyzer.llm.client import OllamaClient, EnrichmentError
from syslog_analyzer.llm.analyzer import EnrichmentClient
from syslog_analyzer.llm.prompts import PromptTemplates

__all__ = ["OllamaClient", "EnrichmentError", "EnrichmentClient", "PromptTemplates"]
