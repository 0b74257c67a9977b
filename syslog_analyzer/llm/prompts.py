"""
Prompt template for log entry enrichment.
"""

ENTRY_ANALYSIS_PROMPT_TEMPLATE = """Analyze this system log entry and determine:
1. Is this a security concern? (intrusion attempt, unauthorized access, etc.)
2. Is this a system failure? (crash, service down, hardware issue, etc.)
3. Severity level (critical, warning, info, normal)
4. Brief explanation of the issue

Log: {message}

Respond in this format:
Category: [security/system-failure/network/other]
Severity: [critical/warning/info/normal]
Analysis: [brief explanation]"""


class PromptTemplates:
    """Container for prompt templates with helper methods."""

    ENTRY_ANALYSIS = ENTRY_ANALYSIS_PROMPT_TEMPLATE

    @staticmethod
    def format_entry_prompt(message: str) -> str:
        """Format the analysis prompt; the log message is the only variable."""
        return ENTRY_ANALYSIS_PROMPT_TEMPLATE.format(message=message)
