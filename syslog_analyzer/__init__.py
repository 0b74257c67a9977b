"""
Syslog Analyzer - real-time log classification with AI enrichment

Classifies OPNsense, Linux and Unifi log lines by source, timestamp and
severity, applies user-defined pattern rules and asks a local Ollama model
to explain flagged entries.
"""

__version__ = "1.0.0"
