"""
Database module for Syslog Analyzer.
"""

from syslog_analyzer.database.db import init_database, get_db
from syslog_analyzer.database.repositories import RuleRepository

__all__ = ["init_database", "get_db", "RuleRepository"]
