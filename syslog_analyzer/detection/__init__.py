"""
Rule matching module.
"""

from syslog_analyzer.detection.engine import RuleEngine
from syslog_analyzer.detection.presets import PRESET_RULES, build_preset_rules

__all__ = ["RuleEngine", "PRESET_RULES", "build_preset_rules"]
