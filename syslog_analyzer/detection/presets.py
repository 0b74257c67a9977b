"""
Built-in rule catalogue for common OPNsense, Linux and Unifi events.
"""

from typing import Any, Dict, List

from syslog_analyzer.models.log_entry import Category, Severity
from syslog_analyzer.models.rule import Rule, new_rule_id


PRESET_RULES: List[Dict[str, Any]] = [
    {
        "name": "WAN Inbound Traffic Allowed",
        "description": "OPNsense firewall log showing inbound traffic from WAN interface that was allowed",
        "pattern": r"ALLOW.*,in,.*,wan,",
        "category": Category.SECURITY,
        "severity": Severity.CRITICAL,
    },
    {
        "name": "Multiple Failed Login Attempts",
        "description": "Detects failed password attempts which may indicate brute force attack",
        "pattern": r"Failed password|authentication failure|Invalid user",
        "category": Category.SECURITY,
        "severity": Severity.CRITICAL,
    },
    {
        "name": "SSH from Public IP",
        "description": "SSH connection to local network from a public IP address",
        "pattern": r"sshd.*from\s+(?!10\.|172\.(1[6-9]|2[0-9]|3[01])\.|192\.168\.|127\.)",
        "category": Category.SECURITY,
        "severity": Severity.WARNING,
    },
    {
        "name": "Kernel Panic",
        "description": "Detects Linux kernel panic events indicating critical system failure",
        "pattern": r"kernel.*panic|Kernel panic",
        "category": Category.SYSTEM_FAILURE,
        "severity": Severity.CRITICAL,
    },
    {
        "name": "Service Failed to Start",
        "description": "Systemd or init service failed to start",
        "pattern": r"Failed to start|systemd.*failed|service.*failed",
        "category": Category.SYSTEM_FAILURE,
        "severity": Severity.WARNING,
    },
    {
        "name": "Disk Space Critical",
        "description": "Low disk space warnings",
        "pattern": r"No space left on device|disk.*full|filesystem.*full",
        "category": Category.SYSTEM_FAILURE,
        "severity": Severity.CRITICAL,
    },
    {
        "name": "Unifi AP Disconnected",
        "description": "Unifi Access Point disconnection events",
        "pattern": r"hostapd.*disconnected|U[A-Z0-9]+.*disconnected",
        "category": Category.NETWORK,
        "severity": Severity.WARNING,
    },
]


def build_preset_rules() -> List[Rule]:
    """Instantiate the catalogue as enabled rules with fresh ids."""
    return [
        Rule(
            id=new_rule_id("preset"),
            is_regex=True,
            enabled=True,
            preset=True,
            **preset,
        )
        for preset in PRESET_RULES
    ]
