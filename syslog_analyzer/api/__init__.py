"""
HTTP API consumed by the viewer, rule manager, config form and transport bridge.
"""
