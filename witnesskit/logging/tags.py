# witnesskit/logging/tags.py
"""
Log subsystem tags.

Prefixing messages with these keeps log output searchable per subsystem.
"""

SCHEMA = "[SCHEMA]"
VARIANCE = "[VARIANCE]"
EMIT = "[EMIT]"
TRANSFORM = "[TRANSFORM]"
RENDER = "[RENDER]"
REGISTRY = "[REGISTRY]"
CLI = "[CLI]"
