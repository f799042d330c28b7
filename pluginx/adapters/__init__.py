"""
Ecosystem adapters.

Each ecosystem lives in its own subpackage:
  claude/  - source side: parses Claude Code plugins into the IR
  gemini/  - target side: writes Gemini CLI extensions from the IR
"""

from pluginx.adapters.base import SourceAdapter, TargetAdapter
from pluginx.adapters.registry import AdapterRegistry, create_default_registry

__all__ = ["AdapterRegistry", "SourceAdapter", "TargetAdapter", "create_default_registry"]
