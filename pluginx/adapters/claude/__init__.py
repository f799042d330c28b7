"""
Claude Code plugins as a translation source.
"""

from pluginx.adapters.claude.source import ClaudeSourceAdapter

__all__ = ["ClaudeSourceAdapter"]
