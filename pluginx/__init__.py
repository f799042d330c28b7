"""
pluginx - translate Claude Code plugins into Gemini CLI extensions.
"""

__version__ = "0.1.0"
