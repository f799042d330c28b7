"""
Claude context file: CLAUDE.md at the plugin root.
"""

from pathlib import Path

from pluginx.adapters.claude.parsers.files import read_text
from pluginx.models.ir import ContextFileIR

CONTEXT_FILES = ["CLAUDE.md"]


async def parse_claude_context(plugin_path: Path) -> list[ContextFileIR]:
    context_files: list[ContextFileIR] = []
    for filename in CONTEXT_FILES:
        content = await read_text(plugin_path / filename)
        if content is not None:
            context_files.append(ContextFileIR(filename=filename, content=content))
    return context_files
