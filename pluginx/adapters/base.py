"""
Adapter contracts.

A source adapter knows how to recognise and parse one ecosystem's plugin
layout; a target adapter knows how to write one ecosystem's layout from the
IR. Adapters are independent implementations selected by name.
"""

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from pluginx.models.ir import PluginIR
from pluginx.models.report import TranslationReport


@runtime_checkable
class SourceAdapter(Protocol):
    name: str

    async def detect(self, path: Path) -> bool:
        """Cheap check that ``path`` holds a plugin of this ecosystem."""
        ...

    async def parse(self, path: Path) -> PluginIR:
        ...


@runtime_checkable
class TargetAdapter(Protocol):
    name: str

    async def generate(
        self,
        ir: PluginIR,
        output_path: Path,
        source_path: Optional[Path] = None,
        source_name: str = "claude",
    ) -> TranslationReport:
        """Write the target layout under ``output_path`` and report what was written.

        ``source_path`` lets the adapter copy auxiliary files (hook scripts);
        ``source_name`` is the source ecosystem recorded in the report.
        """
        ...
