"""
Name-keyed registry of source and target adapters.
"""

import logging
from pathlib import Path
from typing import Optional

from pluginx.adapters.base import SourceAdapter, TargetAdapter
from pluginx.lib.errors import AdapterNotFoundError

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Lookup for source parsers and target generators."""

    def __init__(self) -> None:
        self._sources: dict[str, SourceAdapter] = {}
        self._targets: dict[str, TargetAdapter] = {}

    def register_source(self, adapter: SourceAdapter) -> None:
        self._sources[adapter.name] = adapter

    def register_target(self, adapter: TargetAdapter) -> None:
        self._targets[adapter.name] = adapter

    def get_source(self, name: str) -> SourceAdapter:
        adapter = self._sources.get(name)
        if adapter is None:
            raise AdapterNotFoundError(f'Unknown source adapter: "{name}"')
        return adapter

    def get_target(self, name: str) -> TargetAdapter:
        adapter = self._targets.get(name)
        if adapter is None:
            raise AdapterNotFoundError(f'Unknown target adapter: "{name}"')
        return adapter

    def list_sources(self) -> list[str]:
        return list(self._sources)

    def list_targets(self) -> list[str]:
        return list(self._targets)

    async def detect_source(self, path: Path) -> Optional[SourceAdapter]:
        """Return the first source adapter that recognises ``path``."""
        for adapter in self._sources.values():
            if await adapter.detect(path):
                logger.debug(f"Detected {adapter.name} plugin at {path}")
                return adapter
        return None


def create_default_registry() -> AdapterRegistry:
    """Registry with the built-in Claude source and Gemini target."""
    from pluginx.adapters.claude.source import ClaudeSourceAdapter
    from pluginx.adapters.gemini.target import GeminiTargetAdapter

    registry = AdapterRegistry()
    registry.register_source(ClaudeSourceAdapter())
    registry.register_target(GeminiTargetAdapter())
    return registry
