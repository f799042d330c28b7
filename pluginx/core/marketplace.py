"""
Marketplace translation.

Two modes, chosen by the presence of .claude-plugin/marketplace.json:

- descriptor mode: translate every plugin the descriptor lists. Local
  entries resolve against the marketplace root; remote entries are cloned
  to a temporary directory that is removed after their translation.
- scan mode: translate every immediate subdirectory a source adapter
  recognises; other directories are ignored.

Each member goes through the single-plugin pipeline independently. A
member that fails is recorded in `failures` and the run continues; a
malformed descriptor aborts the whole marketplace.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from pluginx.adapters.claude.parsers.marketplace import (
    MarketplacePluginRef,
    ParsedMarketplace,
    has_marketplace_json,
    parse_claude_marketplace,
)
from pluginx.adapters.registry import AdapterRegistry, create_default_registry
from pluginx.core.gemini_cli import GeminiCli
from pluginx.core.git_ops import GitClient
from pluginx.core.translate import attach_cli_validation, select_source_adapter
from pluginx.lib.errors import PluginxError, SourceResolutionError
from pluginx.lib.files import contained_path
from pluginx.models.report import MarketplaceFailure, MarketplaceResult, TranslationReport

logger = logging.getLogger(__name__)

__all__ = [
    "has_marketplace_json",
    "parse_marketplace",
    "translate_marketplace",
]

# Failures of one member never abort the batch
MEMBER_ERRORS = (PluginxError, OSError, ValueError)


async def parse_marketplace(path: Path) -> ParsedMarketplace:
    return await parse_claude_marketplace(Path(path))


class _MarketplaceRun:
    """State shared by the members of one marketplace translation."""

    def __init__(
        self,
        output_dir: Path,
        to: str,
        from_: Optional[str],
        registry: AdapterRegistry,
        gemini: Optional[GeminiCli],
        plugin_names: Optional[set[str]],
    ):
        self.output_dir = output_dir
        self.to = to
        self.from_ = from_
        self.registry = registry
        self.gemini = gemini
        self.plugin_names = plugin_names

    def wanted(self, *names: str) -> bool:
        return self.plugin_names is None or any(n in self.plugin_names for n in names)

    async def translate_member(
        self, plugin_path: Path, alias: Optional[str] = None
    ) -> Optional[TranslationReport]:
        """Parse and generate one member. None when filtered out by name."""
        source_adapter = await select_source_adapter(self.registry, plugin_path, self.from_)
        target_adapter = self.registry.get_target(self.to)

        ir = await source_adapter.parse(plugin_path)
        if not self.wanted(ir.manifest.name, *([alias] if alias else [])):
            return None

        output = contained_path(self.output_dir, Path(ir.manifest.name))
        logger.info(f"Translating marketplace member '{ir.manifest.name}' into {output}")
        report = await target_adapter.generate(
            ir, output, source_path=plugin_path, source_name=source_adapter.name
        )
        await attach_cli_validation(report, output, self.gemini)
        return report


async def _run_descriptor(
    run: _MarketplaceRun, source: Path, git: GitClient, result: MarketplaceResult
) -> None:
    parsed = await parse_marketplace(source)
    result.name = parsed.name

    for ref in parsed.plugins:
        # Remote members are only cloned when they can match the filter
        if ref.type == "remote" and not run.wanted(ref.name):
            continue
        try:
            report = await _translate_ref(run, ref, git)
        except MEMBER_ERRORS as e:
            logger.error(f"Failed to translate marketplace plugin '{ref.name}': {e}")
            result.failures.append(MarketplaceFailure(name=ref.name, error=str(e)))
            continue
        if report is not None:
            result.reports.append(report)


async def _translate_ref(
    run: _MarketplaceRun, ref: MarketplacePluginRef, git: GitClient
) -> Optional[TranslationReport]:
    if ref.type == "local":
        plugin_path = Path(ref.resolved_path)
        if not plugin_path.is_dir():
            raise SourceResolutionError(f"Local path not found: {plugin_path}")
        return await run.translate_member(plugin_path, alias=ref.name)

    async with git.temporary_clone(ref.resolved_path) as clone_dir:
        return await run.translate_member(clone_dir, alias=ref.name)


async def _run_scan(run: _MarketplaceRun, source: Path, result: MarketplaceResult) -> None:
    for entry in sorted(p for p in source.iterdir() if p.is_dir()):
        if run.from_:
            if not await run.registry.get_source(run.from_).detect(entry):
                continue
        elif await run.registry.detect_source(entry) is None:
            continue

        try:
            report = await run.translate_member(entry, alias=entry.name)
        except MEMBER_ERRORS as e:
            logger.error(f"Failed to translate plugin in {entry}: {e}")
            result.failures.append(MarketplaceFailure(name=entry.name, error=str(e)))
            continue
        if report is not None:
            result.reports.append(report)


async def translate_marketplace(
    source: Path,
    output_dir: Path,
    to: str = "gemini",
    from_: Optional[str] = None,
    registry: Optional[AdapterRegistry] = None,
    git: Optional[GitClient] = None,
    gemini: Optional[GeminiCli] = None,
    plugin_names: Optional[Iterable[str]] = None,
) -> MarketplaceResult:
    """Translate every plugin of a marketplace into `output_dir/<plugin name>`.

    `plugin_names` restricts the run to members with those names (the
    descriptor entry name or the plugin's manifest name).
    """
    source = Path(source)
    if not source.is_dir():
        raise SourceResolutionError(f"Marketplace path not found: {source}")

    run = _MarketplaceRun(
        output_dir=Path(output_dir),
        to=to,
        from_=from_,
        registry=registry or create_default_registry(),
        gemini=gemini,
        plugin_names=set(plugin_names) if plugin_names is not None else None,
    )
    result = MarketplaceResult(name=source.name)

    if has_marketplace_json(source):
        await _run_descriptor(run, source, git or GitClient(), result)
    else:
        await _run_scan(run, source, result)

    logger.info(
        f"Marketplace '{result.name}': {len(result.reports)} translated, "
        f"{len(result.failures)} failed"
    )
    return result
