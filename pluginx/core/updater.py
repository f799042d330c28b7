"""
Update engine: refresh tracked sources and re-translate what changed.

A git plugin is skipped when its checkout is still at the recorded commit
and the extension on disk was written by this translator version. Any other
case (new commit, new translator, missing metadata, local source, --force)
re-runs the full pipeline and relinks the extension.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pluginx import __version__
from pluginx.core.consent import require_consent
from pluginx.core.manager import PluginxContext, link_consent, now_iso, source_revision
from pluginx.core.marketplace import translate_marketplace
from pluginx.core.state import add_plugin, find_plugin, read_translation_meta
from pluginx.core.translate import translate
from pluginx.lib.errors import PluginxError
from pluginx.models.report import TranslationReport
from pluginx.models.tracking import TrackedPlugin

logger = logging.getLogger(__name__)

# Failures of one tracked plugin never abort the batch
UPDATE_ERRORS = (PluginxError, OSError, ValueError)


@dataclass
class UpdateFailure:
    name: str
    error: str


@dataclass
class UpdateResult:
    reports: list[TranslationReport] = field(default_factory=list)
    failures: list[UpdateFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # names left untouched


def is_up_to_date(
    plugin: TrackedPlugin, current_commit: Optional[str], force: bool = False
) -> bool:
    """True when re-translating `plugin` would produce the same output."""
    if force or plugin.source_type != "git":
        return False
    if not plugin.source_commit or current_commit != plugin.source_commit:
        return False

    meta = read_translation_meta(Path(plugin.output_path))
    if meta is None:
        logger.info(f"No translation metadata for {plugin.name}, re-translating")
        return False
    if meta.translator_version != __version__:
        logger.info(
            f"Translator version changed for {plugin.name} "
            f"({meta.translator_version} -> {__version__}), re-translating"
        )
        return False
    return True


async def _retranslate(ctx: PluginxContext, plugin: TrackedPlugin) -> list[TranslationReport]:
    source_path = Path(plugin.source_path)
    if plugin.type == "marketplace":
        result = await translate_marketplace(
            source_path,
            ctx.translations_dir,
            registry=ctx.registry,
            git=ctx.git,
            gemini=ctx.validator,
            plugin_names=[plugin.name],
        )
        if result.failures:
            raise PluginxError(result.failures[0].error)
        if not result.reports:
            raise PluginxError(
                f"Plugin '{plugin.name}' no longer found in marketplace {source_path}"
            )
        return result.reports

    report = await translate(
        source_path, Path(plugin.output_path), registry=ctx.registry, gemini=ctx.validator
    )
    return [report]


async def run_update(
    ctx: PluginxContext,
    names: list[str],
    force: bool = False,
    consent: bool = False,
) -> UpdateResult:
    """Update the named tracked plugins in order, continuing past failures.

    The tracking store is written once, after the last name.
    """
    status = require_consent(ctx.consent_store, consent)
    store = ctx.store
    state = store.read()
    result = UpdateResult()
    total = len(names)

    for i, name in enumerate(names, start=1):
        prefix = f"[{i}/{total}] " if total > 1 else ""
        plugin = find_plugin(state, name)
        if plugin is None:
            logger.error(f"{prefix}Plugin not found: {name}")
            result.failures.append(UpdateFailure(name=name, error=f"Plugin not found: {name}"))
            continue

        try:
            current_commit = None
            if plugin.source_type == "git":
                logger.info(f"{prefix}Pulling latest for {name}...")
                await ctx.git.pull(Path(plugin.source_path))
                current_commit = await source_revision(ctx, Path(plugin.source_path), "git")

            if is_up_to_date(plugin, current_commit, force):
                logger.info(f"{prefix}No changes for {name}, skipping")
                result.skipped.append(name)
                continue

            logger.info(f"{prefix}Converting {name}...")
            reports = await _retranslate(ctx, plugin)

            for report in reports:
                output_path = (
                    Path(plugin.output_path)
                    if plugin.type == "single"
                    else ctx.translations_dir / report.plugin_name
                )
                logger.info(f"{prefix}Linking {report.plugin_name}...")
                await ctx.gemini.link(output_path, link_consent(status, consent))
                result.reports.append(report)

            state = add_plugin(
                state,
                plugin.model_copy(
                    update={
                        "last_translated": now_iso(),
                        "source_commit": current_commit or plugin.source_commit,
                    }
                ),
            )
            logger.info(f"{prefix}Updated {name}")
        except UPDATE_ERRORS as e:
            logger.error(f"{prefix}Failed to update {name}: {e}")
            result.failures.append(UpdateFailure(name=name, error=str(e)))

    store.write(state)
    return result


async def run_update_all(
    ctx: PluginxContext, force: bool = False, consent: bool = False
) -> UpdateResult:
    names = [p.name for p in ctx.store.read().plugins]
    if not names:
        logger.info("No plugins tracked. Nothing to update.")
        return UpdateResult()
    return await run_update(ctx, names, force=force, consent=consent)
