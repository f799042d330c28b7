"""
Tracked plugin management: add, list, status, remove.

Every operation takes a `PluginxContext` holding the paths and the external
collaborators, so tests can point it at a temp directory and fake
executables.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional, Union

from pluginx.adapters.registry import AdapterRegistry, create_default_registry
from pluginx.config import Settings
from pluginx.core.consent import ConsentStore, ConsentStatus, require_consent
from pluginx.core.exec_utils import ExecFn, make_exec
from pluginx.core.gemini_cli import GeminiCli
from pluginx.core.git_ops import GitClient, derive_name
from pluginx.core.marketplace import translate_marketplace
from pluginx.core.state import TrackingStore, add_plugin, find_plugin, remove_plugin
from pluginx.core.translate import translate
from pluginx.lib.errors import (
    ErrorCode,
    ExternalToolError,
    SourceResolutionError,
    first_line,
)
from pluginx.models.report import MarketplaceFailure, TranslationReport
from pluginx.models.tracking import SourceType, TrackedPlugin

logger = logging.getLogger(__name__)

LOCAL_PATH_PREFIXES = ("/", "./", "../", "~")


@dataclass
class PluginxContext:
    """Paths and collaborators shared by the manager and update operations."""

    state_path: Path
    config_path: Path
    sources_dir: Path
    translations_dir: Path
    git: GitClient
    gemini: GeminiCli
    registry: AdapterRegistry = field(default_factory=create_default_registry)
    validate_with_gemini: bool = False

    @classmethod
    def from_settings(
        cls, settings: Settings, exec_fn: Optional[ExecFn] = None
    ) -> "PluginxContext":
        return cls(
            state_path=settings.state_path,
            config_path=settings.config_path,
            sources_dir=settings.sources_dir,
            translations_dir=settings.output_root,
            git=GitClient(exec_fn or make_exec(settings.git_timeout)),
            gemini=GeminiCli(exec_fn),
            validate_with_gemini=settings.gemini_validate,
        )

    @property
    def store(self) -> TrackingStore:
        return TrackingStore(self.state_path)

    @property
    def consent_store(self) -> ConsentStore:
        return ConsentStore(self.config_path)

    @property
    def validator(self) -> Optional[GeminiCli]:
        """Gemini CLI used for post-translation validation, when enabled."""
        return self.gemini if self.validate_with_gemini else None


@dataclass
class ResolvedSource:
    name: str
    source_path: Path
    source_type: SourceType
    source_url: Optional[str] = None


@dataclass
class AddResult:
    report: TranslationReport
    plugin: TrackedPlugin


@dataclass
class AddMarketplaceResult:
    reports: list[TranslationReport] = field(default_factory=list)
    plugins: list[TrackedPlugin] = field(default_factory=list)
    failures: list[MarketplaceFailure] = field(default_factory=list)


@dataclass
class PluginStatus:
    name: str
    last_translated: str
    up_to_date: Union[bool, Literal["unknown"]]
    source_url: Optional[str] = None


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def looks_like_local_path(source: str) -> bool:
    return source.startswith(LOCAL_PATH_PREFIXES)


async def resolve_source(source: str, git: GitClient, sources_dir: Path) -> ResolvedSource:
    """Turn a CLI source argument into a directory on disk.

    Existing paths are used in place. Anything else is treated as a git
    URL (or owner/repo shorthand) and cloned under `sources_dir`.
    """
    expanded = Path(source).expanduser()
    if expanded.exists():
        local_path = expanded.resolve()
        return ResolvedSource(name=local_path.name, source_path=local_path, source_type="local")

    if looks_like_local_path(source):
        raise SourceResolutionError(f"Local path not found: {expanded}")

    name = derive_name(source)
    try:
        source_path = await git.clone_persistent(source, name, sources_dir)
    except ExternalToolError as e:
        if e.code == ErrorCode.REPO_NOT_FOUND:
            raise SourceResolutionError(f"Repository not found: {source}", e.code) from e
        if e.code == ErrorCode.HOST_UNREACHABLE:
            raise SourceResolutionError(f"Cannot reach remote host for: {source}", e.code) from e
        raise SourceResolutionError(
            f"Failed to clone {source}: {first_line(str(e))}", e.code
        ) from e

    return ResolvedSource(name=name, source_path=source_path, source_type="git", source_url=source)


async def source_revision(
    ctx: PluginxContext, source_path: Path, source_type: SourceType
) -> Optional[str]:
    """Current commit of a git source, or None for local sources or on failure."""
    if source_type != "git":
        return None
    try:
        return await ctx.git.current_revision(source_path)
    except ExternalToolError as e:
        logger.warning(f"Could not read revision of {source_path}: {e}")
        return None


def link_consent(status: ConsentStatus, consent_flag: bool) -> bool:
    """Whether to pass --consent to `gemini extensions link`."""
    return consent_flag or status == "bypass"


async def add_plugin_source(ctx: PluginxContext, source: str, consent: bool = False) -> AddResult:
    status = require_consent(ctx.consent_store, consent)
    resolved = await resolve_source(source, ctx.git, ctx.sources_dir)
    output_path = ctx.translations_dir / resolved.name

    report = await translate(
        resolved.source_path, output_path, registry=ctx.registry, gemini=ctx.validator
    )
    await ctx.gemini.link(output_path, link_consent(status, consent))

    plugin = TrackedPlugin(
        name=resolved.name,
        source_type=resolved.source_type,
        source_url=resolved.source_url,
        source_path=str(resolved.source_path),
        output_path=str(output_path),
        type="single",
        last_translated=now_iso(),
        source_commit=await source_revision(ctx, resolved.source_path, resolved.source_type),
    )

    store = ctx.store
    store.write(add_plugin(store.read(), plugin))
    logger.info(f"Added plugin '{plugin.name}' from {source}")
    return AddResult(report=report, plugin=plugin)


async def add_marketplace_source(
    ctx: PluginxContext, source: str, consent: bool = False
) -> AddMarketplaceResult:
    status = require_consent(ctx.consent_store, consent)
    resolved = await resolve_source(source, ctx.git, ctx.sources_dir)

    marketplace = await translate_marketplace(
        resolved.source_path,
        ctx.translations_dir,
        registry=ctx.registry,
        git=ctx.git,
        gemini=ctx.validator,
    )
    commit = await source_revision(ctx, resolved.source_path, resolved.source_type)

    result = AddMarketplaceResult(failures=list(marketplace.failures))
    store = ctx.store
    state = store.read()
    for report in marketplace.reports:
        output_path = ctx.translations_dir / report.plugin_name
        try:
            await ctx.gemini.link(output_path, link_consent(status, consent))
        except ExternalToolError as e:
            logger.error(f"Failed to link '{report.plugin_name}': {e}")
            result.failures.append(MarketplaceFailure(name=report.plugin_name, error=str(e)))
            continue

        plugin = TrackedPlugin(
            name=report.plugin_name,
            source_type=resolved.source_type,
            source_url=resolved.source_url,
            source_path=str(resolved.source_path),
            output_path=str(output_path),
            type="marketplace",
            last_translated=now_iso(),
            source_commit=commit,
        )
        state = add_plugin(state, plugin)
        result.reports.append(report)
        result.plugins.append(plugin)

    store.write(state)
    logger.info(
        f"Added marketplace '{marketplace.name}': {len(result.plugins)} plugins, "
        f"{len(result.failures)} failures"
    )
    return result


def list_tracked(ctx: PluginxContext) -> list[TrackedPlugin]:
    return ctx.store.read().plugins


def remove_tracked(ctx: PluginxContext, name: str) -> bool:
    """Stop tracking `name`. The Gemini extension itself stays installed."""
    store = ctx.store
    state = store.read()
    if find_plugin(state, name) is None:
        return False
    store.write(remove_plugin(state, name))
    logger.info(f"Removed '{name}' from tracking")
    return True


async def plugin_status(ctx: PluginxContext) -> list[PluginStatus]:
    """Compare each git source's checkout with the revision last translated."""
    statuses = []
    for plugin in ctx.store.read().plugins:
        up_to_date: Union[bool, Literal["unknown"]] = "unknown"
        if plugin.source_type == "git" and plugin.source_commit:
            current = await source_revision(ctx, Path(plugin.source_path), "git")
            if current is not None:
                up_to_date = current == plugin.source_commit
        statuses.append(
            PluginStatus(
                name=plugin.name,
                last_translated=plugin.last_translated,
                up_to_date=up_to_date,
                source_url=plugin.source_url,
            )
        )
    return statuses
