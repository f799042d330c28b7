"""
Gemini CLI extension target adapter.

Extension layout:
    my-plugin/
    ├── gemini-extension.json        # manifest (+ mcpServers, contextFileName)
    ├── commands/<name>.toml         # TOML commands
    ├── skills/<name>/SKILL.md       # skills
    ├── agents/<name>.md             # agents
    ├── hooks/hooks.json             # hooks (+ copied scripts)
    ├── GEMINI.md                    # context
    ├── .pluginx-meta.json           # translation metadata
    └── .translation-report.json     # report with parity result
"""

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pluginx import __version__
from pluginx.adapters.gemini.generators.agents import agent_path, generate_agent
from pluginx.adapters.gemini.generators.commands import command_path, generate_command
from pluginx.adapters.gemini.generators.context import generate_context
from pluginx.adapters.gemini.generators.hooks import generate_hooks
from pluginx.adapters.gemini.generators.manifest import generate_manifest
from pluginx.adapters.gemini.generators.skills import generate_skill, skill_path
from pluginx.adapters.gemini.mappings import HOOKS_FILE, MANIFEST_FILE, TARGET_ECOSYSTEM
from pluginx.core.validate import validate_translation
from pluginx.lib.files import contained_path, write_json, write_text
from pluginx.models.ir import PluginIR
from pluginx.models.report import (
    META_FILE,
    REPORT_FILE,
    ComponentSummary,
    SkippedComponent,
    TranslationMeta,
    TranslationReport,
)

logger = logging.getLogger(__name__)


def copy_hook_scripts(source_hooks_dir: Path, dest_hooks_dir: Path) -> int:
    """Copy everything in the source hooks dir except hooks.json. Best-effort."""
    if not source_hooks_dir.is_dir():
        return 0

    copied = 0
    for item in sorted(source_hooks_dir.iterdir()):
        if item.name == HOOKS_FILE:
            continue
        dst = dest_hooks_dir / item.name
        try:
            if item.is_dir():
                shutil.copytree(item, dst, dirs_exist_ok=True)
            else:
                shutil.copy2(item, dst)
            copied += 1
        except OSError as e:
            logger.warning(f"Failed to copy hook script {item}: {e}")
    return copied


class GeminiTargetAdapter:
    name = TARGET_ECOSYSTEM

    async def generate(
        self,
        ir: PluginIR,
        output_path: Path,
        source_path: Optional[Path] = None,
        source_name: str = "claude",
    ) -> TranslationReport:
        out = Path(output_path)
        out.mkdir(parents=True, exist_ok=True)

        translated: list[ComponentSummary] = []
        skipped: list[SkippedComponent] = []
        warnings: list[str] = []

        # Manifest
        manifest = generate_manifest(ir.manifest, ir.mcp_servers, ir.context_files)
        await write_json(out / MANIFEST_FILE, manifest.data)
        translated.append(ComponentSummary(type="manifest", name=ir.manifest.name))
        warnings.extend(manifest.warnings)

        # Commands
        for cmd in ir.commands:
            doc = generate_command(cmd)
            path = contained_path(out / "commands", command_path(cmd.name))
            await write_text(path, doc.content)
            translated.append(ComponentSummary(type="command", name=cmd.name))
            warnings.extend(doc.warnings)

        # Skills
        for skill in ir.skills:
            doc = generate_skill(skill)
            path = contained_path(out / "skills", skill_path(skill.name))
            await write_text(path, doc.content)
            translated.append(ComponentSummary(type="skill", name=skill.name))
            warnings.extend(doc.warnings)

        # Hooks
        if ir.hooks:
            hooks = generate_hooks(ir.hooks)
            if hooks.translated:
                hooks_dir = out / "hooks"
                await write_json(hooks_dir / HOOKS_FILE, hooks.data)
                if source_path is not None:
                    copied = copy_hook_scripts(Path(source_path) / "hooks", hooks_dir)
                    if copied:
                        logger.debug(f"Copied {copied} hook script entries to {hooks_dir}")
            for hook in hooks.translated:
                translated.append(ComponentSummary(type="hook", name=hook.event))
            skipped.extend(hooks.skipped)
            warnings.extend(hooks.warnings)

        # Agents
        for agent in ir.agents:
            doc = generate_agent(agent)
            path = contained_path(out / "agents", agent_path(agent.name))
            await write_text(path, doc.content)
            translated.append(ComponentSummary(type="agent", name=agent.name))
            warnings.extend(doc.warnings)

        # Context
        context = generate_context(ir.context_files)
        if context is not None:
            await write_text(out / context.filename, context.content + "\n")
            translated.append(ComponentSummary(type="context", name=context.filename))

        # MCP servers (written into the manifest)
        for server in ir.mcp_servers:
            translated.append(ComponentSummary(type="mcp-server", name=server.name))

        for u in ir.unsupported:
            skipped.append(SkippedComponent(type=u.type, name=u.name, reason=u.reason))

        meta = TranslationMeta(
            source=source_name,
            target=TARGET_ECOSYSTEM,
            translated_at=datetime.now(timezone.utc).isoformat(),
            translator_version=__version__,
        )
        await write_text(
            out / META_FILE, meta.model_dump_json(by_alias=True, indent=2) + "\n"
        )

        report = TranslationReport(
            source=source_name,
            target=TARGET_ECOSYSTEM,
            plugin_name=ir.manifest.name,
            translated=translated,
            skipped=skipped,
            warnings=warnings,
        )
        report.validation = await validate_translation(ir, report, out)
        await write_text(out / REPORT_FILE, report.to_json())

        logger.info(
            f"Generated {TARGET_ECOSYSTEM} extension '{ir.manifest.name}' at {out}: "
            f"{len(translated)} translated, {len(skipped)} skipped, {len(warnings)} warnings"
        )
        if not report.validation.valid:
            logger.warning(
                f"Parity check failed for '{ir.manifest.name}': "
                + "; ".join(report.validation.parity.errors)
            )
        return report
