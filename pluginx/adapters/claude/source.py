"""
Claude Code plugin source adapter.

Plugin layout:
    my-plugin/
    ├── .claude-plugin/plugin.json   # manifest (required)
    ├── commands/*.md                # slash commands
    ├── skills/*/SKILL.md            # skills
    ├── agents/*.md                  # subagents
    ├── hooks/hooks.json             # hook definitions (+ scripts)
    ├── .mcp.json                    # MCP servers
    └── CLAUDE.md                    # context
"""

import logging
from pathlib import Path
from typing import Optional

from pluginx.adapters.claude.parsers.agents import parse_claude_agents
from pluginx.adapters.claude.parsers.commands import parse_claude_commands
from pluginx.adapters.claude.parsers.context import parse_claude_context
from pluginx.adapters.claude.parsers.hooks import (
    HOOKS_FILE,
    HooksParseResult,
    parse_claude_hooks_file,
    parse_claude_hooks_object,
)
from pluginx.adapters.claude.parsers.manifest import (
    MANIFEST_PATH,
    EmbeddedConfig,
    parse_claude_manifest,
)
from pluginx.adapters.claude.parsers.mcp import (
    MCP_FILE,
    parse_claude_mcp_file,
    parse_claude_mcp_object,
)
from pluginx.adapters.claude.parsers.skills import parse_claude_skills
from pluginx.models.ir import CommandIR, McpServerIR, PluginIR, UnsupportedComponent

logger = logging.getLogger(__name__)

SOURCE_ECOSYSTEM = "claude"

# Command frontmatter with no equivalent on any target: (attribute, key)
UNSUPPORTED_COMMAND_FEATURES = [
    ("allowed_tools", "allowed-tools"),
    ("disable_model_invocation", "disable-model-invocation"),
]


def _embedded_path(plugin_path: Path, value: str) -> Path:
    return (plugin_path / value).resolve()


def command_feature_gaps(commands: list[CommandIR]) -> list[UnsupportedComponent]:
    unsupported: list[UnsupportedComponent] = []
    for cmd in commands:
        for attr, key in UNSUPPORTED_COMMAND_FEATURES:
            if getattr(cmd, attr):
                unsupported.append(
                    UnsupportedComponent(
                        type="command-feature",
                        name=f"{cmd.name}:{key}",
                        reason=f"{key} has no equivalent in target ecosystems",
                        source_ecosystem=SOURCE_ECOSYSTEM,
                    )
                )
    return unsupported


class ClaudeSourceAdapter:
    name = SOURCE_ECOSYSTEM

    async def detect(self, path: Path) -> bool:
        return (Path(path) / MANIFEST_PATH).is_file()

    async def parse(self, path: Path) -> PluginIR:
        plugin_path = Path(path)
        manifest_result = await parse_claude_manifest(plugin_path)

        commands = await parse_claude_commands(plugin_path)
        skills = await parse_claude_skills(plugin_path)
        agents = await parse_claude_agents(plugin_path)
        context_files = await parse_claude_context(plugin_path)
        hooks = await self._parse_hooks(plugin_path, manifest_result.embedded_hooks)
        mcp_servers = await self._parse_mcp(plugin_path, manifest_result.embedded_mcp_servers)

        unsupported = [*hooks.unsupported, *command_feature_gaps(commands)]

        ir = PluginIR(
            manifest=manifest_result.manifest,
            commands=commands,
            skills=skills,
            hooks=hooks.hooks,
            mcp_servers=mcp_servers,
            context_files=context_files,
            agents=agents,
            unsupported=unsupported,
        )
        logger.info(
            f"Parsed {SOURCE_ECOSYSTEM} plugin '{ir.manifest.name}': "
            f"{len(commands)} commands, {len(skills)} skills, {len(agents)} agents, "
            f"{len(ir.hooks)} hooks, {len(mcp_servers)} MCP servers, "
            f"{len(unsupported)} unsupported"
        )
        return ir

    async def _parse_hooks(
        self, plugin_path: Path, embedded: Optional[EmbeddedConfig]
    ) -> HooksParseResult:
        default_file = (plugin_path / HOOKS_FILE).resolve()
        result = await parse_claude_hooks_file(default_file)

        if isinstance(embedded, str):
            embedded_file = _embedded_path(plugin_path, embedded)
            if embedded_file != default_file:
                result.extend(await parse_claude_hooks_file(embedded_file))
        elif embedded is not None:
            result.extend(parse_claude_hooks_object(embedded, str(plugin_path / MANIFEST_PATH)))
        return result

    async def _parse_mcp(
        self, plugin_path: Path, embedded: Optional[EmbeddedConfig]
    ) -> list[McpServerIR]:
        default_file = (plugin_path / MCP_FILE).resolve()
        servers = await parse_claude_mcp_file(default_file)

        if isinstance(embedded, str):
            embedded_file = _embedded_path(plugin_path, embedded)
            if embedded_file != default_file:
                servers.extend(await parse_claude_mcp_file(embedded_file))
        elif embedded is not None:
            servers.extend(parse_claude_mcp_object(embedded, str(plugin_path / MANIFEST_PATH)))
        return servers
