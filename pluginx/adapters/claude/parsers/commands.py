"""
Claude slash commands: commands/**/*.md

Nested directories become namespaced names, e.g. commands/git/commit.md is
the command "git:commit".
"""

import re
from pathlib import Path
from typing import Any, Optional

from pluginx.adapters.claude.parsers.files import as_text, read_text, warn_duplicates
from pluginx.adapters.claude.parsers.frontmatter import parse_frontmatter
from pluginx.models.ir import CommandIR, ShellInjection

SHELL_INJECTION = re.compile(r"!`([^`]+)`")


def extract_shell_injections(content: str) -> list[ShellInjection]:
    return [
        ShellInjection(original=m.group(0), command=m.group(1))
        for m in SHELL_INJECTION.finditer(content)
    ]


def _allowed_tools(value: Any) -> Optional[list[str]]:
    if not value:
        return None
    if isinstance(value, list):
        return [as_text(t).strip() for t in value]
    return [t.strip() for t in as_text(value).split(",") if t.strip()]


def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def parse_command_file(name: str, raw: str, source: str = "") -> CommandIR:
    parsed = parse_frontmatter(raw, source)
    data = parsed.data
    content = parsed.content.strip()

    hint = data.get("argument-hint")
    return CommandIR(
        name=name,
        description=as_text(data.get("description")),
        prompt=content,
        argument_hint=as_text(hint) if hint is not None else None,
        shell_injections=extract_shell_injections(content),
        allowed_tools=_allowed_tools(data.get("allowed-tools")),
        disable_model_invocation=_is_true(data.get("disable-model-invocation")),
    )


async def parse_claude_commands(plugin_path: Path) -> list[CommandIR]:
    commands_dir = plugin_path / "commands"
    if not commands_dir.is_dir():
        return []

    commands: list[CommandIR] = []
    for path in commands_dir.rglob("*.md"):
        rel = path.relative_to(commands_dir).with_suffix("")
        name = ":".join(rel.parts)
        raw = await read_text(path)
        commands.append(parse_command_file(name, raw or "", str(path)))

    commands.sort(key=lambda c: c.name)
    warn_duplicates("command", (c.name for c in commands), plugin_path)
    return commands
