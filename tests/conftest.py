"""
Pytest configuration and fixtures.
"""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from pluginx.core.exec_utils import CommandFailed, CommandResult
from pluginx.core.gemini_cli import GeminiCli
from pluginx.core.git_ops import GitClient
from pluginx.core.manager import PluginxContext

os.environ["PLUGINX_LOG_LEVEL"] = "WARNING"


# ---------------------------------------------------------------------------
# Plugin fixtures
# ---------------------------------------------------------------------------


def write_plugin(
    root: Path,
    name: str = "demo-plugin",
    manifest: Optional[dict[str, Any]] = None,
    commands: Optional[dict[str, str]] = None,
    skills: Optional[dict[str, str]] = None,
    agents: Optional[dict[str, str]] = None,
    hooks: Optional[dict[str, Any]] = None,
    mcp: Optional[dict[str, Any]] = None,
    context: Optional[str] = None,
    hook_scripts: Optional[dict[str, str]] = None,
) -> Path:
    """Create a Claude plugin directory at root/name.

    `commands` and `agents` map relative file stems to file contents, `skills`
    maps skill directory names to SKILL.md contents.
    """
    plugin = root / name
    (plugin / ".claude-plugin").mkdir(parents=True, exist_ok=True)
    data = {"name": name, "version": "1.0.0", "description": f"The {name} plugin"}
    if manifest is not None:
        data = manifest
    (plugin / ".claude-plugin" / "plugin.json").write_text(json.dumps(data))

    for rel, content in (commands or {}).items():
        path = plugin / "commands" / f"{rel}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    for skill_name, content in (skills or {}).items():
        path = plugin / "skills" / skill_name / "SKILL.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    for agent_name, content in (agents or {}).items():
        path = plugin / "agents" / f"{agent_name}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    if hooks is not None:
        (plugin / "hooks").mkdir(exist_ok=True)
        (plugin / "hooks" / "hooks.json").write_text(json.dumps(hooks))

    for rel, content in (hook_scripts or {}).items():
        path = plugin / "hooks" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    if mcp is not None:
        (plugin / ".mcp.json").write_text(json.dumps(mcp))

    if context is not None:
        (plugin / "CLAUDE.md").write_text(context)

    return plugin


def write_marketplace(root: Path, name: str, plugins: list[dict[str, Any]]) -> Path:
    """Create a marketplace root with a .claude-plugin/marketplace.json descriptor."""
    (root / ".claude-plugin").mkdir(parents=True, exist_ok=True)
    (root / ".claude-plugin" / "marketplace.json").write_text(
        json.dumps({"name": name, "plugins": plugins})
    )
    return root


@pytest.fixture
def make_plugin(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing Claude plugins under tmp_path/plugins."""
    root = tmp_path / "plugins"
    root.mkdir(exist_ok=True)

    def _make(name: str = "demo-plugin", **kwargs) -> Path:
        return write_plugin(root, name, **kwargs)

    return _make


@pytest.fixture
def make_marketplace() -> Callable[..., Path]:
    return write_marketplace


@pytest.fixture
def full_plugin(make_plugin) -> Path:
    """A plugin using every component kind the Claude parser knows."""
    return make_plugin(
        "full-plugin",
        manifest={
            "name": "full-plugin",
            "version": "2.1.0",
            "description": "Everything at once",
            "author": {"name": "Ada", "email": "ada@example.com"},
            "license": "MIT",
        },
        commands={
            "review": (
                "---\n"
                "description: Review the staged diff\n"
                "argument-hint: <focus>\n"
                "---\n"
                "Diff:\n!`git diff --cached`\nFocus on $ARGUMENTS\n"
            ),
            "git/commit": "---\ndescription: Commit\nallowed-tools: Bash, Read\n---\nCommit it\n",
        },
        skills={
            "tdd": (
                "---\n"
                "name: tdd\n"
                "description: Test first\n"
                "allowed-tools: Bash\n"
                "---\n"
                "Run ${CLAUDE_PLUGIN_ROOT}/scripts/test.sh\n"
            ),
        },
        agents={
            "reviewer": (
                "---\nname: reviewer\ndescription: Reviews code\nmodel: opus\ncolor: blue\n---\n"
                "You review code.\n"
            ),
        },
        hooks={
            "hooks": {
                "PreToolUse": [
                    {
                        "matcher": "Write|Edit",
                        "hooks": [
                            {
                                "type": "command",
                                "command": "${CLAUDE_PLUGIN_ROOT}/hooks/check.sh",
                                "timeout": 10,
                            }
                        ],
                    }
                ],
                "Stop": [{"hooks": [{"type": "command", "command": "echo done"}]}],
                "SubagentStop": [{"hooks": [{"type": "command", "command": "echo sub"}]}],
            }
        },
        hook_scripts={"check.sh": "#!/bin/sh\nexit 0\n", "lib/util.sh": "echo util\n"},
        mcp={
            "mcpServers": {
                "db": {
                    "command": "${CLAUDE_PLUGIN_ROOT}/bin/db",
                    "args": ["--root", "$CLAUDE_PLUGIN_ROOT/data"],
                    "env": {"DB_MODE": "ro"},
                },
                "search": {"type": "http", "url": "https://search.example.com/mcp"},
            }
        },
        context="# Full plugin\n\nUse it wisely.\n",
    )


# ---------------------------------------------------------------------------
# Fake executables
# ---------------------------------------------------------------------------


class FakeExec:
    """Stand-in for ExecFn. Records calls and answers from registered handlers.

    A handler matches when the command is equal and every word in `words`
    appears in the argument list. Handlers registered later win; `times`
    limits how often a handler answers before it is discarded.
    """

    def __init__(self):
        self.calls: list[list[str]] = []
        self._handlers: list[dict[str, Any]] = []

    def on(
        self,
        cmd: str,
        *words: str,
        stdout: str = "",
        error: Optional[str] = None,
        action: Optional[Callable[[list[str]], None]] = None,
        times: Optional[int] = None,
    ) -> "FakeExec":
        self._handlers.append(
            {"cmd": cmd, "words": words, "stdout": stdout, "error": error,
             "action": action, "times": times}
        )
        return self

    def calls_for(self, cmd: str, word: str) -> list[list[str]]:
        return [c for c in self.calls if c[0] == cmd and word in c[1:]]

    async def __call__(self, cmd: str, args: list[str]) -> CommandResult:
        self.calls.append([cmd, *args])
        for handler in reversed(self._handlers):
            if handler["cmd"] != cmd or not all(w in args for w in handler["words"]):
                continue
            if handler["times"] is not None:
                handler["times"] -= 1
                if handler["times"] == 0:
                    self._handlers.remove(handler)
            if handler["action"] is not None:
                handler["action"](args)
            if handler["error"] is not None:
                raise CommandFailed([cmd, *args], 1, handler["error"])
            return CommandResult(stdout=handler["stdout"], stderr="")
        return CommandResult(stdout="", stderr="")


def clone_from(template: Path) -> Callable[[list[str]], None]:
    """FakeExec action: `git clone ... <dest>` copies `template` to dest."""

    def _clone(args: list[str]) -> None:
        shutil.copytree(template, Path(args[-1]), dirs_exist_ok=True)

    return _clone


@pytest.fixture
def fake_exec() -> FakeExec:
    return FakeExec()


@pytest.fixture
def clone_action() -> Callable[[Path], Callable[[list[str]], None]]:
    """`fake_exec.on("git", "clone", action=clone_action(template))`."""
    return clone_from


@pytest.fixture
def ctx(tmp_path: Path, fake_exec: FakeExec) -> PluginxContext:
    """Manager context rooted in tmp_path, with fake git and gemini."""
    home = tmp_path / "home"
    return PluginxContext(
        state_path=home / "state.json",
        config_path=home / "config.yaml",
        sources_dir=home / "sources",
        translations_dir=tmp_path / "translations",
        git=GitClient(fake_exec),
        gemini=GeminiCli(fake_exec),
    )
