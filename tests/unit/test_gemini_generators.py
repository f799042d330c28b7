"""
Tests for the pure Gemini generators.
"""

import tomllib
from pathlib import Path

import frontmatter
import pytest

from pluginx.adapters.gemini.generators.agents import agent_path, generate_agent
from pluginx.adapters.gemini.generators.commands import (
    command_path,
    generate_command,
    toml_basic_string,
    toml_multiline_string,
)
from pluginx.adapters.gemini.generators.context import generate_context
from pluginx.adapters.gemini.generators.hooks import generate_hooks
from pluginx.adapters.gemini.generators.manifest import generate_manifest, generate_mcp_server_config
from pluginx.adapters.gemini.generators.skills import generate_skill, skill_path
from pluginx.models.ir import (
    AgentIR,
    AuthorIR,
    CommandIR,
    ContextFileIR,
    HookIR,
    ManifestIR,
    McpServerIR,
    SkillIR,
)


def hook(event: str, command: str = "run.sh", matcher=None, timeout: int = 30000) -> HookIR:
    return HookIR(event=event, matcher=matcher, command=command, timeout=timeout, source_event=event)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class TestManifest:
    def test_allow_listed_keys_only(self):
        manifest = ManifestIR(
            name="p",
            version="1.0.0",
            description="d",
            author=AuthorIR(name="Ada"),
            license="MIT",
        )
        output = generate_manifest(manifest, [], [])
        assert output.data == {"name": "p", "version": "1.0.0", "description": "d"}
        assert output.warnings == [
            'manifest "p": dropped unsupported field "author"',
            'manifest "p": dropped unsupported field "license"',
        ]

    def test_mcp_servers_and_context(self):
        servers = [
            McpServerIR(
                name="db",
                command="${CLAUDE_PLUGIN_ROOT}/bin/db",
                args=["--data", "$CLAUDE_PLUGIN_ROOT/data"],
                env={"MODE": "ro"},
            ),
            McpServerIR(name="api", type="http", url="https://api.example.com", headers={"X": "1"}),
        ]
        output = generate_manifest(
            ManifestIR(name="p"), servers, [ContextFileIR(filename="CLAUDE.md", content="c")]
        )
        assert output.data["mcpServers"] == {
            "db": {
                "command": "${extensionPath}/bin/db",
                "args": ["--data", "${extensionPath}/data"],
                "env": {"MODE": "ro"},
            },
            "api": {"url": "https://api.example.com", "headers": {"X": "1"}},
        }
        assert output.data["contextFileName"] == "GEMINI.md"
        assert len([w for w in output.warnings if w.startswith('mcp server "db"')]) == 2

    def test_no_optional_sections(self):
        data = generate_manifest(ManifestIR(name="p"), [], []).data
        assert "mcpServers" not in data
        assert "contextFileName" not in data

    def test_mcp_label_reported_once(self):
        server = McpServerIR(name="s", command="${CLAUDE_PLUGIN_ROOT}/a", cwd="${CLAUDE_PLUGIN_ROOT}")
        _, warnings = generate_mcp_server_config(server)
        assert warnings == ['mcp server "s": rewrote ${CLAUDE_PLUGIN_ROOT} -> ${extensionPath}']


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestCommands:
    def test_toml_round_trip(self):
        cmd = CommandIR(
            name="review",
            description='Say "hi" \\ now',
            prompt='Diff: !`git diff`\nArgs: $ARGUMENTS\nQuote: """ and a tail "',
        )
        doc = generate_command(cmd)
        parsed = tomllib.loads(doc.content)
        assert parsed["description"] == 'Say "hi" \\ now'
        assert parsed["prompt"] == 'Diff: !{git diff}\nArgs: {{args}}\nQuote: """ and a tail "'

    @pytest.mark.parametrize(
        "prompt",
        [
            'Example:\nprint("""hi""")\n"""',
            '""""',
            'say \\"quoted\\" text',
            '\\"""\n\\',
        ],
    )
    def test_quote_heavy_prompt_survives(self, prompt):
        doc = generate_command(CommandIR(name="c", prompt=prompt))
        assert tomllib.loads(doc.content)["prompt"] == prompt

    def test_no_description_line_when_empty(self):
        doc = generate_command(CommandIR(name="x", prompt="p"))
        assert doc.content.startswith("prompt = ")
        assert tomllib.loads(doc.content) == {"prompt": "p"}

    def test_unsupported_feature_warnings(self):
        doc = generate_command(
            CommandIR(name="x", prompt="p", allowed_tools=["Read"], disable_model_invocation=True)
        )
        assert doc.warnings == [
            'command "x": allowed-tools not supported in Gemini TOML commands',
            'command "x": disable-model-invocation not supported in Gemini TOML commands',
        ]

    def test_rewrite_warnings(self):
        doc = generate_command(CommandIR(name="x", prompt="$ARGUMENTS"))
        assert doc.warnings == ['command "x": rewrote $ARGUMENTS -> {{args}}']

    @pytest.mark.parametrize(
        "value",
        [
            "plain",
            "tab\there",
            "back\\slash",
            'ends with "',
            'many """""" quotes',
            "trail\\",
            '"""',
            'Example:\nprint("""hi""")\n"""',
            "crlf\r\nline",
            "nul\x00 bell\x07 del\x7f",
        ],
    )
    def test_string_helpers_parse_back(self, value):
        assert tomllib.loads(f"v = {toml_basic_string(value)}")["v"] == value
        assert tomllib.loads(f"v = {toml_multiline_string(value)}")["v"] == value

    def test_namespaced_path(self):
        assert command_path("git:commit") == Path("git/commit.toml")
        assert command_path("review") == Path("review.toml")


# ---------------------------------------------------------------------------
# Skills and agents
# ---------------------------------------------------------------------------


class TestSkills:
    def test_frontmatter_filtered_and_body_rewritten(self):
        skill = SkillIR(
            name="tdd",
            description="Test first",
            content="Run ${CLAUDE_PLUGIN_ROOT}/t.sh",
            frontmatter={"name": "tdd", "description": "Test first", "allowed-tools": "Bash"},
        )
        doc = generate_skill(skill)
        post = frontmatter.loads(doc.content)
        assert post.metadata == {"name": "tdd", "description": "Test first"}
        assert post.content.strip() == "Run ${extensionPath}/t.sh"
        assert 'skill "tdd": dropped unsupported field "allowed-tools"' in doc.warnings
        assert skill_path("tdd") == Path("tdd/SKILL.md")

    def test_description_filled_from_ir(self):
        doc = generate_skill(SkillIR(name="s", description="from ir", content="b"))
        assert frontmatter.loads(doc.content).metadata == {"name": "s", "description": "from ir"}


class TestAgents:
    def test_only_name_and_description(self):
        agent = AgentIR(
            name="reviewer",
            description="Reviews",
            content="You review.",
            model="opus",
            frontmatter={"name": "reviewer", "description": "Reviews", "model": "opus", "color": "blue"},
        )
        doc = generate_agent(agent)
        assert frontmatter.loads(doc.content).metadata == {"name": "reviewer", "description": "Reviews"}
        assert doc.warnings == [
            'agent "reviewer": dropped unsupported field "model"',
            'agent "reviewer": dropped unsupported field "color"',
        ]
        assert agent_path("reviewer") == Path("reviewer.md")


# ---------------------------------------------------------------------------
# Hooks and context
# ---------------------------------------------------------------------------


class TestHooks:
    def test_grouping_and_rewrite(self):
        output = generate_hooks(
            [
                hook("PreToolUse", "${CLAUDE_PLUGIN_ROOT}/a.sh", matcher="Bash", timeout=5000),
                hook("PreToolUse", "b.sh"),
                hook("SessionStart", "c.sh"),
            ]
        )
        assert output.data == {
            "hooks": {
                "BeforeTool": [
                    {
                        "matcher": "Bash",
                        "hooks": [
                            {"type": "command", "command": "${extensionPath}/a.sh", "timeout": 5000}
                        ],
                    },
                    {"hooks": [{"type": "command", "command": "b.sh", "timeout": 30000}]},
                ],
                "SessionStart": [
                    {"hooks": [{"type": "command", "command": "c.sh", "timeout": 30000}]}
                ],
            }
        }
        assert len(output.translated) == 3
        assert output.skipped == []

    def test_approximate_warning_per_hook(self):
        output = generate_hooks([hook("Stop"), hook("Stop"), hook("UserPromptSubmit")])
        approx = [w for w in output.warnings if "approximate" in w]
        assert approx == [
            '"Stop" -> "AfterAgent" is an approximate mapping; behavior may differ',
            '"Stop" -> "AfterAgent" is an approximate mapping; behavior may differ',
            '"UserPromptSubmit" -> "BeforeAgent" is an approximate mapping; behavior may differ',
        ]

    def test_unmapped_event_is_skipped(self):
        output = generate_hooks([hook("SubagentStop")])
        assert output.data == {"hooks": {}}
        assert [(s.type, s.name) for s in output.skipped] == [("hook", "SubagentStop")]
        assert output.translated == []


class TestContext:
    def test_first_file_wins(self):
        result = generate_context(
            [ContextFileIR(filename="CLAUDE.md", content="one"), ContextFileIR(filename="X.md", content="two")]
        )
        assert (result.filename, result.content) == ("GEMINI.md", "one")

    def test_none_without_files(self):
        assert generate_context([]) is None
