"""
Gemini TOML commands: commands/<name>.toml

Each command is a `description` basic string and a `prompt` multi-line basic
string holding the rewritten prompt (`$ARGUMENTS` -> `{{args}}`, inline
shell commands -> `!{...}`). Every double quote, backslash and control
character in the prompt is escaped, so tomllib reads back the exact text.

Namespaced commands ("git:commit") become nested paths (commands/git/commit.toml).
"""

from pathlib import Path

from pluginx.adapters.gemini.generators import GeneratedDocument, rewrite_warnings
from pluginx.adapters.gemini.mappings import PROMPT_RULES
from pluginx.adapters.gemini.rewrite import apply_rules
from pluginx.models.ir import CommandIR

UNSUPPORTED_FEATURE_WARNINGS = [
    ("allowed_tools", "allowed-tools not supported in Gemini TOML commands"),
    ("disable_model_invocation", "disable-model-invocation not supported in Gemini TOML commands"),
]


# Characters TOML basic strings cannot hold literally (tab is allowed)
_CONTROL_ESCAPES = {"\b": "\\b", "\n": "\\n", "\f": "\\f", "\r": "\\r"}


def _escape(value: str, keep_newlines: bool = False) -> str:
    out = []
    for ch in value:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n" and keep_newlines:
            out.append(ch)
        elif ch in _CONTROL_ESCAPES:
            out.append(_CONTROL_ESCAPES[ch])
        elif (ord(ch) < 0x20 and ch != "\t") or ch == "\x7f":
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "".join(out)


def toml_basic_string(value: str) -> str:
    return f'"{_escape(value)}"'


def toml_multiline_string(value: str) -> str:
    """Multi-line basic string that round-trips any prompt text."""
    return f'"""\n{_escape(value, keep_newlines=True)}"""'


def command_path(name: str) -> Path:
    return Path(*name.split(":")).with_suffix(".toml")


def generate_command(cmd: CommandIR) -> GeneratedDocument:
    warnings = [
        f'command "{cmd.name}": {message}'
        for attr, message in UNSUPPORTED_FEATURE_WARNINGS
        if getattr(cmd, attr)
    ]

    prompt = apply_rules(cmd.prompt, PROMPT_RULES)
    warnings.extend(rewrite_warnings("command", cmd.name, prompt.labels))

    lines = []
    if cmd.description:
        lines.append(f"description = {toml_basic_string(cmd.description)}")
    lines.append(f"prompt = {toml_multiline_string(prompt.text)}")
    return GeneratedDocument(content="\n".join(lines) + "\n", warnings=warnings)
