"""
Declared Claude -> Gemini mapping tables.

Generators consult these tables; no per-event or per-key conditionals live
in the generator code.
"""

import re

from pluginx.adapters.gemini.rewrite import RewriteRule

TARGET_ECOSYSTEM = "gemini"

MANIFEST_FILE = "gemini-extension.json"
CONTEXT_FILE = "GEMINI.md"
HOOKS_FILE = "hooks.json"

# Source hook event -> Gemini hook event
HOOK_EVENT_MAP: dict[str, str] = {
    "PreToolUse": "BeforeTool",
    "PostToolUse": "AfterTool",
    "PreCompact": "PreCompress",
    "UserPromptSubmit": "BeforeAgent",
    "Stop": "AfterAgent",
    "SessionStart": "SessionStart",
    "SessionEnd": "SessionEnd",
    "Notification": "Notification",
}

# Mapped, but fires at a different point in the agent loop
APPROXIMATE_EVENTS = {"UserPromptSubmit", "Stop"}

# Manifest keys that survive translation
MANIFEST_KEYS = {"name", "version", "description"}

# Frontmatter keys Gemini understands
SKILL_KEYS = {"name", "description", "version", "license", "metadata"}
AGENT_KEYS = {"name", "description"}

EXTENSION_PATH = "${extensionPath}"

# Ordered: braced token before its bare form
PATH_RULES: list[RewriteRule] = [
    RewriteRule(
        re.compile(r"\$\{CLAUDE_PLUGIN_ROOT\}"),
        EXTENSION_PATH,
        "${CLAUDE_PLUGIN_ROOT} -> ${extensionPath}",
    ),
    RewriteRule(
        re.compile(r"\$CLAUDE_PLUGIN_ROOT\b"),
        EXTENSION_PATH,
        "$CLAUDE_PLUGIN_ROOT -> ${extensionPath}",
    ),
]

PROMPT_RULES: list[RewriteRule] = [
    RewriteRule(re.compile(r"!`([^`]+)`"), r"!{\1}", "!`command` -> !{command}"),
    RewriteRule(re.compile(r"\$ARGUMENTS\b"), "{{args}}", "$ARGUMENTS -> {{args}}"),
    *PATH_RULES,
]
