"""
Claude hooks: hooks/hooks.json, or the manifest's embedded "hooks".

Layout:
    {"hooks": {"<Event>": [{"matcher": "Write|Edit",
                            "hooks": [{"type": "command", "command": "...", "timeout": 10}]}]}}

The top-level "hooks" key is optional. Timeouts are seconds in the source
and milliseconds in the IR.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pluginx.adapters.claude.parsers.files import as_text, read_json
from pluginx.lib.errors import MalformedInputError
from pluginx.models.ir import HookIR, UnsupportedComponent

HOOKS_FILE = Path("hooks") / "hooks.json"
DEFAULT_TIMEOUT_SEC = 30

# Events Claude Code emits
CLAUDE_HOOK_EVENTS = {
    "PreToolUse",
    "PostToolUse",
    "Notification",
    "UserPromptSubmit",
    "Stop",
    "SubagentStop",
    "PreCompact",
    "SessionStart",
    "SessionEnd",
}

# Known events with no equivalent in any target ecosystem
UNSUPPORTED_EVENTS = {"SubagentStop"}


@dataclass
class HooksParseResult:
    hooks: list[HookIR] = field(default_factory=list)
    unsupported: list[UnsupportedComponent] = field(default_factory=list)

    def extend(self, other: "HooksParseResult") -> None:
        self.hooks.extend(other.hooks)
        self.unsupported.extend(other.unsupported)


def _unsupported_event_reason(event: str) -> str | None:
    if event in UNSUPPORTED_EVENTS:
        return f'No target ecosystem equivalent for "{event}" hook event'
    if event not in CLAUDE_HOOK_EVENTS:
        return f'Unrecognized hook event "{event}"'
    return None


def _timeout_ms(value: Any, where: str) -> int:
    if value is None:
        return DEFAULT_TIMEOUT_SEC * 1000
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedInputError(f"Hook timeout must be a number of seconds in {where}")
    return int(value * 1000)


def parse_claude_hooks_object(hooks_obj: Any, where: str = "hooks") -> HooksParseResult:
    """Parse an event -> matcher groups mapping."""
    if not isinstance(hooks_obj, dict):
        raise MalformedInputError(f"Hooks definition must be an object in {where}")

    result = HooksParseResult()
    for event, matchers in hooks_obj.items():
        reason = _unsupported_event_reason(event)
        if reason:
            result.unsupported.append(
                UnsupportedComponent(
                    type="hook", name=event, reason=reason, source_ecosystem="claude"
                )
            )
            continue

        if not isinstance(matchers, list):
            raise MalformedInputError(f'Hook event "{event}" must map to a list in {where}')

        for group in matchers:
            if not isinstance(group, dict) or not isinstance(group.get("hooks"), list):
                raise MalformedInputError(f'Invalid matcher group for "{event}" in {where}')
            matcher = group.get("matcher") or None

            for entry in group["hooks"]:
                if not isinstance(entry, dict):
                    raise MalformedInputError(f'Invalid hook entry for "{event}" in {where}')
                hook_type = entry.get("type", "command")
                if hook_type != "command":
                    result.unsupported.append(
                        UnsupportedComponent(
                            type="hook",
                            name=f"{event}:{hook_type}",
                            reason=f'"{hook_type}" hooks have no target ecosystem equivalent',
                            source_ecosystem="claude",
                        )
                    )
                    continue
                if not entry.get("command"):
                    raise MalformedInputError(f'Hook for "{event}" has no command in {where}')

                result.hooks.append(
                    HookIR(
                        event=event,
                        matcher=as_text(matcher) if matcher else None,
                        command=as_text(entry["command"]),
                        timeout=_timeout_ms(entry.get("timeout"), where),
                        source_event=event,
                    )
                )

    return result


async def parse_claude_hooks_file(path: Path) -> HooksParseResult:
    """Parse a hooks JSON file. Absent file -> empty result."""
    parsed = await read_json(path)
    if parsed is None:
        return HooksParseResult()
    hooks_obj = parsed.get("hooks", parsed) if isinstance(parsed, dict) else parsed
    return parse_claude_hooks_object(hooks_obj, str(path))
