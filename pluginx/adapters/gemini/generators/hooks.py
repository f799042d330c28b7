"""
Gemini hooks: hooks/hooks.json grouped by Gemini event name.

    {"hooks": {"BeforeTool": [{"matcher": "Write|Edit",
                               "hooks": [{"type": "command",
                                          "command": "${extensionPath}/hooks/check.sh",
                                          "timeout": 10000}]}]}}

Hooks whose event has no mapping are returned as skipped, never dropped.
"""

from dataclasses import dataclass, field
from typing import Any

from pluginx.adapters.gemini.generators import rewrite_warnings
from pluginx.adapters.gemini.mappings import APPROXIMATE_EVENTS, HOOK_EVENT_MAP, PATH_RULES
from pluginx.adapters.gemini.rewrite import apply_rules
from pluginx.models.ir import HookIR
from pluginx.models.report import SkippedComponent


@dataclass
class HooksOutput:
    data: dict[str, Any] = field(default_factory=lambda: {"hooks": {}})
    translated: list[HookIR] = field(default_factory=list)
    skipped: list[SkippedComponent] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def generate_hooks(hooks: list[HookIR]) -> HooksOutput:
    output = HooksOutput()
    grouped: dict[str, list[dict[str, Any]]] = output.data["hooks"]

    for hook in hooks:
        target_event = HOOK_EVENT_MAP.get(hook.event)
        if target_event is None:
            output.skipped.append(
                SkippedComponent(
                    type="hook",
                    name=hook.event,
                    reason=f'No Gemini equivalent for "{hook.event}" hook event',
                )
            )
            continue

        if hook.event in APPROXIMATE_EVENTS:
            output.warnings.append(
                f'"{hook.event}" -> "{target_event}" is an approximate mapping; behavior may differ'
            )

        command = apply_rules(hook.command, PATH_RULES)
        output.warnings.extend(rewrite_warnings("hook", hook.event, command.labels))

        entry: dict[str, Any] = {}
        if hook.matcher:
            entry["matcher"] = hook.matcher
        entry["hooks"] = [{"type": "command", "command": command.text, "timeout": hook.timeout}]

        grouped.setdefault(target_event, []).append(entry)
        output.translated.append(hook)

    return output
