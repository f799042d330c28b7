"""
Data-driven content rewriting and key filtering.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterable


@dataclass(frozen=True)
class RewriteRule:
    pattern: re.Pattern
    replacement: str
    label: str


@dataclass
class RewriteResult:
    text: str
    labels: list[str] = field(default_factory=list)  # rules that matched, each once


def apply_rules(text: str, rules: Iterable[RewriteRule]) -> RewriteResult:
    """Apply rules in order. Each rule that changed something is reported once."""
    labels: list[str] = []
    for rule in rules:
        text, count = rule.pattern.subn(rule.replacement, text)
        if count:
            labels.append(rule.label)
    return RewriteResult(text=text, labels=labels)


def filter_keys(data: dict[str, Any], allowed: set[str]) -> tuple[dict[str, Any], list[str]]:
    """Split a mapping into (kept, dropped key names)."""
    kept = {k: v for k, v in data.items() if k in allowed}
    dropped = [k for k in data if k not in allowed]
    return kept, dropped
