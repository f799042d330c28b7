"""
Frontmatter parsing for commands, skills and agents.

Parsing is an explicit ordered chain:

1. strict  - python-frontmatter with PyYAML
2. lenient - line oriented, one ``key: value`` per line

The lenient parser exists because real plugin files often carry unquoted
values with colons (``description: Use when: reviewing code``) that a YAML
parser rejects. Each step returns None when it cannot handle the document,
and the first non-None result wins. The result is tagged with the step that
produced it; ``failed`` means no frontmatter could be read at all.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional

import frontmatter
import yaml

logger = logging.getLogger(__name__)

FrontmatterMode = Literal["strict", "lenient", "failed"]

FRONTMATTER_BLOCK = re.compile(r"^---\r?\n([\s\S]*?)\r?\n---\r?\n?([\s\S]*)$")


@dataclass
class FrontmatterResult:
    mode: FrontmatterMode
    data: dict[str, Any] = field(default_factory=dict)
    content: str = ""


def parse_strict(raw: str) -> Optional[FrontmatterResult]:
    """YAML frontmatter via python-frontmatter. None if the YAML is invalid."""
    try:
        post = frontmatter.loads(raw)
    except (yaml.YAMLError, ValueError):
        return None
    return FrontmatterResult(mode="strict", data=dict(post.metadata), content=post.content)


def _lenient_value(value: str) -> Any:
    # Try to parse JSON arrays/objects
    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_lenient_block(block: str) -> dict[str, Any]:
    """Split each line on its first colon. Lines without a key are ignored."""
    data: dict[str, Any] = {}
    for line in block.split("\n"):
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        if not key:
            continue
        data[key] = _lenient_value(value.strip())
    return data


def parse_lenient(raw: str) -> Optional[FrontmatterResult]:
    match = FRONTMATTER_BLOCK.match(raw)
    if not match:
        return None
    return FrontmatterResult(
        mode="lenient",
        data=parse_lenient_block(match.group(1)),
        content=match.group(2),
    )


FRONTMATTER_CHAIN: list[Callable[[str], Optional[FrontmatterResult]]] = [
    parse_strict,
    parse_lenient,
]


def parse_frontmatter(raw: str, source: str = "") -> FrontmatterResult:
    """Run the fallback chain over a document."""
    for step in FRONTMATTER_CHAIN:
        result = step(raw)
        if result is not None:
            if result.mode == "lenient":
                logger.debug(f"Frontmatter in {source or 'document'} needed lenient parsing")
            return result

    logger.warning(f"Could not read frontmatter in {source or 'document'}; using it as plain content")
    return FrontmatterResult(mode="failed", data={}, content=raw)
