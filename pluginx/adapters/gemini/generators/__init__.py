"""
Per-category Gemini generators.

Generators are pure: they turn IR into file contents plus warnings. The
target adapter owns all file I/O.
"""

from dataclasses import dataclass, field
from typing import Any

import frontmatter


@dataclass
class GeneratedDocument:
    content: str
    warnings: list[str] = field(default_factory=list)


def rewrite_warnings(kind: str, name: str, labels: list[str]) -> list[str]:
    return [f'{kind} "{name}": rewrote {label}' for label in labels]


def dropped_field_warnings(kind: str, name: str, dropped: list[str]) -> list[str]:
    return [f'{kind} "{name}": dropped unsupported field "{key}"' for key in dropped]


def render_markdown(metadata: dict[str, Any], body: str) -> str:
    """Markdown document with a YAML frontmatter block."""
    post = frontmatter.Post(body)
    post.metadata.update(metadata)
    return frontmatter.dumps(post) + "\n"
