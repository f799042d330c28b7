"""
Claude plugin manifest: .claude-plugin/plugin.json
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from pluginx.adapters.claude.parsers.files import as_text, read_json
from pluginx.lib.errors import MalformedInputError
from pluginx.lib.files import check_name
from pluginx.models.ir import AuthorIR, ManifestIR

logger = logging.getLogger(__name__)

MANIFEST_PATH = Path(".claude-plugin") / "plugin.json"

# hooks / mcpServers may be inline objects or paths to a JSON file
EmbeddedConfig = Union[dict[str, Any], str]


@dataclass
class ClaudeManifestResult:
    manifest: ManifestIR
    embedded_hooks: Optional[EmbeddedConfig] = None
    embedded_mcp_servers: Optional[EmbeddedConfig] = None


def _parse_author(author: Any) -> Optional[AuthorIR]:
    if isinstance(author, str) and author:
        return AuthorIR(name=author)
    if isinstance(author, dict) and author.get("name"):
        return AuthorIR(
            name=as_text(author["name"]),
            email=author.get("email"),
            url=author.get("url"),
        )
    return None


async def parse_claude_manifest(plugin_path: Path) -> ClaudeManifestResult:
    """Parse the manifest. It is the one required file of a Claude plugin."""
    manifest_path = plugin_path / MANIFEST_PATH
    raw = await read_json(manifest_path)
    if raw is None:
        raise MalformedInputError(f"Plugin manifest not found: {manifest_path}")
    if not isinstance(raw, dict):
        raise MalformedInputError(f"Plugin manifest must be a JSON object: {manifest_path}")

    name = raw.get("name")
    if not name:
        name = plugin_path.name
        logger.warning(f"Manifest at {manifest_path} has no name, using '{name}'")

    keywords = raw.get("keywords")
    manifest = ManifestIR(
        name=check_name("plugin", as_text(name), manifest_path),
        version=as_text(raw.get("version"), "0.0.0"),
        description=as_text(raw.get("description")),
        author=_parse_author(raw.get("author")),
        homepage=raw.get("homepage"),
        repository=_repository_url(raw.get("repository")),
        license=raw.get("license"),
        keywords=[as_text(k) for k in keywords] if isinstance(keywords, list) else None,
    )

    return ClaudeManifestResult(
        manifest=manifest,
        embedded_hooks=raw.get("hooks"),
        embedded_mcp_servers=raw.get("mcpServers"),
    )


def _repository_url(value: Any) -> Optional[str]:
    # npm-style {"type": "git", "url": "..."} is accepted too
    if isinstance(value, dict):
        return value.get("url")
    return value if isinstance(value, str) else None
