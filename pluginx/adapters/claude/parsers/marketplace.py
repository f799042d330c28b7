"""
Claude marketplace descriptor: .claude-plugin/marketplace.json

    {
      "name": "my-marketplace",
      "plugins": [
        {"name": "local-one", "source": "./plugins/local-one"},
        {"name": "remote-one", "source": {"source": "url", "url": "https://..."}},
        {"name": "gh-one", "source": {"source": "github", "repo": "owner/repo"}}
      ]
    }

A malformed descriptor is fatal for the whole marketplace.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

from pluginx.adapters.claude.parsers.files import as_text, read_json
from pluginx.lib.errors import MalformedInputError

MARKETPLACE_JSON_PATH = Path(".claude-plugin") / "marketplace.json"


@dataclass
class MarketplacePluginRef:
    name: str
    type: Literal["local", "remote"]
    resolved_path: str  # absolute path for local, git URL for remote
    description: Optional[str] = None


@dataclass
class ParsedMarketplace:
    name: str
    plugins: list[MarketplacePluginRef] = field(default_factory=list)


def has_marketplace_json(dir_path: Path) -> bool:
    return (dir_path / MARKETPLACE_JSON_PATH).is_file()


def _resolve_entry(marketplace_path: Path, entry: dict) -> MarketplacePluginRef:
    name = entry.get("name")
    if not name:
        raise MalformedInputError('Invalid marketplace.json: plugin entry missing "name"')
    description = entry.get("description")
    source = entry.get("source")

    if isinstance(source, str):
        return MarketplacePluginRef(
            name=name,
            type="local",
            resolved_path=str((marketplace_path / source).resolve()),
            description=description,
        )

    if isinstance(source, dict):
        kind = source.get("source")
        if kind == "url" and isinstance(source.get("url"), str):
            return MarketplacePluginRef(
                name=name, type="remote", resolved_path=source["url"], description=description
            )
        if kind == "github" and isinstance(source.get("repo"), str):
            return MarketplacePluginRef(
                name=name,
                type="remote",
                resolved_path=f"https://github.com/{source['repo']}.git",
                description=description,
            )

    raise MalformedInputError(
        f'Invalid marketplace.json: plugin "{name}" has unrecognized source format'
    )


async def parse_claude_marketplace(marketplace_path: Path) -> ParsedMarketplace:
    file_path = marketplace_path / MARKETPLACE_JSON_PATH
    raw = await read_json(file_path)
    if not isinstance(raw, dict):
        raise MalformedInputError(f"Invalid marketplace.json: expected an object in {file_path}")

    entries = raw.get("plugins")
    if not isinstance(entries, list):
        raise MalformedInputError('Invalid marketplace.json: missing or invalid "plugins" array')

    plugins = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise MalformedInputError("Invalid marketplace.json: plugin entry is not an object")
        plugins.append(_resolve_entry(marketplace_path, entry))

    return ParsedMarketplace(name=as_text(raw.get("name"), "unnamed-marketplace"), plugins=plugins)
