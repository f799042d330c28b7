"""
Claude MCP servers: .mcp.json, or the manifest's embedded "mcpServers".

Supports two types of MCP servers:
1. stdio (local): command + args to spawn a process
2. http (remote): url + headers
"""

from pathlib import Path
from typing import Any

from pluginx.adapters.claude.parsers.files import as_text, read_json
from pluginx.lib.errors import MalformedInputError
from pluginx.models.ir import McpServerIR

MCP_FILE = ".mcp.json"
HTTP_TYPES = {"http", "sse"}


def _str_map(value: Any, key: str, name: str) -> dict[str, str] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise MalformedInputError(f"MCP server '{name}': '{key}' must be an object")
    return {k: as_text(v) for k, v in value.items()}


def parse_claude_mcp_object(servers: Any, where: str = "mcpServers") -> list[McpServerIR]:
    """Parse a name -> server config mapping."""
    if not isinstance(servers, dict):
        raise MalformedInputError(f"MCP server definitions must be an object in {where}")

    result: list[McpServerIR] = []
    for name, config in servers.items():
        if not isinstance(config, dict):
            raise MalformedInputError(f"MCP server '{name}': config is not an object in {where}")

        is_http = config.get("type") in HTTP_TYPES or config.get("url") is not None
        args = config.get("args")
        if args is not None and not isinstance(args, list):
            raise MalformedInputError(f"MCP server '{name}': 'args' must be a list in {where}")

        result.append(
            McpServerIR(
                name=name,
                type="http" if is_http else "stdio",
                command=config.get("command"),
                args=[as_text(a) for a in args] if args is not None else None,
                env=_str_map(config.get("env"), "env", name),
                cwd=config.get("cwd"),
                url=config.get("url"),
                headers=_str_map(config.get("headers"), "headers", name),
            )
        )
    return result


async def parse_claude_mcp_file(path: Path) -> list[McpServerIR]:
    """Parse an MCP JSON file. Absent file -> empty list."""
    parsed = await read_json(path)
    if parsed is None:
        return []
    if isinstance(parsed, dict) and isinstance(parsed.get("mcpServers"), dict):
        parsed = parsed["mcpServers"]
    return parse_claude_mcp_object(parsed, str(path))
