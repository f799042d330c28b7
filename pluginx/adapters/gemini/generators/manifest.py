"""
gemini-extension.json

    {
      "name": "my-plugin",
      "version": "1.0.0",
      "description": "...",
      "mcpServers": {"db": {"command": "${extensionPath}/bin/db", "args": [...]}},
      "contextFileName": "GEMINI.md"
    }
"""

from dataclasses import dataclass, field
from typing import Any

from pluginx.adapters.gemini.generators import dropped_field_warnings, rewrite_warnings
from pluginx.adapters.gemini.mappings import CONTEXT_FILE, MANIFEST_KEYS, PATH_RULES
from pluginx.adapters.gemini.rewrite import apply_rules, filter_keys
from pluginx.models.ir import ContextFileIR, ManifestIR, McpServerIR


@dataclass
class ManifestOutput:
    data: dict[str, Any]
    warnings: list[str] = field(default_factory=list)


def generate_mcp_server_config(server: McpServerIR) -> tuple[dict[str, Any], list[str]]:
    """Gemini config for one MCP server, plus rewrite warnings."""
    config: dict[str, Any] = {}
    labels: list[str] = []

    def rewrite(value: str) -> str:
        result = apply_rules(value, PATH_RULES)
        labels.extend(label for label in result.labels if label not in labels)
        return result.text

    if server.type == "stdio":
        if server.command:
            config["command"] = rewrite(server.command)
        if server.args:
            config["args"] = [rewrite(arg) for arg in server.args]
        if server.env:
            config["env"] = dict(server.env)
        if server.cwd:
            config["cwd"] = rewrite(server.cwd)
    else:
        if server.url:
            config["url"] = server.url
        if server.headers:
            config["headers"] = dict(server.headers)

    return config, rewrite_warnings("mcp server", server.name, labels)


def generate_manifest(
    manifest: ManifestIR,
    mcp_servers: list[McpServerIR],
    context_files: list[ContextFileIR],
) -> ManifestOutput:
    kept, dropped = filter_keys(manifest.model_dump(exclude_none=True), MANIFEST_KEYS)
    output = ManifestOutput(
        data={
            "name": kept["name"],
            "version": kept.get("version", "0.0.0"),
            "description": kept.get("description", ""),
        },
        warnings=dropped_field_warnings("manifest", manifest.name, dropped),
    )

    if mcp_servers:
        servers: dict[str, Any] = {}
        for server in mcp_servers:
            config, warnings = generate_mcp_server_config(server)
            servers[server.name] = config
            output.warnings.extend(warnings)
        output.data["mcpServers"] = servers

    if context_files:
        output.data["contextFileName"] = CONTEXT_FILE

    return output
