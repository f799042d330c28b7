"""
Claude subagents: agents/*.md
"""

from pathlib import Path

from pluginx.adapters.claude.parsers.files import as_text, read_text, warn_duplicates
from pluginx.adapters.claude.parsers.frontmatter import parse_frontmatter
from pluginx.lib.files import check_name
from pluginx.models.ir import AgentIR


def parse_agent_file(filename: str, raw: str, source: str = "") -> AgentIR:
    parsed = parse_frontmatter(raw, source)
    data = parsed.data
    model = data.get("model")

    return AgentIR(
        name=check_name("agent", as_text(data.get("name"), Path(filename).stem), source),
        description=as_text(data.get("description")),
        content=parsed.content.strip(),
        model=as_text(model) if model is not None else None,
        frontmatter=data,
    )


async def parse_claude_agents(plugin_path: Path) -> list[AgentIR]:
    agents_dir = plugin_path / "agents"
    if not agents_dir.is_dir():
        return []

    agents: list[AgentIR] = []
    for path in sorted(agents_dir.glob("*.md")):
        raw = await read_text(path)
        agents.append(parse_agent_file(path.name, raw or "", str(path)))

    warn_duplicates("agent", (a.name for a in agents), plugin_path)
    return agents
