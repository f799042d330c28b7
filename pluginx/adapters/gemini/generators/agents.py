"""Gemini agents: agents/<name>.md with name/description frontmatter only."""

from pathlib import Path

from pluginx.adapters.gemini.generators import (
    GeneratedDocument,
    dropped_field_warnings,
    render_markdown,
    rewrite_warnings,
)
from pluginx.adapters.gemini.mappings import AGENT_KEYS, PATH_RULES
from pluginx.adapters.gemini.rewrite import apply_rules, filter_keys
from pluginx.models.ir import AgentIR


def agent_path(name: str) -> Path:
    return Path(f"{name}.md")


def generate_agent(agent: AgentIR) -> GeneratedDocument:
    kept, dropped = filter_keys(agent.frontmatter, AGENT_KEYS)
    metadata = {"name": agent.name, **kept}
    if not metadata.get("description") and agent.description:
        metadata["description"] = agent.description

    body = apply_rules(agent.content, PATH_RULES)
    return GeneratedDocument(
        content=render_markdown(metadata, body.text),
        warnings=[
            *dropped_field_warnings("agent", agent.name, dropped),
            *rewrite_warnings("agent", agent.name, body.labels),
        ],
    )
