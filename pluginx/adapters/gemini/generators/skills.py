"""Gemini skills: skills/<name>/SKILL.md"""

from pathlib import Path

from pluginx.adapters.gemini.generators import (
    GeneratedDocument,
    dropped_field_warnings,
    render_markdown,
    rewrite_warnings,
)
from pluginx.adapters.gemini.mappings import PATH_RULES, SKILL_KEYS
from pluginx.adapters.gemini.rewrite import apply_rules, filter_keys
from pluginx.models.ir import SkillIR

SKILL_FILENAME = "SKILL.md"


def skill_path(name: str) -> Path:
    return Path(name) / SKILL_FILENAME


def generate_skill(skill: SkillIR) -> GeneratedDocument:
    kept, dropped = filter_keys(skill.frontmatter, SKILL_KEYS)
    metadata = {"name": skill.name, **kept}
    if not metadata.get("description") and skill.description:
        metadata["description"] = skill.description

    body = apply_rules(skill.content, PATH_RULES)
    return GeneratedDocument(
        content=render_markdown(metadata, body.text),
        warnings=[
            *dropped_field_warnings("skill", skill.name, dropped),
            *rewrite_warnings("skill", skill.name, body.labels),
        ],
    )
