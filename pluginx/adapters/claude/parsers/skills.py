"""
Claude skills: skills/<name>/SKILL.md
"""

from pathlib import Path

from pluginx.adapters.claude.parsers.files import as_text, read_text, warn_duplicates
from pluginx.adapters.claude.parsers.frontmatter import parse_frontmatter
from pluginx.lib.files import check_name
from pluginx.models.ir import SkillIR

SKILL_FILENAME = "SKILL.md"


def parse_skill_file(dir_name: str, raw: str, source: str = "") -> SkillIR:
    parsed = parse_frontmatter(raw, source)
    data = parsed.data
    version = data.get("version")

    return SkillIR(
        name=check_name("skill", as_text(data.get("name"), dir_name), source),
        description=as_text(data.get("description")),
        version=as_text(version) if version is not None else None,
        content=parsed.content.strip(),
        frontmatter=data,
    )


async def parse_claude_skills(plugin_path: Path) -> list[SkillIR]:
    skills_dir = plugin_path / "skills"
    if not skills_dir.is_dir():
        return []

    skills: list[SkillIR] = []
    for entry in sorted(skills_dir.iterdir()):
        skill_file = entry / SKILL_FILENAME
        if not (entry.is_dir() and skill_file.is_file()):
            continue
        raw = await read_text(skill_file)
        skills.append(parse_skill_file(entry.name, raw or "", str(skill_file)))

    warn_duplicates("skill", (s.name for s in skills), plugin_path)
    return skills
