"""
File helpers shared by generators and the translation pipeline.

Component and plugin names become path segments in the output tree, so they
are checked before anything is written.
"""

import json
from pathlib import Path
from typing import Any

import aiofiles

from pluginx.lib.errors import MalformedInputError


def check_name(kind: str, name: str, source: Any = "") -> str:
    """Return `name` if it is usable as a single path segment."""
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\0" in name:
        where = f" in {source}" if source else ""
        raise MalformedInputError(f'Invalid {kind} name "{name}"{where}: must be a plain file name')
    return name


def contained_path(root: Path, rel: Path) -> Path:
    """`root / rel`, refusing anything that resolves outside `root`."""
    path = Path(root) / rel
    try:
        path.resolve().relative_to(Path(root).resolve())
    except ValueError as e:
        raise MalformedInputError(f"Refusing to write outside {root}: {rel}") from e
    return path


async def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(content)


async def write_json(path: Path, data: Any) -> None:
    await write_text(path, json.dumps(data, indent=2) + "\n")
