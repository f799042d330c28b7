"""
File helpers shared by the Claude parsers.

Absent files are not errors (callers get None); a present file that cannot
be decoded raises MalformedInputError.
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Optional

import aiofiles

from pluginx.lib.errors import MalformedInputError

logger = logging.getLogger(__name__)


async def read_text(path: Path) -> Optional[str]:
    """Read a UTF-8 file, or None if it does not exist."""
    if not path.is_file():
        return None
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return await f.read()
    except UnicodeDecodeError as e:
        raise MalformedInputError(f"{path} is not valid UTF-8: {e}") from e


async def read_json(path: Path) -> Optional[Any]:
    """Read and decode a JSON file, or None if it does not exist."""
    raw = await read_text(path)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid JSON in {path}: {e}") from e


def as_text(value: Any, default: str = "") -> str:
    """Coerce a frontmatter scalar to a string (YAML may yield numbers or dates)."""
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def warn_duplicates(kind: str, names: Iterable[str], plugin_path: Path) -> None:
    """Log name collisions within a category. Both entries are kept."""
    for name, count in Counter(names).items():
        if count > 1:
            logger.warning(
                f"{count} {kind}s named '{name}' in {plugin_path}; keeping all of them"
            )
