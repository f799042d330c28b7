"""
Tracking store: which translated plugins pluginx keeps up to date.

The whole state is one JSON file, read fully, changed in memory and written
back atomically. There is no file locking, so two pluginx processes writing
the store at the same time race and the last writer wins.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from pluginx.models.report import META_FILE, TranslationMeta
from pluginx.models.tracking import TrackedPlugin, TrackingState

logger = logging.getLogger(__name__)


def _atomic_write(path: Path, content: str) -> None:
    """Write via a temp file in the same directory, then rename over the target."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=f".{path.stem}-")
    closed = False
    try:
        os.write(fd, content.encode("utf-8"))
        os.fsync(fd)
        os.close(fd)
        closed = True
        os.replace(tmp_path, path)
    except Exception:
        if not closed:
            os.close(fd)
        if Path(tmp_path).exists():
            os.unlink(tmp_path)
        raise


class TrackingStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> TrackingState:
        """Load the state. Missing or unreadable files yield an empty state."""
        if not self.path.exists():
            return TrackingState()
        try:
            return TrackingState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, OSError) as e:
            logger.warning(f"Ignoring unreadable tracking state {self.path}: {e}")
            return TrackingState()

    def write(self, state: TrackingState) -> None:
        _atomic_write(self.path, state.to_json())


def add_plugin(state: TrackingState, plugin: TrackedPlugin) -> TrackingState:
    """Return a new state with `plugin` added, replacing any entry of the same name."""
    plugins = [p for p in state.plugins if p.name != plugin.name]
    return TrackingState(plugins=[*plugins, plugin])


def remove_plugin(state: TrackingState, name: str) -> TrackingState:
    return TrackingState(plugins=[p for p in state.plugins if p.name != name])


def find_plugin(state: TrackingState, name: str) -> Optional[TrackedPlugin]:
    return next((p for p in state.plugins if p.name == name), None)


def read_translation_meta(output_path: Path) -> Optional[TranslationMeta]:
    """Read the metadata sidecar of a translated extension, if present and valid."""
    meta_path = Path(output_path) / META_FILE
    if not meta_path.exists():
        return None
    try:
        return TranslationMeta.model_validate(json.loads(meta_path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError, OSError) as e:
        logger.warning(f"Ignoring unreadable translation metadata {meta_path}: {e}")
        return None
