"""
Consent to install third-party plugin code.

The level is stored under `consent_level` in the pluginx config.yaml. There
is no interactive prompt; `pluginx consent` records a level and `--consent`
on add commands satisfies a single run.
"""

import logging
from pathlib import Path
from typing import Literal

from pluginx.config import load_yaml_config, save_yaml_config
from pluginx.lib.errors import ConsentRequired

logger = logging.getLogger(__name__)

ConsentLevel = Literal["bypass", "acknowledged"]
ConsentStatus = Literal["bypass", "acknowledged", "required"]

CONSENT_KEY = "consent_level"
CONSENT_LEVELS = ("bypass", "acknowledged")


class ConsentStore:
    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)

    def read(self) -> ConsentStatus:
        level = load_yaml_config(self.config_path).get(CONSENT_KEY)
        if level in CONSENT_LEVELS:
            return level
        return "required"

    def write(self, level: ConsentLevel) -> None:
        if level not in CONSENT_LEVELS:
            raise ValueError(f"Invalid consent level: {level}")
        data = load_yaml_config(self.config_path)
        data[CONSENT_KEY] = level
        save_yaml_config(self.config_path, data)
        logger.info(f"Recorded consent level '{level}'")

    def clear(self) -> None:
        data = load_yaml_config(self.config_path)
        if data.pop(CONSENT_KEY, None) is not None:
            save_yaml_config(self.config_path, data)
            logger.info("Cleared recorded consent")


def require_consent(store: ConsentStore, consent_flag: bool = False) -> ConsentStatus:
    """Return the effective consent, or raise ConsentRequired."""
    status = store.read()
    if status != "required":
        return status
    if consent_flag:
        return "acknowledged"
    raise ConsentRequired(
        "pluginx installs third-party plugin code into Gemini CLI. "
        "Run 'pluginx consent' or pass --consent to continue."
    )
