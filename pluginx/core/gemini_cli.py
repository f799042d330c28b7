"""
Wrapper around the `gemini extensions` subcommands.
"""

import logging
from pathlib import Path
from typing import Optional

from pluginx.core.exec_utils import CommandFailed, ExecFn, default_exec
from pluginx.lib.errors import ErrorCode, ExternalToolError, classify_tool_error, first_line
from pluginx.models.report import CliValidationResult

logger = logging.getLogger(__name__)

GEMINI = "gemini"


class GeminiCli:
    def __init__(self, exec_fn: Optional[ExecFn] = None):
        self.exec_fn = exec_fn or default_exec
        self._available: Optional[bool] = None

    async def _run(self, *args: str) -> str:
        try:
            result = await self.exec_fn(GEMINI, list(args))
        except CommandFailed as e:
            raise ExternalToolError(
                f"gemini {' '.join(args[:2])} failed: {first_line(str(e))}",
                classify_tool_error(str(e)),
            ) from e
        return result.stdout

    async def is_available(self) -> bool:
        """True when `gemini --version` runs. Cached per instance."""
        if self._available is None:
            try:
                await self.exec_fn(GEMINI, ["--version"])
                self._available = True
            except CommandFailed:
                logger.debug("gemini CLI not available")
                self._available = False
        return self._available

    async def uninstall(self, name: str) -> None:
        logger.info(f"Uninstalling Gemini extension '{name}'")
        await self._run("extensions", "uninstall", name)

    async def link(self, extension_dir: Path, consent: bool = False) -> None:
        """Link an extension directory; replaces an existing install of the same name."""
        args = ["extensions", "link"]
        if consent:
            args.append("--consent")
        args.append(str(extension_dir))

        logger.info(f"Linking {extension_dir} into Gemini CLI")
        try:
            await self._run(*args)
        except ExternalToolError as e:
            if e.code != ErrorCode.ALREADY_INSTALLED:
                raise
            await self.uninstall(Path(extension_dir).name)
            await self._run(*args)

    async def validate(self, extension_dir: Path) -> CliValidationResult:
        try:
            await self._run("extensions", "validate", str(extension_dir))
        except ExternalToolError as e:
            logger.warning(f"gemini validation failed for {extension_dir}: {e}")
            return CliValidationResult(passed=False, error=str(e))
        return CliValidationResult(passed=True)
