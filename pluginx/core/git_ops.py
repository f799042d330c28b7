"""
Git operations for plugin sources.

Persistent checkouts live under <home>/sources/<name> and are pulled on
update. Marketplace members that point at another repository are cloned
into a temporary directory for the duration of one translation.
"""

import logging
import re
import shutil
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional
from urllib.parse import urlparse

from pluginx.core.exec_utils import CommandFailed, ExecFn, default_exec
from pluginx.lib.errors import ExternalToolError, classify_tool_error, first_line

logger = logging.getLogger(__name__)

GITHUB_SHORTHAND = re.compile(r"^[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+$")


def resolve_git_url(source: str) -> str:
    """Expand `owner/repo` to a GitHub https URL. Full URLs pass through."""
    if source.startswith(("http://", "https://", "git@")):
        return source
    if GITHUB_SHORTHAND.match(source):
        return f"https://github.com/{source}.git"
    return source


def derive_name(source: str) -> str:
    """Name a plugin source after the last path segment, without `.git`."""
    resolved = resolve_git_url(source)
    if resolved.startswith("git@"):
        path = resolved.split(":", 1)[-1]
    elif "://" in resolved:
        path = urlparse(resolved).path
    else:
        path = resolved
    name = path.rstrip("/").split("/")[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name if name not in ("", ".", "..") else "plugin"


class GitClient:
    def __init__(self, exec_fn: Optional[ExecFn] = None):
        self.exec_fn = exec_fn or default_exec

    async def _git(self, *args: str) -> str:
        try:
            result = await self.exec_fn("git", list(args))
        except CommandFailed as e:
            subcommand = args[2] if args[0] == "-C" else args[0]
            raise ExternalToolError(
                f"git {subcommand} failed: {first_line(str(e))}",
                classify_tool_error(str(e)),
            ) from e
        return result.stdout

    async def clone(self, url: str, dest: Path) -> None:
        await self._git("clone", "--depth", "1", url, str(dest))

    async def pull(self, repo: Path) -> None:
        logger.info(f"Pulling latest changes in {repo}")
        await self._git("-C", str(repo), "pull")

    async def current_revision(self, repo: Path) -> str:
        return (await self._git("-C", str(repo), "rev-parse", "HEAD")).strip()

    async def clone_persistent(self, url: str, name: str, sources_dir: Path) -> Path:
        """Clone into sources_dir/name, replacing any previous checkout."""
        dest = Path(sources_dir) / name
        if dest.exists():
            logger.info(f"Replacing existing checkout at {dest}")
            shutil.rmtree(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)

        resolved = resolve_git_url(url)
        logger.info(f"Cloning {resolved} into {dest}")
        await self.clone(resolved, dest)
        return dest

    @asynccontextmanager
    async def temporary_clone(self, url: str) -> AsyncIterator[Path]:
        """Shallow clone removed on exit, whatever happens inside the block."""
        tmp_dir = Path(tempfile.mkdtemp(prefix="pluginx-clone-"))
        try:
            clone_dir = tmp_dir / "repo"
            resolved = resolve_git_url(url)
            logger.info(f"Cloning {resolved} to temporary directory")
            await self.clone(resolved, clone_dir)
            yield clone_dir
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)
