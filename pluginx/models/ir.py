"""
Canonical plugin IR.

Every ecosystem is projected into and out of these models. They carry
structure only; parsing and generation live in the adapters.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class AuthorIR(BaseModel):
    name: str
    email: Optional[str] = None
    url: Optional[str] = None


class ManifestIR(BaseModel):
    """Top-level plugin metadata."""

    name: str
    version: str = "0.0.0"
    description: str = ""
    author: Optional[AuthorIR] = None
    homepage: Optional[str] = None
    repository: Optional[str] = None
    license: Optional[str] = None
    keywords: Optional[list[str]] = None


class ShellInjection(BaseModel):
    """A shell command embedded in a prompt body."""

    original: str  # Token as written in the source, e.g. !`git status`
    command: str


class CommandIR(BaseModel):
    name: str
    description: str = ""
    prompt: str = ""
    argument_hint: Optional[str] = None
    shell_injections: list[ShellInjection] = Field(default_factory=list)
    allowed_tools: Optional[list[str]] = None
    disable_model_invocation: bool = False


class SkillIR(BaseModel):
    name: str
    description: str = ""
    version: Optional[str] = None
    content: str = ""
    frontmatter: dict[str, Any] = Field(default_factory=dict)


class HookIR(BaseModel):
    event: str
    matcher: Optional[str] = None
    command: str
    timeout: int  # milliseconds
    source_event: str


class McpServerIR(BaseModel):
    name: str
    type: Literal["stdio", "http"] = "stdio"

    # stdio
    command: Optional[str] = None
    args: Optional[list[str]] = None
    env: Optional[dict[str, str]] = None
    cwd: Optional[str] = None

    # http
    url: Optional[str] = None
    headers: Optional[dict[str, str]] = None


class ContextFileIR(BaseModel):
    filename: str
    content: str


class AgentIR(BaseModel):
    name: str
    description: str = ""
    content: str = ""
    model: Optional[str] = None
    frontmatter: dict[str, Any] = Field(default_factory=dict)


class UnsupportedComponent(BaseModel):
    """A source component with no target equivalent, recorded at parse time."""

    type: str
    name: str
    reason: str
    source_ecosystem: str


class PluginIR(BaseModel):
    """One plugin, ecosystem-neutral."""

    manifest: ManifestIR
    commands: list[CommandIR] = Field(default_factory=list)
    skills: list[SkillIR] = Field(default_factory=list)
    hooks: list[HookIR] = Field(default_factory=list)
    mcp_servers: list[McpServerIR] = Field(default_factory=list)
    context_files: list[ContextFileIR] = Field(default_factory=list)
    agents: list[AgentIR] = Field(default_factory=list)
    unsupported: list[UnsupportedComponent] = Field(default_factory=list)
