"""
Typed errors for pluginx.

External tool failures (git, gemini CLI) are classified from their stderr
into an ErrorCode so callers can tell "not found" apart from "host
unreachable" and generic failures.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes for programmatic handling."""

    # Input errors
    MALFORMED_INPUT = "malformed_input"
    ADAPTER_NOT_FOUND = "adapter_not_found"
    SOURCE_NOT_FOUND = "source_not_found"

    # External tool errors
    REPO_NOT_FOUND = "repo_not_found"
    HOST_UNREACHABLE = "host_unreachable"
    ALREADY_INSTALLED = "already_installed"
    TOOL_NOT_INSTALLED = "tool_not_installed"
    TOOL_FAILED = "tool_failed"

    # Consent
    CONSENT_REQUIRED = "consent_required"

    # Generic
    UNKNOWN_ERROR = "unknown_error"


# Substring patterns checked in order; first hit wins.
TOOL_ERROR_PATTERNS: list[tuple[ErrorCode, tuple[str, ...]]] = [
    (ErrorCode.HOST_UNREACHABLE, (
        "could not resolve host",
        "unable to access",
        "connection refused",
        "connection timed out",
        "network is unreachable",
    )),
    (ErrorCode.REPO_NOT_FOUND, ("repository not found", "does not exist", "not found")),
    (ErrorCode.ALREADY_INSTALLED, ("already installed",)),
]


class PluginxError(Exception):
    """Base class for pluginx errors."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class MalformedInputError(PluginxError):
    """A required or present input file could not be parsed."""

    code = ErrorCode.MALFORMED_INPUT


class AdapterNotFoundError(PluginxError):
    """Unknown adapter name, or no adapter recognises a source directory."""

    code = ErrorCode.ADAPTER_NOT_FOUND


class SourceResolutionError(PluginxError):
    """A plugin source could not be resolved to a directory."""

    code = ErrorCode.SOURCE_NOT_FOUND


class ExternalToolError(PluginxError):
    """An external executable (git, gemini) failed."""

    code = ErrorCode.TOOL_FAILED


class ConsentRequired(PluginxError):
    """No consent level is recorded and none was given on the command line."""

    code = ErrorCode.CONSENT_REQUIRED


def classify_tool_error(message: str) -> ErrorCode:
    """Map raw tool output to an ErrorCode."""
    lower_message = message.lower()
    if "command not found" in lower_message or "no such file or directory" in lower_message:
        return ErrorCode.TOOL_NOT_INSTALLED
    for code, patterns in TOOL_ERROR_PATTERNS:
        if any(p in lower_message for p in patterns):
            return code
    return ErrorCode.TOOL_FAILED


def first_line(message: str) -> str:
    """First non-empty line of a multi-line tool message."""
    for line in message.splitlines():
        if line.strip():
            return line.strip()
    return message.strip()
