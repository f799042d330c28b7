"""Tests for error classes and tool-error classification."""

import pytest

from pluginx.lib.errors import (
    AdapterNotFoundError,
    ConsentRequired,
    ErrorCode,
    ExternalToolError,
    MalformedInputError,
    PluginxError,
    classify_tool_error,
    first_line,
)


class TestClassifyToolError:
    @pytest.mark.parametrize(
        "message, code",
        [
            ("fatal: repository 'https://x/y.git/' not found", ErrorCode.REPO_NOT_FOUND),
            ("remote: Repository not found.", ErrorCode.REPO_NOT_FOUND),
            ("fatal: unable to access 'https://x/': Could not resolve host: x", ErrorCode.HOST_UNREACHABLE),
            ("ssh: connect to host x port 22: Connection refused", ErrorCode.HOST_UNREACHABLE),
            ("Extension \"demo\" is already installed.", ErrorCode.ALREADY_INSTALLED),
            ("git: command not found", ErrorCode.TOOL_NOT_INSTALLED),
            ("something else broke", ErrorCode.TOOL_FAILED),
        ],
    )
    def test_classification(self, message, code):
        assert classify_tool_error(message) == code


class TestErrors:
    def test_default_codes(self):
        assert MalformedInputError("x").code == ErrorCode.MALFORMED_INPUT
        assert AdapterNotFoundError("x").code == ErrorCode.ADAPTER_NOT_FOUND
        assert ConsentRequired("x").code == ErrorCode.CONSENT_REQUIRED
        assert ExternalToolError("x").code == ErrorCode.TOOL_FAILED

    def test_code_override(self):
        err = ExternalToolError("x", ErrorCode.REPO_NOT_FOUND)
        assert err.code == ErrorCode.REPO_NOT_FOUND
        assert isinstance(err, PluginxError)
        assert str(err) == "x"

    def test_first_line(self):
        assert first_line("\n  fatal: one\nhint: two\n") == "fatal: one"
        assert first_line("   ") == ""
