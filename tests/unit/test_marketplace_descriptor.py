"""
Tests for the marketplace.json parser.
"""

import json

import pytest

from pluginx.adapters.claude.parsers.marketplace import (
    has_marketplace_json,
    parse_claude_marketplace,
)
from pluginx.lib.errors import MalformedInputError


class TestParseMarketplace:
    @pytest.mark.asyncio
    async def test_all_source_forms(self, tmp_path, make_marketplace):
        make_marketplace(
            tmp_path,
            "market",
            [
                {"name": "local", "source": "./plugins/local", "description": "L"},
                {"name": "url", "source": {"source": "url", "url": "https://git.example.com/u.git"}},
                {"name": "gh", "source": {"source": "github", "repo": "owner/repo"}},
            ],
        )
        parsed = await parse_claude_marketplace(tmp_path)

        assert parsed.name == "market"
        local, url, gh = parsed.plugins
        assert (local.type, local.resolved_path, local.description) == (
            "local",
            str((tmp_path / "plugins" / "local").resolve()),
            "L",
        )
        assert (url.type, url.resolved_path) == ("remote", "https://git.example.com/u.git")
        assert (gh.type, gh.resolved_path) == ("remote", "https://github.com/owner/repo.git")

    @pytest.mark.asyncio
    async def test_unnamed_marketplace(self, tmp_path):
        (tmp_path / ".claude-plugin").mkdir()
        (tmp_path / ".claude-plugin" / "marketplace.json").write_text(json.dumps({"plugins": []}))
        parsed = await parse_claude_marketplace(tmp_path)
        assert parsed.name == "unnamed-marketplace"
        assert parsed.plugins == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "plugins, message",
        [
            ("nope", "plugins"),
            ([{"source": "./x"}], "missing \"name\""),
            ([{"name": "x", "source": {"source": "npm", "package": "x"}}], "unrecognized source"),
            ([{"name": "x", "source": 42}], "unrecognized source"),
            (["x"], "not an object"),
        ],
    )
    async def test_malformed_descriptor(self, tmp_path, make_marketplace, plugins, message):
        make_marketplace(tmp_path, "bad", plugins)
        with pytest.raises(MalformedInputError, match=message):
            await parse_claude_marketplace(tmp_path)

    def test_has_marketplace_json(self, tmp_path, make_marketplace):
        assert not has_marketplace_json(tmp_path)
        make_marketplace(tmp_path, "m", [])
        assert has_marketplace_json(tmp_path)
