"""Tests for rule-driven rewriting and the declared rule tables."""

import re

from pluginx.adapters.gemini.mappings import PATH_RULES, PROMPT_RULES
from pluginx.adapters.gemini.rewrite import RewriteRule, apply_rules, filter_keys


class TestApplyRules:
    def test_labels_once_per_rule(self):
        rules = [RewriteRule(re.compile("a"), "b", "a->b"), RewriteRule(re.compile("z"), "y", "z->y")]
        result = apply_rules("aaa", rules)
        assert result.text == "bbb"
        assert result.labels == ["a->b"]

    def test_rules_apply_in_order(self):
        rules = [RewriteRule(re.compile("a"), "b", "1"), RewriteRule(re.compile("b"), "c", "2")]
        assert apply_rules("a", rules).text == "c"

    def test_no_match(self):
        result = apply_rules("nothing here", PROMPT_RULES)
        assert result.text == "nothing here"
        assert result.labels == []


class TestPathRules:
    def test_braced_and_bare(self):
        result = apply_rules("${CLAUDE_PLUGIN_ROOT}/a $CLAUDE_PLUGIN_ROOT/b", PATH_RULES)
        assert result.text == "${extensionPath}/a ${extensionPath}/b"
        assert result.labels == [
            "${CLAUDE_PLUGIN_ROOT} -> ${extensionPath}",
            "$CLAUDE_PLUGIN_ROOT -> ${extensionPath}",
        ]

    def test_bare_token_needs_word_boundary(self):
        assert apply_rules("$CLAUDE_PLUGIN_ROOTS", PATH_RULES).text == "$CLAUDE_PLUGIN_ROOTS"


class TestPromptRules:
    def test_injection_arguments_and_paths(self):
        result = apply_rules(
            "Status: !`git status`\nArgs: $ARGUMENTS\nRun ${CLAUDE_PLUGIN_ROOT}/x.sh",
            PROMPT_RULES,
        )
        assert result.text == (
            "Status: !{git status}\nArgs: {{args}}\nRun ${extensionPath}/x.sh"
        )
        assert result.labels == [
            "!`command` -> !{command}",
            "$ARGUMENTS -> {{args}}",
            "${CLAUDE_PLUGIN_ROOT} -> ${extensionPath}",
        ]

    def test_plain_backticks_untouched(self):
        assert apply_rules("use `ls` here", PROMPT_RULES).text == "use `ls` here"


class TestFilterKeys:
    def test_split(self):
        kept, dropped = filter_keys({"name": "x", "model": "opus", "color": "red"}, {"name"})
        assert kept == {"name": "x"}
        assert dropped == ["model", "color"]
