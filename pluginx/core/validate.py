"""
Parity validation: every IR component must be accounted for in the report.

Per-category checks catch missing names; the total counts catch generators
that report extra entries under names nothing else looks for.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from pluginx.models.ir import PluginIR
from pluginx.models.report import ParityResult, TranslationReport, ValidationResult

if TYPE_CHECKING:
    from pluginx.core.gemini_cli import GeminiCli

logger = logging.getLogger(__name__)


def _count(entries, kind: str) -> int:
    return sum(1 for e in entries if e.type == kind)


def check_translation_parity(ir: PluginIR, report: TranslationReport) -> ParityResult:
    """Compare IR against the report. Never raises."""
    errors: list[str] = []
    translated = {(c.type, c.name) for c in report.translated}
    skipped = {(s.type, s.name) for s in report.skipped}

    named = [
        ("command", [c.name for c in ir.commands]),
        ("skill", [s.name for s in ir.skills]),
        ("agent", [a.name for a in ir.agents]),
        ("mcp-server", [m.name for m in ir.mcp_servers]),
    ]
    for kind, names in named:
        for name in names:
            if (kind, name) not in translated:
                errors.append(f'missing translated {kind}: "{name}"')

    # Hooks and context are counted, not named: hook names are event names
    # and repeat, context collapses to a single file
    expected_hooks = len(ir.hooks)
    actual_hooks = _count(report.translated, "hook")
    if actual_hooks != expected_hooks:
        errors.append(f"hooks: expected {expected_hooks} translated, got {actual_hooks}")

    expected_context = 1 if ir.context_files else 0
    actual_context = _count(report.translated, "context")
    if actual_context != expected_context:
        errors.append(f"context: expected {expected_context} translated, got {actual_context}")

    manifests = _count(report.translated, "manifest")
    if manifests == 0:
        errors.append("missing translated manifest")
    elif manifests > 1:
        errors.append(f"manifest: expected 1 translated, got {manifests}")

    for u in ir.unsupported:
        if (u.type, u.name) not in skipped:
            errors.append(f'missing skipped component: {u.type}:"{u.name}"')

    expected_total = (
        1
        + len(ir.commands)
        + len(ir.skills)
        + expected_hooks
        + len(ir.mcp_servers)
        + len(ir.agents)
        + expected_context
    )
    if len(report.translated) != expected_total:
        errors.append(
            f"total translated: expected {expected_total}, got {len(report.translated)}"
        )

    expected_skipped = len(ir.unsupported)
    if len(report.skipped) != expected_skipped:
        errors.append(f"total skipped: expected {expected_skipped}, got {len(report.skipped)}")

    return ParityResult(passed=not errors, errors=errors)


async def validate_translation(
    ir: PluginIR,
    report: TranslationReport,
    extension_dir: Path,
    gemini: Optional["GeminiCli"] = None,
) -> ValidationResult:
    """Parity plus, when a Gemini CLI is available, `gemini extensions validate`."""
    parity = check_translation_parity(ir, report)
    result = ValidationResult(valid=parity.passed, parity=parity)

    if gemini is not None and await gemini.is_available():
        cli_result = await gemini.validate(extension_dir)
        result.gemini_cli = cli_result
        result.valid = result.valid and cli_result.passed
    return result
