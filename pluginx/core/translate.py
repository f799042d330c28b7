"""
Single-plugin translation pipeline: detect, parse, generate, validate.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from pluginx.adapters.base import SourceAdapter
from pluginx.adapters.registry import AdapterRegistry, create_default_registry
from pluginx.core.gemini_cli import GeminiCli
from pluginx.lib.errors import AdapterNotFoundError
from pluginx.lib.files import write_text
from pluginx.models.report import REPORT_FILE, TranslationReport

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_LOSSY = 2
EXIT_CONSENT_REQUIRED = 3


async def write_report(output_path: Path, report: TranslationReport) -> Path:
    path = Path(output_path) / REPORT_FILE
    await write_text(path, report.to_json())
    return path


async def select_source_adapter(
    registry: AdapterRegistry, source: Path, from_: Optional[str] = None
) -> SourceAdapter:
    """Adapter named by `from_`, else the first one that detects `source`."""
    if from_:
        return registry.get_source(from_)
    adapter = await registry.detect_source(source)
    if adapter is None:
        raise AdapterNotFoundError(
            f'Could not detect source format at "{source}". Use --from to specify.'
        )
    return adapter


async def attach_cli_validation(
    report: TranslationReport, output: Path, gemini: Optional[GeminiCli]
) -> None:
    """Run `gemini extensions validate` when available and rewrite the report sidecar."""
    if gemini is None or report.validation is None or not await gemini.is_available():
        return
    cli_result = await gemini.validate(output)
    report.validation.gemini_cli = cli_result
    report.validation.valid = report.validation.parity.passed and cli_result.passed
    await write_report(output, report)


async def translate(
    source: Path,
    output: Path,
    to: str = "gemini",
    from_: Optional[str] = None,
    registry: Optional[AdapterRegistry] = None,
    gemini: Optional[GeminiCli] = None,
) -> TranslationReport:
    """Translate one plugin directory into `output`.

    When `gemini` is given and the CLI is installed, the output is also run
    through `gemini extensions validate` and the report sidecar is rewritten
    with that result.
    """
    registry = registry or create_default_registry()
    source = Path(source)
    output = Path(output)

    source_adapter = await select_source_adapter(registry, source, from_)
    target_adapter = registry.get_target(to)

    logger.info(f"Translating {source} ({source_adapter.name} -> {target_adapter.name})")
    ir = await source_adapter.parse(source)
    report = await target_adapter.generate(
        ir, output, source_path=source, source_name=source_adapter.name
    )

    await attach_cli_validation(report, output, gemini)
    return report


def exit_code_for(reports: Iterable[TranslationReport]) -> int:
    """1 if any validation failed, 2 if anything was skipped or warned, else 0."""
    reports = list(reports)
    if any(r.validation is not None and not r.validation.valid for r in reports):
        return EXIT_FAILED
    if any(r.skipped or r.warnings for r in reports):
        return EXIT_LOSSY
    return EXIT_OK
