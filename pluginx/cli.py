"""
pluginx CLI.

Usage:
    pluginx translate SOURCE -o OUT         # Translate one plugin directory
    pluginx translate-marketplace SRC -o DIR  # Translate every plugin of a marketplace
    pluginx adapters                        # List source and target adapters
    pluginx add SOURCE                      # Translate, link and track a plugin
    pluginx add-marketplace SOURCE          # Same for every plugin of a marketplace
    pluginx list                            # Tracked plugins
    pluginx status                          # Up-to-date check for git sources
    pluginx update NAME [NAME ...]          # Refresh and re-translate tracked plugins
    pluginx update-all                      # Same for every tracked plugin
    pluginx remove NAME                     # Stop tracking a plugin
    pluginx consent [--level LEVEL]         # Record consent to install plugin code

SOURCE is a local path, a git URL, or GitHub owner/repo shorthand.

Exit codes: 0 ok, 1 error or failed validation, 2 translated with skipped
components or warnings, 3 consent required.
"""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from pluginx import __version__
from pluginx.adapters.registry import create_default_registry
from pluginx.config import get_settings
from pluginx.core.consent import CONSENT_LEVELS, ConsentStore
from pluginx.core.gemini_cli import GeminiCli
from pluginx.core.manager import (
    PluginxContext,
    add_marketplace_source,
    add_plugin_source,
    list_tracked,
    plugin_status,
    remove_tracked,
)
from pluginx.core.marketplace import translate_marketplace
from pluginx.core.translate import (
    EXIT_CONSENT_REQUIRED,
    EXIT_FAILED,
    EXIT_OK,
    exit_code_for,
    translate,
)
from pluginx.core.updater import UpdateResult, run_update, run_update_all
from pluginx.lib.errors import ConsentRequired, PluginxError
from pluginx.lib.logger import setup_logging
from pluginx.models.report import TranslationReport


# --- Helpers ---


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def _report_dump(report: TranslationReport) -> dict:
    return report.model_dump(by_alias=True, exclude_none=True)


def _print_report(report: TranslationReport) -> None:
    validation = report.validation
    status = "ok" if validation is None or validation.valid else "FAILED"
    print(
        f"{report.plugin_name}: {len(report.translated)} translated, "
        f"{len(report.skipped)} skipped, {len(report.warnings)} warnings "
        f"(validation {status})"
    )
    for s in report.skipped:
        print(f"  skipped {s.type} {s.name}: {s.reason}")
    for w in report.warnings:
        print(f"  warning: {w}")
    if validation is not None:
        for e in validation.parity.errors:
            print(f"  parity: {e}")
        if validation.gemini_cli is not None and not validation.gemini_cli.passed:
            print(f"  gemini: {validation.gemini_cli.error}")


def _print_update_result(result: UpdateResult, as_json: bool) -> int:
    if as_json:
        _print_json(
            {
                "reports": [_report_dump(r) for r in result.reports],
                "failures": [asdict(f) for f in result.failures],
                "skipped": result.skipped,
            }
        )
    else:
        for report in result.reports:
            _print_report(report)
        for name in result.skipped:
            print(f"{name}: up to date")
        for f in result.failures:
            print(f"{f.name}: failed: {f.error}")

    if result.failures:
        return EXIT_FAILED
    return exit_code_for(result.reports)


def _context() -> PluginxContext:
    return PluginxContext.from_settings(get_settings())


# --- Commands ---


async def cmd_translate(args: argparse.Namespace) -> int:
    settings = get_settings()
    gemini = GeminiCli() if args.validate or settings.gemini_validate else None
    report = await translate(
        Path(args.source).expanduser(),
        Path(args.output).expanduser(),
        to=args.to,
        from_=args.from_,
        gemini=gemini,
    )
    if args.json:
        _print_json(_report_dump(report))
    else:
        _print_report(report)
    return exit_code_for([report])


async def cmd_translate_marketplace(args: argparse.Namespace) -> int:
    settings = get_settings()
    gemini = GeminiCli() if args.validate or settings.gemini_validate else None
    result = await translate_marketplace(
        Path(args.source).expanduser(),
        Path(args.output).expanduser(),
        to=args.to,
        from_=args.from_,
        gemini=gemini,
    )
    if args.json:
        _print_json(result.model_dump(by_alias=True, exclude_none=True))
    else:
        print(f"Marketplace {result.name}:")
        for report in result.reports:
            _print_report(report)
        for f in result.failures:
            print(f"{f.name}: failed: {f.error}")

    if result.failures:
        return EXIT_FAILED
    return exit_code_for(result.reports)


async def cmd_adapters(args: argparse.Namespace) -> int:
    registry = create_default_registry()
    sources, targets = registry.list_sources(), registry.list_targets()
    if args.json:
        _print_json({"sources": sources, "targets": targets})
    else:
        print(f"Sources: {', '.join(sources)}")
        print(f"Targets: {', '.join(targets)}")
    return EXIT_OK


async def cmd_add(args: argparse.Namespace) -> int:
    result = await add_plugin_source(_context(), args.source, consent=args.consent)
    if args.json:
        _print_json(
            {
                "report": _report_dump(result.report),
                "plugin": result.plugin.model_dump(by_alias=True, exclude_none=True),
            }
        )
    else:
        _print_report(result.report)
        print(f"Tracking {result.plugin.name} -> {result.plugin.output_path}")
    return exit_code_for([result.report])


async def cmd_add_marketplace(args: argparse.Namespace) -> int:
    result = await add_marketplace_source(_context(), args.source, consent=args.consent)
    if args.json:
        _print_json(
            {
                "reports": [_report_dump(r) for r in result.reports],
                "plugins": [p.model_dump(by_alias=True, exclude_none=True) for p in result.plugins],
                "failures": [f.model_dump() for f in result.failures],
            }
        )
    else:
        for report in result.reports:
            _print_report(report)
        for f in result.failures:
            print(f"{f.name}: failed: {f.error}")
        print(f"Tracking {len(result.plugins)} plugins")

    if result.failures:
        return EXIT_FAILED
    return exit_code_for(result.reports)


async def cmd_list(args: argparse.Namespace) -> int:
    plugins = list_tracked(_context())
    if args.json:
        _print_json([p.model_dump(by_alias=True, exclude_none=True) for p in plugins])
        return EXIT_OK

    if not plugins:
        print("No plugins tracked.")
        print("Use `pluginx add <source>` or `pluginx add-marketplace <source>` to get started.")
        return EXIT_OK

    print(f"Tracked plugins ({len(plugins)}):\n")
    for p in plugins:
        print(f"  {p.name}")
        print(f"    Source: {p.source_url or p.source_path}")
        print(f"    Type: {p.type}")
        print(f"    Last translated: {p.last_translated}")
        print()
    return EXIT_OK


async def cmd_status(args: argparse.Namespace) -> int:
    statuses = await plugin_status(_context())
    if args.json:
        _print_json([asdict(s) for s in statuses])
        return EXIT_OK

    if not statuses:
        print("No plugins tracked.")
        return EXIT_OK

    labels = {True: "up to date", False: "outdated"}
    print(f"Plugin status ({len(statuses)}):\n")
    for s in statuses:
        print(f"  {s.name}: {labels.get(s.up_to_date, 'unknown')}")
        print(f"    Last translated: {s.last_translated}")
    return EXIT_OK


async def cmd_update(args: argparse.Namespace) -> int:
    result = await run_update(_context(), args.names, force=args.force, consent=args.consent)
    return _print_update_result(result, args.json)


async def cmd_update_all(args: argparse.Namespace) -> int:
    result = await run_update_all(_context(), force=args.force, consent=args.consent)
    return _print_update_result(result, args.json)


async def cmd_remove(args: argparse.Namespace) -> int:
    removed = remove_tracked(_context(), args.name)
    if args.json:
        _print_json({"removed": args.name if removed else None})
    elif removed:
        print(f'Removed "{args.name}" from tracking.')
        print(f"To fully uninstall, run: gemini extensions uninstall {args.name}")
    else:
        print(f"Plugin not found: {args.name}", file=sys.stderr)
    return EXIT_OK if removed else EXIT_FAILED


async def cmd_consent(args: argparse.Namespace) -> int:
    store = ConsentStore(get_settings().config_path)
    if args.reset:
        store.clear()
    elif args.level:
        store.write(args.level)

    status = store.read()
    if args.json:
        _print_json({"consent": status})
    else:
        print(f"Consent: {status}")
    return EXIT_OK


COMMANDS = {
    "translate": cmd_translate,
    "translate-marketplace": cmd_translate_marketplace,
    "adapters": cmd_adapters,
    "add": cmd_add,
    "add-marketplace": cmd_add_marketplace,
    "list": cmd_list,
    "status": cmd_status,
    "update": cmd_update,
    "update-all": cmd_update_all,
    "remove": cmd_remove,
    "consent": cmd_consent,
}


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="Print machine-readable JSON")

    parser = argparse.ArgumentParser(
        prog="pluginx",
        description="Translate Claude Code plugins into Gemini CLI extensions",
    )
    parser.add_argument("--version", action="version", version=f"pluginx {__version__}")
    parser.add_argument("--log-level", help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command")

    # translate / translate-marketplace
    for name, help_text, out_help in (
        ("translate", "Translate one plugin directory", "Output extension directory"),
        (
            "translate-marketplace",
            "Translate every plugin of a marketplace",
            "Output directory (one subdirectory per plugin)",
        ),
    ):
        p = subparsers.add_parser(name, parents=[common], help=help_text)
        p.add_argument("source", help="Plugin or marketplace directory")
        p.add_argument("-o", "--output", required=True, help=out_help)
        p.add_argument("--from", dest="from_", help="Source adapter (auto-detected if omitted)")
        p.add_argument("--to", default="gemini", help="Target adapter (default: gemini)")
        p.add_argument(
            "--validate", action="store_true", help="Also run `gemini extensions validate`"
        )

    subparsers.add_parser("adapters", parents=[common], help="List available adapters")

    # add / add-marketplace
    for name, help_text in (
        ("add", "Translate, link and track a plugin"),
        ("add-marketplace", "Translate, link and track every plugin of a marketplace"),
    ):
        p = subparsers.add_parser(name, parents=[common], help=help_text)
        p.add_argument("source", help="Local path, git URL or owner/repo")
        p.add_argument("--consent", action="store_true", help="Consent for this run")

    subparsers.add_parser("list", parents=[common], help="List tracked plugins")
    subparsers.add_parser("status", parents=[common], help="Check tracked git sources")

    update_parser = subparsers.add_parser(
        "update", parents=[common], help="Update tracked plugins"
    )
    update_parser.add_argument("names", nargs="+", help="Tracked plugin names")
    update_all_parser = subparsers.add_parser(
        "update-all", parents=[common], help="Update every tracked plugin"
    )
    for p in (update_parser, update_all_parser):
        p.add_argument("--force", action="store_true", help="Re-translate even if unchanged")
        p.add_argument("--consent", action="store_true", help="Consent for this run")

    remove_parser = subparsers.add_parser(
        "remove", parents=[common], help="Stop tracking a plugin"
    )
    remove_parser.add_argument("name", help="Tracked plugin name")

    consent_parser = subparsers.add_parser(
        "consent", parents=[common], help="Show or record consent"
    )
    consent_group = consent_parser.add_mutually_exclusive_group()
    consent_group.add_argument("--level", choices=CONSENT_LEVELS, help="Consent level to record")
    consent_group.add_argument("--reset", action="store_true", help="Forget recorded consent")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(EXIT_OK)

    setup_logging(level=args.log_level)

    try:
        code = asyncio.run(handler(args))
    except ConsentRequired as e:
        print("CONSENT_REQUIRED", file=sys.stderr)
        print(str(e), file=sys.stderr)
        code = EXIT_CONSENT_REQUIRED
    except PluginxError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = EXIT_FAILED
    sys.exit(code)


if __name__ == "__main__":
    main()
