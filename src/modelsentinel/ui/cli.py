# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from modelsentinel.app import (
    diff_catalog,
    discover_models,
    regenerate_manifest,
    sync_catalog,
    validate_catalog_at,
)
from modelsentinel.config import ConfigurationError, configure_logging, load_settings
from modelsentinel.config.logging import resolve_log_level
from modelsentinel.domain.reconciliation import ExitCode
from modelsentinel.domain.reporting import render_diff_summary
from modelsentinel.domain.validation import format_result

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from modelsentinel.config import Settings
    from modelsentinel.domain.reconciliation import SyncReport

log = logging.getLogger(__name__)


def _parse_providers(value: str) -> list[str]:
    providers = [item.strip() for item in value.split(",") if item.strip()]
    if not providers:
        raise argparse.ArgumentTypeError("expected a comma-separated list of providers")
    return providers


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="modelsentinel",
        description="Keep a model catalog in sync with provider APIs",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Config file (default: ./config.yaml, then ~/.config/modelsentinel/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (debug, info, warning, error); overrides SENTINEL_LOG_LEVEL",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser(
        "sync",
        help="Discover, diff, validate and write changes, then open a pull request",
    )
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without writing",
    )
    _add_common_sync_flags(sync)

    diff = subparsers.add_parser("diff", help="Show what would change (no writes)")
    _add_common_sync_flags(diff)

    discover = subparsers.add_parser("discover", help="Run discovery only and print the models")
    discover.add_argument(
        "--provider",
        type=str,
        required=True,
        help="Provider to discover models from",
    )
    discover.add_argument(
        "--no-cache",
        action="store_true",
        help="Bypass the HTTP response cache",
    )

    validate = subparsers.add_parser("validate", help="Validate the existing catalog (CI check)")
    validate.add_argument(
        "--catalog-path",
        type=str,
        help="Path to the model catalog (default: from config)",
    )

    manifest = subparsers.add_parser("manifest", help="Regenerate manifest.yaml")
    manifest.add_argument(
        "--catalog-path",
        type=str,
        help="Path to the model catalog (default: from config)",
    )

    return parser.parse_args(list(argv))


def _add_common_sync_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--providers",
        type=_parse_providers,
        help="Comma-separated providers to process (default: from config)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Bypass the HTTP response cache",
    )
    parser.add_argument(
        "--catalog-path",
        type=str,
        help="Path to the model catalog (default: from config)",
    )


def _load(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    return settings.with_overrides(
        catalog_path=getattr(args, "catalog_path", None),
        providers=getattr(args, "providers", None),
        dry_run=getattr(args, "dry_run", False),
        no_cache=getattr(args, "no_cache", False),
    )


def _log_outcomes(report: SyncReport) -> None:
    for outcome in report.outcomes:
        if outcome.error is not None:
            log.error("%s: failed: %s", outcome.provider, outcome.error)
        elif outcome.skipped:
            log.info("%s: skipped (%s)", outcome.provider, outcome.skip_reason)
        else:
            counts = outcome.counts
            log.info(
                "%s: new=%s updated=%s disappeared=%s draft=%s",
                outcome.provider,
                counts.new,
                counts.updated,
                counts.disappeared,
                outcome.draft,
            )
    if report.version is not None:
        log.info("Catalog version %s -> %s", report.previous_version, report.version)
    if report.submission is not None:
        log.info(
            "Pull request opened: %s (draft=%s)",
            report.submission.url,
            report.submission.draft,
        )
    if report.error is not None:
        log.error("%s", report.error)


def _run(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "sync":
        report = sync_catalog(settings)
        if report.dry_run:
            for outcome in report.outcomes:
                if outcome.changeset is not None:
                    print(render_diff_summary(outcome.changeset))
        _log_outcomes(report)
        return int(report.exit_code)

    if args.command == "diff":
        report = diff_catalog(settings)
        for outcome in report.outcomes:
            if outcome.changeset is not None:
                print(render_diff_summary(outcome.changeset))
        _log_outcomes(report)
        return int(report.exit_code)

    if args.command == "discover":
        models = discover_models(settings, args.provider)
        for model in models:
            print(
                f"{model.name:<40} {model.family or '':<20} {model.status or '':<10} "
                f"{model.discovered_by}"
            )
        print(f"\nTotal: {len(models)} models")
        return ExitCode.SUCCESS

    if args.command == "validate":
        result = validate_catalog_at(settings.sync.catalog_path)
        print(format_result(result))
        return ExitCode.FAILURE if result.has_errors else ExitCode.SUCCESS

    if args.command == "manifest":
        path = regenerate_manifest(settings.sync.catalog_path)
        print(f"Manifest written to {path}")
        return ExitCode.SUCCESS

    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        settings = _load(parsed_args)
        level = resolve_log_level(parsed_args.log_level or settings.log_level)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)
    configure_logging(level=level, force=True)

    try:
        code = _run(parsed_args, settings)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    if code:
        sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
