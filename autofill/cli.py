"""Command-line interface for the form autofill engine."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from .browser import BrowserConfig, open_page
from .config import ConfigError, SettingsBundle, export_bundle, load_bundle
from .coordinator import ping_frames, run_fill_pass
from .io_utils import generate_run_id, prepare_run_directories, write_json
from .logging_utils import build_logger, sensitive_values
from .normalizer import normalize_profile


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Classify form fields on a page and fill them from a profile"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--run-id", dest="run_id", help="Optional run identifier")
    common.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    fill_parser = subparsers.add_parser(
        "fill", help="Fill the forms on a page", parents=[common]
    )
    fill_parser.add_argument("--url", required=True, help="Page to fill")
    fill_parser.add_argument(
        "--config", type=Path, help="Settings bundle JSON (profile, settings, siteRules)"
    )
    fill_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be filled without touching the page",
    )
    fill_parser.add_argument(
        "--headed", action="store_true", help="Show the browser window"
    )

    ping_parser = subparsers.add_parser(
        "ping", help="Check which frames of a page respond", parents=[common]
    )
    ping_parser.add_argument("--url", required=True, help="Page to open")
    ping_parser.add_argument(
        "--headed", action="store_true", help="Show the browser window"
    )

    check_parser = subparsers.add_parser(
        "check-config", help="Validate a settings bundle and print it merged with defaults"
    )
    check_parser.add_argument("--config", type=Path, required=True, help="Settings bundle JSON")

    return parser


def _load(parser: argparse.ArgumentParser, path: Path | None) -> SettingsBundle:
    if path is None:
        return SettingsBundle()
    try:
        return load_bundle(path)
    except ConfigError as exc:
        parser.error(f"{path}: {exc}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "check-config":
        bundle = _load(parser, args.config)
        print(export_bundle(bundle))
        return

    bundle = _load(parser, getattr(args, "config", None))
    if getattr(args, "dry_run", False):
        bundle.settings.setdefault("fillPolicy", {})["dryRun"] = True

    run_id = args.run_id or generate_run_id()
    run_paths = prepare_run_directories(run_id, args.command)
    logger = build_logger(
        run_paths,
        verbose=args.verbose or bundle.debug,
        redact=sensitive_values(normalize_profile(bundle.profile).to_dict()),
    )
    browser_config = BrowserConfig(headless=not args.headed)

    if args.command == "fill":
        with open_page(args.url, browser_config) as page:
            result = run_fill_pass(page, bundle, logger=logger)
    elif args.command == "ping":
        with open_page(args.url, browser_config) as page:
            result = {"url": page.url, "frames": ping_frames(page, logger=logger)}
    else:
        parser.error(f"Unknown command: {args.command}")

    summary_path = run_paths.build_path(f"{args.command}.json")
    write_json(summary_path, result)
    logger.info("Summary written to %s", summary_path)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    main()
