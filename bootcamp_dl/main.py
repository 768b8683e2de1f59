"""CLI entry point for the Boot Camp support software fetcher.

Usage:
    # Interactive: prompts for model, manual choice and cleanup
    python -m bootcamp_dl.main

    # Non-interactive
    python -m bootcamp_dl.main --model iMac12,2 --non-interactive
    python -m bootcamp_dl.main --model MacBookPro11,5 --key 041-88800 --cleanup
    python -m bootcamp_dl.main --model iMac12,2 --choose  # asks only for the key

    # Only list compatible products
    python -m bootcamp_dl.main --model iMac12,2 --list --output candidates.json
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .common.config import Settings
from .common.errors import BootCampError
from .common.http_client import HTTPClient
from .common.logging import setup_logging
from .workflow.pipeline import EXIT_FATAL, SupportSoftwarePipeline
from .workflow.prompts import ConsolePrompter, OverridePrompter, Prompter, ScriptedPrompter

logger = logging.getLogger(__name__)


def _build_prompter(args: argparse.Namespace, settings: Settings) -> Prompter:
    """Flags answer the questions they cover; the rest go to the console."""
    if args.non_interactive or args.list:
        return ScriptedPrompter(
            model=args.model or settings.default_model,
            manual=args.choose or bool(args.key),
            key=args.key,
            cleanup=bool(args.cleanup),
        )

    console = ConsolePrompter()
    if not (args.model or args.key or args.choose or args.cleanup is not None):
        return console
    return OverridePrompter(
        console,
        model=args.model,
        manual=args.choose,
        key=args.key,
        cleanup=args.cleanup,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download and extract Boot Camp support software for a Mac model"
    )
    parser.add_argument(
        "--model",
        type=str,
        help="Mac model identifier (e.g., 'iMac12,2')",
    )
    parser.add_argument(
        "--key",
        type=str,
        help="Catalog product key to download instead of the latest match",
    )
    parser.add_argument(
        "--choose",
        action="store_true",
        help="Pick the product manually (uses --key, or asks for one)",
    )
    cleanup = parser.add_mutually_exclusive_group()
    cleanup.add_argument(
        "--cleanup",
        dest="cleanup",
        action="store_true",
        default=None,
        help="Delete the working directory once the DMG is extracted",
    )
    cleanup.add_argument(
        "--keep",
        dest="cleanup",
        action="store_false",
        help="Keep the working directory",
    )
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; use flags and defaults",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List compatible products and exit without downloading",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Write the run result (candidates, choice, paths) as JSON",
    )
    parser.add_argument(
        "--catalog-url",
        type=str,
        help="Override the software-update catalog URL",
    )
    parser.add_argument(
        "--workdir",
        type=str,
        help="Directory for BC-<key>/ and the final DMG (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    settings = Settings.load(args.config)
    if args.catalog_url:
        settings.network.catalog_url = args.catalog_url

    prompter = _build_prompter(args, settings)

    with HTTPClient(settings) as client:
        pipeline = SupportSoftwarePipeline(
            prompter=prompter,
            settings=settings,
            client=client,
            cwd=Path(args.workdir) if args.workdir else None,
        )
        try:
            result = pipeline.run(list_only=args.list)
        except (BootCampError, OSError) as exc:
            logger.error("Aborted: %s", exc)
            return EXIT_FATAL

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info("Output written to %s", args.output)

    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
