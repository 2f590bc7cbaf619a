"""Command-line Chat Wrapped report for an OpenAI conversations export.

Usage: chat-wrapped [conversations.json] [--output-dir DIR] [--json] [-v]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from analytics import analyze_export, print_summary_report, save_analytics_files
from export_parser import ExportError, load_export
from settings import EXPORT_PATH, OUTPUT_DIR

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chat-wrapped",
        description="Generate a ChatGPT Wrapped report from conversations.json",
    )
    parser.add_argument("json_file", nargs="?", default=str(EXPORT_PATH),
                        help=f"Path to the conversations JSON file (default: {EXPORT_PATH})")
    parser.add_argument("--output-dir", "-o", default=str(OUTPUT_DIR),
                        help=f"Directory for analytics.json and CSV tables (default: {OUTPUT_DIR})")
    parser.add_argument("--json", dest="as_json", action="store_true",
                        help="Print the full analytics JSON instead of the summary report")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Exits with status 1 when the export is missing, is not valid JSON,
    is not a conversation export, or holds no usable conversations.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        data = load_export(args.json_file)
        payload = analyze_export(data).as_dict()
    except FileNotFoundError:
        print(f"Error: {args.json_file} not found.", file=sys.stderr)
        raise SystemExit(1)
    except ExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    save_analytics_files(payload, args.output_dir)
    logger.info("Analytics written to %s", args.output_dir)

    if args.as_json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print_summary_report(payload)
        print(f"\nAnalytics data has been saved to the '{args.output_dir}' directory:")
        print("1. analytics.json - Every wrapped section")
        print("2. monthly_activity.csv - Conversations per month")
        print("3. categories.csv - Conversation categories")


if __name__ == "__main__":
    main()
