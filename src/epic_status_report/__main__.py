"""Entry point for ``python -m epic_status_report``."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys

from dateutil import parser as date_parser

from epic_status_report.core.errors import ReportError
from epic_status_report.core.jira_client import JiraClient
from epic_status_report.core.markdown_renderer import PROFILES, get_profile
from epic_status_report.core.pipeline import (
    DATE_FORMAT,
    ReportPipeline,
    parse_issue_ids,
    today_label,
)
from epic_status_report.core.report_writer import ReportWriter, report_path
from epic_status_report.services.auth_manager import AuthManager
from epic_status_report.services.config_manager import ConfigManager, parse_value

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="epic-status-report",
        description="Render Jira epics and their linked stories into a markdown status report.",
    )
    parser.add_argument(
        "issues",
        nargs="?",
        default="",
        help="Comma-separated epic keys, e.g. PROJ-1,PROJ-7.",
    )
    parser.add_argument("--config", help="Path to a JSON config file.")
    parser.add_argument("--output", help="Report path (default: <working_dir>/staging/<document_name>).")
    parser.add_argument("--profile", choices=sorted(PROFILES), help="Rendering profile.")
    parser.add_argument("--report-date", help="Date shown in the report header (default: today, UTC).")
    parser.add_argument(
        "--test",
        action="store_true",
        help="Decode the configured fixture file instead of calling Jira.",
    )
    parser.add_argument(
        "--append",
        action="store_true",
        help="Append to an existing report instead of starting a new one.",
    )
    parser.add_argument(
        "--isolate-failures",
        action="store_true",
        help="Skip stories that fail to fetch instead of aborting the run.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    maint = parser.add_argument_group("configuration")
    maint.add_argument("--show-config", action="store_true", help="Print the configuration and exit.")
    maint.add_argument(
        "--set",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Persist a config value (repeatable) and exit.",
    )
    maint.add_argument("--reset-config", action="store_true", help="Restore default config and exit.")
    maint.add_argument(
        "--store-token",
        action="store_true",
        help="Read an API token from stdin into the OS keyring and exit.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the report generator, returning the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = ConfigManager(args.config)

    if args.reset_config or args.set or args.show_config or args.store_token:
        return _maintenance(args, config, parser)

    try:
        run_cfg = config.run_config(
            render_profile=args.profile,
            test=True if args.test else None,
            isolate_failures=True if args.isolate_failures else None,
        )
        profile = get_profile(run_cfg.render_profile, run_cfg.browse_url or None)
        date_label = _date_label(args.report_date) or today_label()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    issue_ids = parse_issue_ids(args.issues)
    if not run_cfg.test and not issue_ids:
        parser.error("no issue keys given")

    path = args.output or report_path(run_cfg.working_dir, run_cfg.document_name)
    writer = ReportWriter(path, title=run_cfg.report_title, file_mode=run_cfg.file_mode)

    try:
        if run_cfg.test:
            client = JiraClient(run_cfg.base_url, "", timeout=run_cfg.request_timeout)
            pipeline = ReportPipeline(client, writer, profile)
            try:
                if not args.append:
                    writer.initialize(date_label)
                pipeline.run_test_mode(run_cfg.fixture_path)
            finally:
                client.close()
        else:
            if not run_cfg.base_url:
                logger.error("base_url is not configured (use --set base_url=...)")
                return 1
            logger.info("mode        : executing")
            token = AuthManager(config).get_api_token()
            client = JiraClient(run_cfg.base_url, token, timeout=run_cfg.request_timeout)
            pipeline = ReportPipeline(
                client, writer, profile, isolate_failures=run_cfg.isolate_failures,
            )
            try:
                summary = pipeline.run(
                    issue_ids, date_label=date_label, initialize=not args.append,
                )
            finally:
                client.close()
            for err in summary.errors:
                logger.warning("Skipped: %s", err)
    except ReportError as exc:
        logger.error("Report generation failed: %s", exc)
        return 1

    logger.info("exit => 0")
    return 0


def _date_label(raw: str | None) -> str | None:
    if not raw:
        return None
    try:
        return date_parser.parse(raw).strftime(DATE_FORMAT)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unrecognised --report-date {raw!r}: {exc}") from exc


def _maintenance(
    args: argparse.Namespace, config: ConfigManager, parser: argparse.ArgumentParser,
) -> int:
    if args.reset_config:
        config.reset()
    if args.set:
        values = {}
        for item in args.set:
            key, sep, raw = item.partition("=")
            if not sep or not key.strip():
                parser.error(f"--set expects KEY=VALUE, got {item!r}")
            values[key.strip()] = parse_value(raw)
        config.update(values)
        logger.info("Saved %s to %s", ", ".join(sorted(values)), config.path)
    if args.store_token:
        if sys.stdin.isatty():
            token = getpass.getpass("API token: ")
        else:
            token = sys.stdin.readline()
        try:
            AuthManager(config).store_api_token(token)
        except ReportError as exc:
            logger.error("%s", exc)
            return 1
    if args.show_config:
        print(json.dumps(config.data, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
