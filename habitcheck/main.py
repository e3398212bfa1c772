#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Command Line
`habitcheck serve` runs the API, `habitcheck report` prints a user's report
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import uvicorn

from habitcheck.config import get_settings
from habitcheck.core.analytics import AnalyticsEngine
from habitcheck.core.database import create_database
from habitcheck.core.exceptions import HabitCheckError

logger = logging.getLogger(__name__)


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="habitcheck", description="Habit tracking and analytics")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument('--host', default=settings.HOST, help='Server host')
    serve.add_argument('--port', type=int, default=settings.PORT, help='Server port')
    serve.add_argument('--reload', action='store_true', help='Reload on code changes')

    report = subparsers.add_parser("report", help="Print the plain-text habit report")
    report.add_argument('--user-id', required=True, help='Owner of the habits')
    report.add_argument('--output', type=Path, help='Write to a file instead of stdout')

    return parser


def run_serve(args, settings) -> int:
    logger.info(f"🚀 Starting server on http://{args.host}:{args.port}")
    if settings.DEBUG:
        logger.info(f"📚 API docs: http://{args.host}:{args.port}/api/docs")

    try:
        uvicorn.run(
            "habitcheck.api.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=settings.LOG_LEVEL.lower(),
        )
    except KeyboardInterrupt:
        logger.info("👋 Server stopped")
    return 0


def run_report(args, settings) -> int:
    database = create_database(settings)
    habits = database.list_habits(args.user_id)
    report = AnalyticsEngine().report(habits, date.today(), datetime.now())

    if args.output:
        args.output.write_text(report, encoding="utf-8")
        logger.info(f"📄 Report written to {args.output}")
    else:
        sys.stdout.write(report)
    return 0


def main(argv=None) -> int:
    settings = get_settings()
    settings.setup_logging()
    args = build_parser(settings).parse_args(argv)

    try:
        if args.command == "serve":
            return run_serve(args, settings)
        return run_report(args, settings)
    except HabitCheckError as e:
        logger.error(f"💥 {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
