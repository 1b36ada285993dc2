#!/usr/bin/env python3
"""Entry point: scan an inbox export for job leads and manage the tracker.

Usage:
  python run_scan.py [INBOX_DIR] [--ai] [--no-report] [--export PATH]
  python run_scan.py --tailor JOB_ID
  python run_scan.py --status JOB_ID STATUS
  python run_scan.py --delete JOB_ID
  python run_scan.py --add URL
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobflow.agent import add_job, run, tailor
from jobflow.log import get_logger
from jobflow.models import JobStatus
from jobflow.tracker import delete_job, export_csv, get_jobs, update_status

log = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scan exported inbox messages for job leads and track applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("inbox", nargs="?", type=Path, default=None,
                        help="Folder of .eml/.html exports (default: data/inbox)")
    parser.add_argument("--ai", action="store_true", help="Extract leads with the LLM instead of the local heuristic")
    parser.add_argument("--no-report", action="store_true", help="Skip writing the markdown scan report")
    parser.add_argument("--export", type=Path, default=None, metavar="PATH",
                        help="Export the tracker to a CSV file after the scan")

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--tailor", metavar="JOB_ID", help="Cover letter, resume and interview prep for a job")
    actions.add_argument("--status", nargs=2, metavar=("JOB_ID", "STATUS"),
                         help="Move a job to another stage: " + ", ".join(s.value for s in JobStatus))
    actions.add_argument("--delete", metavar="JOB_ID", help="Remove a job from the tracker")
    actions.add_argument("--add", metavar="URL", help="Track a posting by its link")
    return parser


def _tailor(job_id: str) -> int:
    try:
        result = tailor(job_id)
    except KeyError as exc:
        log.error("%s", exc.args[0])
        return 1
    print(result["job"].cover_letter)
    print()
    for i, q in enumerate(result["interview_questions"], 1):
        print(f"{i}. {q}")
    return 0


def _set_status(job_id: str, status: str) -> int:
    try:
        new_status = JobStatus.parse(status)
    except ValueError as exc:
        log.error("%s", exc)
        return 2
    if not update_status(job_id, new_status):
        log.error("No tracked job with id %r", job_id)
        return 1
    log.info("%s → %s", job_id, new_status.value)
    return 0


def _delete(job_id: str) -> int:
    if not delete_job(job_id):
        log.error("No tracked job with id %r", job_id)
        return 1
    log.info("Deleted %s", job_id)
    return 0


def _add(url: str) -> int:
    try:
        job = add_job(url)
    except ValueError as exc:
        log.error("%s", exc)
        return 2
    if job is not None:
        print(job.id)
    return 0


def _scan(args: argparse.Namespace) -> int:
    result = run(
        inbox_dir=args.inbox,
        mode="ai" if args.ai else None,
        write_report=not args.no_report,
    )
    log.info("Run complete.")
    log.info("  Messages scanned: %d", result["messages_scanned"])
    log.info("  Leads found: %d", result["leads_found"])
    log.info("  New jobs tracked: %d", result["jobs_added"])
    if result["report_path"]:
        log.info("  Report: %s", result["report_path"])
    if args.export is not None:
        path = export_csv(get_jobs(), args.export)
        log.info("  Export: %s", path)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.tailor is not None:
        return _tailor(args.tailor)
    if args.status is not None:
        return _set_status(*args.status)
    if args.delete is not None:
        return _delete(args.delete)
    if args.add is not None:
        return _add(args.add)
    return _scan(args)


if __name__ == "__main__":
    sys.exit(main())
