import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .database import init_database, session_context
from .env import get_database_url, load_env
from .errors import JoblyError
from .logger import get_logger
from .repositories import companies, jobs
from .schema import coerce_company_filters, coerce_job_filters

# Domain error status -> process exit code
EXIT_CODES = {400: 2, 404: 4}


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _read_payload(args: argparse.Namespace) -> Dict[str, Any]:
    if args.data is not None:
        raw = args.data
    elif args.input is not None:
        input_path = Path(args.input)
        if not input_path.exists():
            raise SystemExit(f"Input file not found: {input_path}")
        raw = input_path.read_text(encoding="utf-8")
    else:
        raise SystemExit("Provide a JSON payload with --data or --input")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Invalid JSON payload: {e}")
    if not isinstance(payload, dict):
        raise SystemExit("JSON payload must be an object")
    return payload


def _query(pairs: List[tuple]) -> Dict[str, Any]:
    """Collect the filter options that were actually given."""
    return {key: value for key, value in pairs if value is not None}


def cmd_init_db(args: argparse.Namespace) -> None:
    init_database(args.db)
    print(f"Initialized database: {args.db}")


def cmd_company_create(args: argparse.Namespace) -> None:
    data = _read_payload(args)
    with session_context(args.db) as session:
        _emit({"company": companies.create(session, data)})


def cmd_company_list(args: argparse.Namespace) -> None:
    filters = coerce_company_filters(_query([
        ("name", args.name),
        ("minEmployees", args.min_employees),
        ("maxEmployees", args.max_employees),
    ]))
    with session_context(args.db) as session:
        _emit({"companies": companies.find_all(session, **filters)})


def cmd_company_get(args: argparse.Namespace) -> None:
    with session_context(args.db) as session:
        _emit({"company": companies.get(session, args.handle)})


def cmd_company_update(args: argparse.Namespace) -> None:
    data = _read_payload(args)
    with session_context(args.db) as session:
        _emit({"company": companies.update(session, args.handle, data)})


def cmd_company_delete(args: argparse.Namespace) -> None:
    with session_context(args.db) as session:
        companies.remove(session, args.handle)
    _emit({"deleted": args.handle})


def cmd_job_create(args: argparse.Namespace) -> None:
    data = _read_payload(args)
    with session_context(args.db) as session:
        _emit({"job": jobs.create(session, data)})


def cmd_job_list(args: argparse.Namespace) -> None:
    filters = coerce_job_filters(_query([
        ("title", args.title),
        ("minSalary", args.min_salary),
        ("maxSalary", args.max_salary),
        ("hasEquity", True if args.has_equity else None),
    ]))
    with session_context(args.db) as session:
        _emit({"jobs": jobs.find_all(session, **filters)})


def cmd_job_get(args: argparse.Namespace) -> None:
    with session_context(args.db) as session:
        _emit({"job": jobs.get(session, args.id)})


def cmd_job_update(args: argparse.Namespace) -> None:
    data = _read_payload(args)
    with session_context(args.db) as session:
        _emit({"job": jobs.update(session, args.id, data)})


def cmd_job_delete(args: argparse.Namespace) -> None:
    with session_context(args.db) as session:
        jobs.remove(session, args.id)
    _emit({"deleted": args.id})


def _add_payload_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data", help="JSON object payload")
    p.add_argument("--input", help="Path to a JSON file with the payload")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobly", description="Jobly companies and jobs store")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", default=None, help="Database URL (default: JOBLY_DATABASE_URL or sqlite:///data/jobly.db)")

    subparsers = parser.add_subparsers(dest="command")

    init = subparsers.add_parser("init-db", help="Create tables")
    init.set_defaults(func=cmd_init_db)

    comp = subparsers.add_parser("companies", help="Manage companies")
    comp_sub = comp.add_subparsers(dest="action")

    c_create = comp_sub.add_parser("create", help="Create a company")
    _add_payload_args(c_create)
    c_create.set_defaults(func=cmd_company_create)

    c_list = comp_sub.add_parser("list", help="List companies, optionally filtered")
    c_list.add_argument("--name", help="Case-insensitive substring of the name")
    c_list.add_argument("--min-employees", help="Minimum number of employees")
    c_list.add_argument("--max-employees", help="Maximum number of employees")
    c_list.set_defaults(func=cmd_company_list)

    c_get = comp_sub.add_parser("get", help="Show a company and its jobs")
    c_get.add_argument("handle")
    c_get.set_defaults(func=cmd_company_get)

    c_update = comp_sub.add_parser("update", help="Partially update a company")
    c_update.add_argument("handle")
    _add_payload_args(c_update)
    c_update.set_defaults(func=cmd_company_update)

    c_delete = comp_sub.add_parser("delete", help="Delete a company and its jobs")
    c_delete.add_argument("handle")
    c_delete.set_defaults(func=cmd_company_delete)

    job = subparsers.add_parser("jobs", help="Manage jobs")
    job_sub = job.add_subparsers(dest="action")

    j_create = job_sub.add_parser("create", help="Create a job")
    _add_payload_args(j_create)
    j_create.set_defaults(func=cmd_job_create)

    j_list = job_sub.add_parser("list", help="List jobs, optionally filtered")
    j_list.add_argument("--title", help="Case-insensitive substring of the title")
    j_list.add_argument("--min-salary", help="Minimum salary")
    j_list.add_argument("--max-salary", help="Maximum salary")
    j_list.add_argument("--has-equity", action="store_true", help="Only jobs offering equity")
    j_list.set_defaults(func=cmd_job_list)

    j_get = job_sub.add_parser("get", help="Show a job and its company")
    j_get.add_argument("id", type=int)
    j_get.set_defaults(func=cmd_job_get)

    j_update = job_sub.add_parser("update", help="Partially update a job")
    j_update.add_argument("id", type=int)
    _add_payload_args(j_update)
    j_update.set_defaults(func=cmd_job_update)

    j_delete = job_sub.add_parser("delete", help="Delete a job")
    j_delete.add_argument("id", type=int)
    j_delete.set_defaults(func=cmd_job_delete)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    # Load .env if present (JOBLY_DATABASE_URL, JOBLY_LOG_LEVEL, ...)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    args.db = args.db or get_database_url()
    try:
        args.func(args)
    except JoblyError as e:
        get_logger().error(f"{args.command} failed", error=type(e).__name__, detail=e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        raise SystemExit(EXIT_CODES.get(e.status_code, 1))
    except SQLAlchemyError as e:
        # Storage failures surface as a generic error, exit code 1
        detail = str(getattr(e, "orig", None) or e)
        get_logger().error(f"{args.command} failed", error=type(e).__name__, detail=detail)
        print(f"Error: {detail}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
