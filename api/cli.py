"""
CLI Client for the Request Orchestrator

Runs a JSON plan of HTTP calls (single call, chain or concurrent) through a
store with the API middleware and prints the dispatched actions and outcomes.

Plan file format:

    {
        "mode": "chain",
        "calls": [
            {"method": "GET", "url": "/users/1", "success_type": "USER_LOADED"},
            {"method": "GET", "path": "/users/1/posts", "error_type": "POSTS_FAILED"}
        ],
        "fields": {"request_id": "abc"}
    }
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ValidationError

from request_orchestrator import (
    call_action,
    chain_action,
    concurrent_action,
    create_api_middleware,
    create_store,
    recording_reducer,
)
from shared.config import Settings, load_settings
from shared.errors import DescriptorError
from shared.file_logger import setup_file_logger
from shared.schemas import Outcome
from shared.transport import HttpTransport

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_PLAN = 2


class RunPlan(BaseModel):
    """Calls to run and how to compose them"""
    mode: Literal["call", "chain", "concurrent"] = "call"
    calls: List[Dict[str, Any]]
    fields: Dict[str, Any] = {}


def load_plan(path: str) -> RunPlan:
    """
    Load and validate a plan file.

    Raises:
        ValueError: If the file is not valid JSON or not a valid plan
    """
    try:
        plan = RunPlan.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ValueError(f"Invalid plan {path}: {e}") from e

    if not plan.calls:
        raise ValueError(f"Invalid plan {path}: no calls")
    return plan


def build_action(plan: RunPlan) -> Dict[str, Any]:
    """
    Build the API action for a plan.

    Plan calls are static, so each producer ignores the previous outcome.
    """
    if plan.mode == "call":
        return call_action(plan.calls[0], **plan.fields)

    producers = [
        (lambda previous, spec=spec: call_action(spec, **plan.fields))
        for spec in plan.calls
    ]
    if plan.mode == "chain":
        return chain_action(*producers, **plan.fields)
    return concurrent_action(*producers, **plan.fields)


async def run_plan(plan: RunPlan, transport: HttpTransport) -> Dict[str, Any]:
    """
    Dispatch a plan through a recording store.

    Returns:
        Dict with the dispatched actions and the outcome list
    """
    store = create_store(
        recording_reducer,
        initial_state=[],
        middlewares=[create_api_middleware(transport=transport)]
    )

    result = await store.dispatch(build_action(plan))

    if result is None:
        outcomes = []
    elif isinstance(result, Outcome):
        outcomes = [result]
    else:
        outcomes = list(result)

    return {
        "dispatched": store.get_state(),
        "outcomes": outcomes,
    }


def to_jsonable(value: Any) -> Any:
    """Convert outcomes, errors and nested values for json.dumps"""
    if isinstance(value, Outcome):
        return to_jsonable(value.to_dict())
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


def format_output(report: Dict[str, Any]):
    """
    Format and display the run report.

    Args:
        report: Result of run_plan
    """
    print("=" * 60)
    print("DISPATCHED ACTIONS")
    print("=" * 60)
    print(json.dumps(to_jsonable(report["dispatched"]), indent=2))

    print("\n" + "=" * 60)
    print("OUTCOMES")
    print("=" * 60)
    print(json.dumps(to_jsonable(report["outcomes"]), indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a plan of HTTP calls through the request orchestrator"
    )

    parser.add_argument(
        "plan",
        help="Path to a JSON plan file"
    )

    parser.add_argument(
        "--base-url",
        help="API base URL (default: API_BASE_URL environment variable)"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: API_TIMEOUT or 30)"
    )

    parser.add_argument(
        "--env-file",
        help="Path to a .env file to load"
    )

    parser.add_argument(
        "--log-level",
        help="Logging level (default: LOG_LEVEL or INFO)"
    )

    parser.add_argument(
        "--log-dir",
        help="Directory for log files (default: LOG_DIR or ./logs)"
    )

    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Only log to the console"
    )

    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of environment settings"""
    settings = load_settings(args.env_file)
    overrides = {
        "api_base_url": args.base_url,
        "request_timeout": args.timeout,
        "log_level": args.log_level,
        "log_dir": args.log_dir,
    }
    return settings.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)
    settings = resolve_settings(args)

    logger = setup_file_logger(
        "cli",
        log_level=settings.log_level,
        output_dir=None if args.no_log_file else settings.log_dir
    )

    try:
        plan = load_plan(args.plan)
    except (OSError, ValueError) as e:
        print(f"Error loading plan: {e}", file=sys.stderr)
        return EXIT_BAD_PLAN

    logger.info(f"Running {plan.mode} plan with {len(plan.calls)} call(s)")

    async def run() -> Dict[str, Any]:
        async with HttpTransport.from_settings(settings) as transport:
            return await run_plan(plan, transport)

    try:
        report = asyncio.run(run())
    except DescriptorError as e:
        print(f"Invalid call in plan: {e}", file=sys.stderr)
        return EXIT_BAD_PLAN

    format_output(report)

    if all(outcome.ok for outcome in report["outcomes"]):
        return EXIT_OK
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
