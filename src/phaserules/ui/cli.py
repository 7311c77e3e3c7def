# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from phaserules.adapters.rule_file import load_rules
from phaserules.app import apply_conditions, bump_generation, create_resource
from phaserules.config import configure_logging, get_rules_path
from phaserules.domain.model import Condition, ConditionStatus
from phaserules.domain.rules import compute_phase
from phaserules.domain.status import ConditionUpdate

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Derive resource phases from status conditions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resource = subparsers.add_parser("resource", help="Resource management commands")
    resource_sub = resource.add_subparsers(dest="resource_command", required=True)
    resource_create = resource_sub.add_parser("create", help="Create a resource")
    resource_create.add_argument("--name", type=str, required=True, help="Resource name")
    resource_bump = resource_sub.add_parser(
        "bump", help="Record a spec change by incrementing the generation"
    )
    resource_bump.add_argument("--name", type=str, required=True, help="Resource name")

    set_condition = subparsers.add_parser("set-condition", help="Set one status condition")
    set_condition.add_argument("--resource", type=str, required=True, help="Resource name")
    set_condition.add_argument("--type", type=str, required=True, help="Condition type")
    set_condition.add_argument(
        "--status",
        type=str,
        required=True,
        choices=[str(status) for status in ConditionStatus],
        help="Condition status",
    )
    set_condition.add_argument("--reason", type=str, default="", help="Machine-readable reason")
    set_condition.add_argument("--message", type=str, default="", help="Human-readable message")
    _add_rules_argument(set_condition)

    set_conditions = subparsers.add_parser(
        "set-conditions",
        help="Set several conditions at once (single phase recompute)",
    )
    set_conditions.add_argument("--resource", type=str, required=True, help="Resource name")
    _add_condition_argument(set_conditions)
    set_conditions.add_argument(
        "--reason", type=str, default="", help="Reason for every condition"
    )
    set_conditions.add_argument(
        "--message", type=str, default="", help="Message for every condition"
    )
    _add_rules_argument(set_conditions)

    evaluate = subparsers.add_parser("evaluate", help="Compute a phase without storing anything")
    _add_condition_argument(evaluate)
    _add_rules_argument(evaluate)

    return parser.parse_args(list(argv))


def _add_rules_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--rules",
        type=str,
        help="Path to the TOML rule file (defaults to PHASERULES_RULES_FILE)",
    )


def _add_condition_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--condition",
        dest="conditions",
        action="append",
        default=[],
        metavar="TYPE=STATUS",
        help="Condition observation, may be repeated",
    )


def _parse_condition(value: str) -> tuple[str, ConditionStatus]:
    condition_type, separator, raw_status = value.partition("=")
    if not separator or not condition_type.strip():
        raise ValueError(f"Invalid condition (expected TYPE=STATUS): {value}")
    try:
        status = ConditionStatus(raw_status.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid condition status: {raw_status}") from exc
    return condition_type.strip(), status


def _condition_updates(args: argparse.Namespace) -> list[ConditionUpdate]:
    if args.command == "set-condition":
        return [
            ConditionUpdate(
                type=args.type,
                status=args.status,
                reason=args.reason,
                message=args.message,
            )
        ]
    updates: list[ConditionUpdate] = []
    for value in args.conditions:
        condition_type, status = _parse_condition(value)
        updates.append(
            ConditionUpdate(
                type=condition_type,
                status=status,
                reason=getattr(args, "reason", ""),
                message=getattr(args, "message", ""),
            )
        )
    return updates


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    updates: list[ConditionUpdate] = []
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command != "resource":
            updates = _condition_updates(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "resource":
            if parsed_args.resource_command == "create":
                create_resource(parsed_args.name)
            else:
                bump_generation(parsed_args.name)
            return

        rules = load_rules(get_rules_path(parsed_args.rules))
        if parsed_args.command == "evaluate":
            conditions = [Condition(type=update.type, status=update.status) for update in updates]
            print(compute_phase(rules, conditions))
            return

        result = apply_conditions(parsed_args.resource, updates, rules=rules)
        print(result.resource.phase)
    except Exception:  # noqa: BLE001
        log.exception("Command failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
