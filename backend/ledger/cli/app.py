"""Command-line entry point for scoring rounds and settling stored sessions.

Usage:
    ledger settle <session_id>
    ledger stats <member>
    ledger round --scores 32000 28000 24000 16000 [--sit-out 4] [--tobi 3:0]

Results are printed to stdout as JSON; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import TYPE_CHECKING

import structlog

from ledger.cli.settings import LedgerSettings
from ledger.logic.breakdown import settle_session
from ledger.logic.exceptions import LedgerError
from ledger.logic.rounding import active_ranks
from ledger.logic.scoring import calculate_round_scores
from ledger.logic.settings import active_seat_count
from ledger.logic.stats import all_member_names, calc_groups, calc_monthly, calc_opponents, calc_overview
from ledger.logic.types import TobiInfo
from shared.dal import FileSessionRepository
from shared.logging import bind_command_context, setup_logging

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.dal import SessionRepository

logger = structlog.get_logger()


class SessionNotFoundError(LedgerError):
    """No stored session has the requested id."""


class UnknownMemberError(LedgerError):
    """The member name does not appear in any stored session."""


def parse_tobi(value: str) -> TobiInfo:
    """Parse ``victim:attacker`` seat indices."""
    victim, sep, attacker = value.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected VICTIM:ATTACKER, got {value!r}")
    try:
        return TobiInfo(victim=int(victim), attacker=int(attacker))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"seat indices must be integers, got {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ledger", description="Mahjong session scoring and settlement")
    commands = parser.add_subparsers(dest="command", required=True)

    settle = commands.add_parser("settle", help="settle a stored session")
    settle.add_argument("session_id")

    stats = commands.add_parser("stats", help="statistics for one member across all stored sessions")
    stats.add_argument("member")

    round_cmd = commands.add_parser("round", help="score a single round with the configured rules")
    round_cmd.add_argument("--scores", type=int, nargs="+", required=True, help="raw points per seat")
    round_cmd.add_argument("--sit-out", type=int, default=None, help="seat that sat out this round")
    round_cmd.add_argument("--tobi", type=parse_tobi, default=None, help="VICTIM:ATTACKER seats")

    return parser


async def settle_command(repository: SessionRepository, session_id: str) -> dict:
    session = await repository.get_session(session_id)
    if session is None:
        raise SessionNotFoundError(f"session {session_id!r} not found")
    return settle_session(session).model_dump(mode="json", by_alias=True)


async def stats_command(repository: SessionRepository, member: str) -> dict:
    sessions = await repository.list_sessions()
    if member not in all_member_names(sessions):
        raise UnknownMemberError(f"member {member!r} has not played in any session")
    groups = await repository.list_groups()
    return {
        "overview": calc_overview(sessions, member).model_dump(mode="json"),
        "monthly": [m.model_dump(mode="json") for m in calc_monthly(sessions, member)],
        "opponents": [o.model_dump(mode="json") for o in calc_opponents(sessions, member)],
        "groups": [g.model_dump(mode="json") for g in calc_groups(sessions, groups, member)],
    }


def round_command(
    config: LedgerSettings,
    scores: Sequence[int],
    sit_out: int | None = None,
    tobi: TobiInfo | None = None,
) -> dict:
    """Score one round. Five scores mean a five-member table, where one seat must sit out."""
    raw: list[int | None] = [None if seat == sit_out else score for seat, score in enumerate(scores)]
    settings = config.session_settings(active_seat_count(len(scores)))
    finals = calculate_round_scores(
        raw,
        settings.return_points,
        settings.uma,
        settings.tobi_penalty,
        tobi if settings.tobi else None,
        settings.start_points,
    )
    return {
        "ranks": active_ranks(raw),
        "scores": finals,
        "money": [score * settings.rate for score in finals],
    }


def run(args: argparse.Namespace, config: LedgerSettings) -> dict:
    if args.command == "round":
        return round_command(config, args.scores, args.sit_out, args.tobi)

    repository = FileSessionRepository(config.data_file)
    if args.command == "settle":
        return asyncio.run(settle_command(repository, args.session_id))
    return asyncio.run(stats_command(repository, args.member))


def _log_context(args: argparse.Namespace) -> dict[str, str]:
    if args.command == "settle":
        return {"session_id": args.session_id}
    if args.command == "stats":
        return {"member": args.member}
    return {}


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = LedgerSettings()
    setup_logging(level=config.log_level, log_format=config.log_format, log_file=config.log_file)
    bind_command_context(args.command, **_log_context(args))

    try:
        result = run(args, config)
    except LedgerError as e:
        logger.warning("command failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
