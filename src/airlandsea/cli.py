from __future__ import annotations

import argparse
import random
from pathlib import Path

from airlandsea.app import GameContext, create_context
from airlandsea.engine.ai import AISpec, choose_action
from airlandsea.engine.errors import MatchError
from airlandsea.engine.match import card_locations
from airlandsea.logging_utils import get_logger, setup_logging
from airlandsea.paths import get_paths

log = get_logger("cli")


def run_match(ctx: GameContext, bot_rng: random.Random, spec: AISpec, max_steps: int, check: bool) -> dict[str, object]:
    room = ctx.rooms.create_room("North")
    room, state = ctx.rooms.join_room(room.id, "South")

    steps = 0
    rejected = 0
    while steps < max_steps:
        action = choose_action(state, bot_rng, spec)
        if action is None:
            break
        try:
            state = ctx.matches.apply(state.id, action)
        except MatchError as e:
            rejected += 1
            log.warning(f"Bot action rejected: {e}")
        if check:
            card_locations(state)
        steps += 1

    winner = state.winner()
    return {
        "match_id": state.id,
        "battles": state.battle_number,
        "steps": steps,
        "rejected": rejected,
        "winner": winner.name if winner is not None else None,
        "scores": [p.score for p in state.players],
    }


def main() -> int:
    parser = argparse.ArgumentParser(prog="airlandsea-sim", description="Run self-play matches.")
    parser.add_argument("--matches", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-steps", type=int, default=5000)
    parser.add_argument("--withdraw-weight", type=float, default=AISpec.withdraw_weight)
    parser.add_argument(
        "--telemetry",
        type=Path,
        nargs="?",
        const=get_paths().telemetry_file,
        default=None,
        help="append JSONL telemetry (default file under the userdata dir)",
    )
    parser.add_argument("--check", action="store_true", help="verify card conservation after every step")
    args = parser.parse_args()

    setup_logging()
    ctx = create_context(seed=args.seed, telemetry_path=args.telemetry)
    bot_rng = random.Random(args.seed)
    spec = AISpec(withdraw_weight=args.withdraw_weight)

    wins: dict[str, int] = {}
    for i in range(args.matches):
        result = run_match(ctx, bot_rng, spec, args.max_steps, args.check)
        log.info(f"Match {i + 1}/{args.matches}: {result}")
        key = str(result["winner"])
        wins[key] = wins.get(key, 0) + 1

    print(f"Played {args.matches} matches: {wins}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
