from __future__ import annotations

import argparse
import asyncio
import math
import random
import sys
from uuid import uuid4

from app.core.logging import configure_logging
from app.game.arithmetic.profiles import parse_difficulty
from app.game.arithmetic.rounding import round_one_decimal
from app.game.arithmetic.session import advance_question, create_game, start_question, submit_answer
from app.game.arithmetic.types import Difficulty, GameSession
from app.game.leaderboard.memory_store import InMemoryLeaderboardStore
from app.game.leaderboard.service import LeaderboardService


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play MathStorm in the terminal")
    parser.add_argument("--username", required=True)
    parser.add_argument(
        "--difficulty",
        default=Difficulty.EXPERT.value,
        choices=[difficulty.value for difficulty in Difficulty],
    )
    parser.add_argument("--games", type=int, default=1, help="games to play in this session")
    parser.add_argument("--seed", type=int, help="seed for reproducible questions")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def _read_answer(prompt: str) -> float:
    while True:
        raw = input(prompt).strip().replace(",", ".")
        try:
            value = float(raw)
        except ValueError:
            value = math.nan
        if math.isfinite(value):
            return value
        print("Please enter a number.")  # noqa: T201


def play_game(game: GameSession) -> None:
    while not game.is_complete:
        question = game.current_question
        if question is None:
            break
        start_question(game)
        answer = _read_answer(f"Q{question.id}: {question.text} = ")
        submit_answer(game, answer)
        print(  # noqa: T201
            f"  correct={question.correct_answer:g} time={question.elapsed_seconds:.1f}s "
            f"off={question.percent_difference:.1f}% score={question.score:.1f}"
        )
        advance_question(game)


async def _run(args: argparse.Namespace) -> int:
    difficulty = parse_difficulty(args.difficulty)
    rng = random.Random(args.seed)
    leaderboard = LeaderboardService(InMemoryLeaderboardStore())
    user_id = str(uuid4())

    for game_no in range(1, max(args.games, 1) + 1):
        print(f"\nGame {game_no} ({difficulty.value}), lower score is better")  # noqa: T201
        game = create_game(difficulty, rng)
        play_game(game)
        total = round_one_decimal(game.total_score)
        entry = await leaderboard.add_entry(
            user_id=user_id,
            username=args.username,
            game_id=str(uuid4()),
            difficulty=difficulty,
            score=total,
        )
        status = f"rank {entry.rank}" if entry is not None else "not ranked"
        print(f"Total score: {total:.1f} ({status})")  # noqa: T201

    print(f"\nLeaderboard: {difficulty.value}")  # noqa: T201
    for entry in await leaderboard.get_leaderboard(difficulty):
        print(f"{entry.rank:>3}. {entry.username:<20} {entry.score:>8.1f}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level, json_logs=False, stream=sys.stderr)
    try:
        return asyncio.run(_run(args))
    except (KeyboardInterrupt, EOFError):
        print("\nbye")  # noqa: T201
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
