"""
Tournament mode for the coin hill.
Runs multiple rounds with different random seeds and reports average coins.
"""

import argparse
import logging
import random

import numpy as np

from coin_arena import CoinArena
from run_battle import LOG_LEVELS, collect_moves, load_agents


def run_single_match(agent_objs, agent_names, grid=12, turns=120, coins=4, seed=None):
    """Run one game and return final coin counts."""
    arena = CoinArena(
        arena_length=grid,
        agents=agent_names,
        max_turns=turns,
        normal_coins=coins,
        seed=seed,
    )
    arena.reset(agent_names)
    random.seed(seed)

    while not arena.is_over():
        arena.step(collect_moves(arena, agent_objs))

    return dict(arena.strengths)


def run_tournament(
    agents_dir="agents",
    rounds=10,
    grid=12,
    turns=120,
    coins=4,
):
    """Run several seeded matches, print averaged leaderboard and return it."""
    agent_objs = load_agents(agents_dir)
    if not agent_objs:
        print("❌ No agents found in:", agents_dir)
        return []
    agent_names = list(agent_objs.keys())

    # Prepare score tracking
    score_log = {name: [] for name in agent_names}

    print(f"🏁 Starting tournament: {len(agent_names)} agents × {rounds} rounds\n")
    for round_idx in range(1, rounds + 1):
        seed = round_idx
        scores = run_single_match(agent_objs, agent_names, grid, turns, coins, seed)
        print(f" Round {round_idx:2d} | Seed {seed:4d} |", end=" ")
        for n in agent_names:
            print(f"{n}:{scores[n]:3d}", end="  ")
            score_log[n].append(scores[n])
        print("")

    # Compute averages
    print("\n📊 Average Coins (across all rounds):")
    leaderboard = sorted(
        [(n, float(np.mean(v)), float(np.std(v))) for n, v in score_log.items()],
        key=lambda x: x[1],
        reverse=True,
    )
    print("-" * 48)
    for rank, (name, avg_score, std_score) in enumerate(leaderboard, start=1):
        print(f"{rank:2d}. {name:15s}  avg={avg_score:.2f}  std={std_score:.2f}")
    print("-" * 48)

    top = leaderboard[0][0] if leaderboard else None
    if top:
        print(f"🏆 Winner of tournament: {top}")
    else:
        print("No winner detected.")
    return leaderboard


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a seeded coin hill tournament.")
    parser.add_argument("--agents-dir", default="agents", help="Directory with agent .py files.")
    parser.add_argument("--rounds", type=int, default=10, help="Number of matches.")
    parser.add_argument("--grid", type=int, default=12, help="Arena side length (NxN).")
    parser.add_argument("--turns", type=int, default=120, help="Max number of turns per match.")
    parser.add_argument("--coins", type=int, default=4, help="Normal coins on the board besides gold.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level.",
    )
    return parser


def main():
    args = build_parser().parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_tournament(
        agents_dir=args.agents_dir,
        rounds=args.rounds,
        grid=args.grid,
        turns=args.turns,
        coins=args.coins,
    )


if __name__ == "__main__":
    main()
