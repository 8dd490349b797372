import importlib.util
import logging
import os
import sys
import random
from typing import Dict, List
import argparse

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
import matplotlib.patches as mpatches
import matplotlib.colors as mcolors

from coin_arena import CoinArena

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# -------------------- Agent Loader --------------------
def load_agent_from_file(filepath: str, name: str):
    spec = importlib.util.spec_from_file_location(name, filepath)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot load agent module from {filepath}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    AgentClass = getattr(module, "Agent", None)
    if AgentClass is None:
        raise ValueError(f"No Agent class found in {filepath}")
    return AgentClass(name)


def find_agent_files(agents_dir: str) -> List[str]:
    py_files = []
    for fname in os.listdir(agents_dir):
        if fname.endswith(".py") and not fname.startswith("_"):
            py_files.append(os.path.join(agents_dir, fname))
    py_files.sort()
    return py_files


def load_agents(agents_dir: str):
    """Load every agent file in 'agents_dir'; names are the file stems."""
    agent_objs = {}
    for fp in find_agent_files(agents_dir):
        stem = os.path.splitext(os.path.basename(fp))[0]
        agent_objs[stem] = load_agent_from_file(fp, stem)
    return agent_objs


def collect_moves(arena: CoinArena, agent_objs) -> Dict[str, str]:
    """
    Ask every alive agent for its move.
    An agent that raises (bad snapshot or plain bug) stays put this turn.
    """
    moves = {}
    for name, agent in agent_objs.items():
        if name not in arena.alive:
            continue
        gs = arena.get_game_state_for(name)
        try:
            moves[name] = agent.decide_move(gs)
        except Exception:
            logger.exception("Agent %s failed on turn %d, staying put", name, arena.turn)
            moves[name] = "none"
    return moves


# -------------------- Visualization Helpers --------------------
def make_board_image(arena_length, positions, coins, name_to_id):
    """
    Produce a 2D array of IDs, indexed [y, x]:
        0   = empty cell
        1..N = agents
        N+1 = normal coin
        N+2 = gold coin (first entry of 'coins')
    """
    board = np.zeros((arena_length, arena_length), dtype=int)
    coin_value = len(name_to_id) + 1
    for i, (x, y) in enumerate(coins):
        board[y, x] = coin_value + 1 if i == 0 else coin_value
    # agents drawn last so they cover coins they stand on
    for name, (x, y) in positions.items():
        board[y, x] = name_to_id[name]
    return board


# -------------------- Animation --------------------
def animate_battle(arena: CoinArena, agent_objs, fps=6, seed=None):
    random.seed(seed)
    name_to_id = {name: i + 1 for i, name in enumerate(arena.agent_names)}  # 1..N
    N = len(name_to_id)

    fig, ax = plt.subplots(figsize=(6, 6))
    plt.subplots_adjust(top=0.88, bottom=0.15)

    # ---- Unified color palette ----
    base_cmap = plt.colormaps["Set1"]
    agent_colors = base_cmap(np.linspace(0, 1, N, endpoint=False))  # N agent colors
    background = np.array([[0.93, 0.93, 0.93, 1.0]])  # light gray
    coin_color = np.array([[0.75, 0.75, 0.75, 1.0]])  # silver
    gold_color = np.array([[1.0, 0.84, 0.0, 1.0]])  # gold
    # 0=bg, 1..N=agents, N+1=coin, N+2=gold
    colors = np.vstack([background, agent_colors, coin_color, gold_color])
    cmap = mcolors.ListedColormap(colors)
    bounds = np.arange(-0.5, (N + 2) + 1.5, 1)  # integer bins
    norm = mcolors.BoundaryNorm(bounds, cmap.N)

    # ---- Initial grid ----
    img = ax.imshow(
        make_board_image(arena.arena_length, arena.positions, arena.coin_positions(), name_to_id),
        cmap=cmap,
        norm=norm,
        interpolation="nearest",
        animated=True,
    )
    ax.set_xticks(range(arena.arena_length))
    ax.set_yticks(range(arena.arena_length))
    ax.set_xticklabels([])
    ax.set_yticklabels([])
    ax.grid(True, which="both", linestyle="-", linewidth=0.5)

    # ---- Legend ----
    patches = []
    for i, name in enumerate(name_to_id.keys(), start=1):
        patches.append(mpatches.Patch(color=colors[i], label=name))
    patches.append(mpatches.Patch(color=colors[N + 1], label="Coin (2)"))
    patches.append(mpatches.Patch(color=colors[N + 2], label="Gold (5)"))
    ax.legend(
        handles=patches,
        loc="upper right",
        bbox_to_anchor=(1.35, 1.0),
        fontsize=9,
        frameon=False,
    )

    # ---- Scoreboard ----
    score_text = ax.text(
        0.02, -0.08, "", transform=ax.transAxes, ha="left", va="top", fontsize=10
    )

    # ---- Frame update ----
    def update_frame(_):
        if arena.is_over():
            return (img, score_text)

        arena.step(collect_moves(arena, agent_objs))

        # update grid
        board = make_board_image(arena.arena_length, arena.positions, arena.coin_positions(), name_to_id)
        img.set_data(board)

        alive_names = sorted(list(arena.alive))
        scoreboard = " | ".join(
            f"{n}:{arena.strengths.get(n, 0)}" for n in sorted(arena.agent_names)
        )
        ax.set_title(
            f"Turn {arena.turn}/{arena.max_turns}   Alive: {len(alive_names)}   {', '.join(alive_names)}",
            fontsize=11,
        )
        score_text.set_text(f"Coins: {scoreboard}")
        return (img, score_text)

    interval = int(1000 / max(1, fps))
    ani = animation.FuncAnimation(
        fig, update_frame, interval=interval, blit=False, cache_frame_data=False
    )

    plt.tight_layout()
    plt.show()
    return ani


# -------------------- Main --------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a king-of-the-hill coin match.")
    parser.add_argument("--agents-dir", default="agents", help="Directory with agent .py files.")
    parser.add_argument("--grid", type=int, default=10, help="Arena side length (NxN).")
    parser.add_argument("--turns", type=int, default=100, help="Max number of turns.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument("--coins", type=int, default=3, help="Normal coins on the board besides gold.")
    parser.add_argument("--fps", type=int, default=6, help="Animation frames per second.")
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

    agents_dir = args.agents_dir
    if not os.path.isdir(agents_dir):
        print(f"Agents directory '{agents_dir}' does not exist.")
        sys.exit(1)

    agent_objs = load_agents(agents_dir)
    if not agent_objs:
        print("No agent .py files found in the agents directory.")
        print("Add one or more agent files implementing class Agent(name) with decide_move(game_state).")
        sys.exit(1)

    agent_names = list(agent_objs.keys())
    arena = CoinArena(
        arena_length=args.grid,
        agents=agent_names,
        max_turns=args.turns,
        normal_coins=args.coins,
        seed=args.seed,
    )
    arena.reset(agent_names)

    ani = animate_battle(arena, agent_objs, fps=args.fps, seed=args.seed)

    print("Winner(s):", arena.winner())
    print("Final coins:", arena.strengths)


if __name__ == "__main__":
    main()
