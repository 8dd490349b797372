import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from botbrain import GOLD_VALUE, MOVE_VECTORS, NORMAL_COIN_VALUE

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]

VALID_MOVES = set(MOVE_VECTORS.keys())


@dataclass(frozen=True)
class GameState:
    arena_length: int
    you: str
    positions: Dict[str, Coord]     # alive agent positions, (x, y)
    strengths: Dict[str, int]       # coins held per agent
    coins: Tuple[Coord, ...]        # gold coin first
    alive: Set[str]
    turn: int
    max_turns: int


class CoinArena:
    """
    Turn-based king-of-the-hill arena with simultaneous moves and coin collection.

    Rules:
    - Agents are points on a square grid; north is y - 1.
    - Each turn, every ALIVE agent chooses one of: none, north, south, east, west.
    - Moving off the board eliminates the agent.
    - Agents ending on the same cell fight: the single strongest survives and takes
      the losers' coins. If the strongest are tied, everyone on that cell dies.
    - Agents swapping cells pass through each other.
    - Landing on a coin collects it: the gold coin is worth 5, normal coins 2.
      Collected coins respawn elsewhere, so the board always holds the same count.
    - Winner: most coins among the survivors (or among everyone if nobody survives).
    """
    def __init__(
        self,
        arena_length: int = 10,
        agents: Optional[List[str]] = None,
        max_turns: int = 100,
        normal_coins: int = 3,
        seed: Optional[int] = None,
    ):
        if arena_length < 1:
            raise ValueError(f"arena_length must be positive, got {arena_length}")
        if normal_coins < 0:
            raise ValueError(f"normal_coins must be non-negative, got {normal_coins}")
        self.arena_length = arena_length
        self.agent_names = list(agents or [])
        self.max_turns = max_turns
        self.normal_coins = normal_coins
        self.rng = random.Random(seed)

        # dynamic state
        self.turn = 0
        self.positions: Dict[str, Coord] = {}
        self.alive: Set[str] = set()
        self.strengths: Dict[str, int] = {}
        self.gold: Optional[Coord] = None
        self.coins: List[Coord] = []    # normal coins only

    # ----------------- Initialization -----------------
    def reset(self, agents: List[str]):
        cells = self.arena_length * self.arena_length
        if len(agents) + 1 + self.normal_coins > cells:
            raise ValueError(
                f"{len(agents)} agents and {self.normal_coins + 1} coins do not fit "
                f"on a {self.arena_length}x{self.arena_length} board"
            )
        self.agent_names = list(agents)
        self.turn = 0
        self.alive = set(self.agent_names)
        self.strengths = {a: 0 for a in self.agent_names}

        occupied: Set[Coord] = set()
        self.positions = {}
        for a in self.agent_names:
            pos = self._random_free_cell(occupied)
            self.positions[a] = pos
            occupied.add(pos)

        self.gold = None
        self.coins = []
        self.gold = self._random_free_cell(self._occupied())
        for _ in range(self.normal_coins):
            self.coins.append(self._random_free_cell(self._occupied()))

    def _occupied(self) -> Set[Coord]:
        taken = set(self.positions[a] for a in self.alive) | set(self.coins)
        if self.gold is not None:
            taken.add(self.gold)
        return taken

    def _random_free_cell(self, occupied: Set[Coord]) -> Coord:
        while True:
            x = self.rng.randrange(self.arena_length)
            y = self.rng.randrange(self.arena_length)
            if (x, y) not in occupied:
                return (x, y)

    def _respawn_coin(self) -> Optional[Coord]:
        occupied = self._occupied()
        # If board is full, do nothing
        if len(occupied) >= self.arena_length * self.arena_length:
            return None
        return self._random_free_cell(occupied)

    # ----------------- Turn Mechanics -----------------
    def step(self, moves: Dict[str, str]) -> Dict[str, str]:
        """
        Apply one simultaneous-move step.
        Agents missing from 'moves' or sending an unknown label stay put.
        Returns a dict of final outcomes for agents this turn:
            'OK', 'ELIMINATED_WALL', 'ELIMINATED_COLLISION'
        """
        self.turn += 1

        # Compute intended new positions
        intended: Dict[str, Coord] = {}
        for a in sorted(self.alive):
            mv = moves.get(a, "none")
            if mv not in VALID_MOVES:
                logger.debug("Agent %s sent unknown move %r, staying put", a, mv)
                mv = "none"
            x, y = self.positions[a]
            dx, dy = MOVE_VECTORS[mv]
            intended[a] = (x + dx, y + dy)

        outcomes: Dict[str, str] = {a: "OK" for a in self.agent_names}

        # 1) Wall collisions
        eliminated_wall: Set[str] = set()
        for a, (x, y) in intended.items():
            if not (0 <= x < self.arena_length and 0 <= y < self.arena_length):
                eliminated_wall.add(a)
                outcomes[a] = "ELIMINATED_WALL"
                logger.debug("Agent %s walked off the board at turn %d", a, self.turn)

        # 2) Fights: agents sharing a cell after moving
        cell_to_agents: Dict[Coord, List[str]] = {}
        for a, cell in intended.items():
            if a in eliminated_wall:
                continue
            cell_to_agents.setdefault(cell, []).append(a)

        eliminated_collision: Set[str] = set()
        for cell, agents in cell_to_agents.items():
            if len(agents) < 2:
                continue
            top = max(self.strengths[a] for a in agents)
            strongest = [a for a in agents if self.strengths[a] == top]
            winner = strongest[0] if len(strongest) == 1 else None
            for a in agents:
                if a == winner:
                    continue
                eliminated_collision.add(a)
                outcomes[a] = "ELIMINATED_COLLISION"
                if winner is not None:
                    self.strengths[winner] += self.strengths[a]
                    self.strengths[a] = 0
            logger.debug(
                "Fight at %s on turn %d between %s, winner: %s",
                cell, self.turn, ", ".join(agents), winner or "nobody",
            )

        # 3) Update survivors' positions
        self.alive -= (eliminated_wall | eliminated_collision)
        for a in self.alive:
            self.positions[a] = intended[a]
        for a in eliminated_wall | eliminated_collision:
            self.positions.pop(a, None)

        # 4) Coin collection; survivors never share a cell
        for a in sorted(self.alive):
            pos = self.positions[a]
            if pos == self.gold:
                self.strengths[a] += GOLD_VALUE
                self.gold = None
                self.gold = self._respawn_coin()
                logger.debug("Agent %s collected the gold coin at %s", a, pos)
            elif pos in self.coins:
                self.strengths[a] += NORMAL_COIN_VALUE
                self.coins.remove(pos)
                new_coin = self._respawn_coin()
                if new_coin is not None:
                    self.coins.append(new_coin)
                logger.debug("Agent %s collected a coin at %s", a, pos)

        if self.is_over():
            logger.info(
                "Match over after %d turns, alive: %s", self.turn, ", ".join(sorted(self.alive)) or "none"
            )
        return outcomes

    # ----------------- State Exposure -----------------
    def coin_positions(self) -> Tuple[Coord, ...]:
        """All coins with the gold coin first, the order agents receive them in."""
        gold = (self.gold,) if self.gold is not None else ()
        return gold + tuple(self.coins)

    def get_game_state_for(self, you: str) -> GameState:
        """Return a read-only snapshot of the game for agent 'you'."""
        return GameState(
            arena_length=self.arena_length,
            you=you,
            positions=dict(self.positions),
            strengths={a: self.strengths[a] for a in self.alive},
            coins=self.coin_positions(),
            alive=set(self.alive),
            turn=self.turn,
            max_turns=self.max_turns,
        )

    # ----------------- Utility -----------------
    def is_over(self) -> bool:
        if self.turn >= self.max_turns:
            return True
        if len(self.alive) <= 1:
            return True
        return False

    def winner(self):
        """Winner = alive agent with most coins; if all dead, most coins overall."""
        pool = self.alive if self.alive else set(self.agent_names)
        if not pool:
            return []
        best = max(self.strengths[a] for a in pool)
        return sorted(a for a in pool if self.strengths[a] == best)
