"""
Per-tick decision function for the king-of-the-hill coin game.

Prioritizes coins it is likely to reach first, dodges bots that could kill it
and pounces on weaker bots along the way. Every call is independent: nothing
is remembered between ticks.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Order matters: earlier moves win ties.
MOVE_VECTORS: Dict[str, Tuple[int, int]] = {
    "none": (0, 0),
    "north": (0, -1),
    "south": (0, 1),
    "east": (1, 0),
    "west": (-1, 0),
}

MOVES: Tuple[str, ...] = tuple(MOVE_VECTORS.keys())

# Foes closer than this (taxicab) can reach a tile next to us this tick.
THREAT_RADIUS = 3

GOLD_VALUE = 5
NORMAL_COIN_VALUE = 2


class InvalidSnapshotError(ValueError):
    """Raised when the tick input cannot describe a real game state."""


@dataclass(frozen=True)
class Position:
    x: int
    y: int


@dataclass(frozen=True)
class Entity:
    """A bot or a coin. Strength is held coins for bots, face value for coins."""

    position: Position
    strength: int


@dataclass(frozen=True)
class SelfData:
    coins: int
    location_x: int
    location_y: int
    arena_length: int


# ----------------- Geometry -----------------
def taxicab_distance(a: Position, b: Position) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def proximity_score(a: Position, b: Position) -> int:
    # Squared euclidean distance; only ever compared, never shown.
    return (a.x - b.x) ** 2 + (a.y - b.y) ** 2


def adjacent_tiles(p: Position) -> List[Position]:
    """Return ``p`` and its four neighbours, in ``MOVES`` order."""
    return [Position(p.x + dx, p.y + dy) for dx, dy in MOVE_VECTORS.values()]


def in_bounds(p: Position, arena_length: int) -> bool:
    return 0 <= p.x < arena_length and 0 <= p.y < arena_length


def is_adjacent(a: Position, b: Position) -> bool:
    return taxicab_distance(a, b) == 1


def rank_by_proximity(origin: Position, entities: Sequence[Entity]) -> List[Entity]:
    """Sort entities by taxicab distance to ``origin``; equal distances keep input order."""
    return sorted(entities, key=lambda e: taxicab_distance(origin, e.position))


# ----------------- Coins -----------------
def competitive_rank(coin: Entity, me: Entity, foes: Sequence[Entity]) -> int:
    """
    Position of ``me`` among all bots ordered by distance to ``coin``.

    ``me`` goes first into the stable sort, so the rank is the number of foes
    strictly closer to the coin. Zero means nobody beats us there.
    """
    ranked = rank_by_proximity(coin.position, [me, *foes])
    return next(i for i, bot in enumerate(ranked) if bot is me)


def rank_coins(me: Entity, foes: Sequence[Entity], coins: Sequence[Entity]) -> List[Entity]:
    """
    Order coins by how likely we are to win the race to them.

    Lower competitive rank first, then higher value (gold beats normal), then
    the coin closer to us. Index 0 is the current target.
    """
    return sorted(
        coins,
        key=lambda coin: (
            competitive_rank(coin, me, foes),
            -coin.strength,
            taxicab_distance(coin.position, me.position),
        ),
    )


# ----------------- Foes -----------------
def is_killable_by(attacker_strength: int, defender_strength: int) -> bool:
    # Equal strength is never a safe kill.
    return defender_strength < attacker_strength


def classify_foes(me: Entity, foes: Sequence[Entity]) -> Tuple[List[Entity], List[Entity]]:
    """
    Split foes within reach this tick into ``(predators, prey)``.

    Prey is sorted richest first; foes of equal strength keep input order.
    """
    nearby = [foe for foe in foes if taxicab_distance(foe.position, me.position) < THREAT_RADIUS]
    predators = [foe for foe in nearby if not is_killable_by(me.strength, foe.strength)]
    prey = [foe for foe in nearby if is_killable_by(me.strength, foe.strength)]
    prey.sort(key=lambda foe: -foe.strength)
    return predators, prey


# ----------------- Move selection -----------------
def move_options(me: Entity, arena_length: int) -> List[Tuple[str, Position]]:
    """Pair every in-bounds neighbouring tile with the move that reaches it."""
    return [
        (move, tile)
        for move, tile in zip(MOVES, adjacent_tiles(me.position))
        if in_bounds(tile, arena_length)
    ]


def safe_move_options(
    options: Sequence[Tuple[str, Position]],
    predators: Sequence[Entity],
    allow_predator_tiles: bool = False,
) -> List[Tuple[str, Position]]:
    """
    Drop options a predator can collide with this tick.

    A tile is unsafe when it is next to a predator or, unless
    ``allow_predator_tiles`` is set, when a predator stands on it.
    """
    safe = []
    for move, tile in options:
        threatened = any(
            is_adjacent(tile, foe.position)
            or (not allow_predator_tiles and tile == foe.position)
            for foe in predators
        )
        if not threatened:
            safe.append((move, tile))
    return safe


def _advance_toward(target: Position, options: Sequence[Tuple[str, Position]]) -> str:
    best_move, best_tile = options[0]
    best_key = (taxicab_distance(best_tile, target), proximity_score(best_tile, target))
    for move, tile in options[1:]:
        key = (taxicab_distance(tile, target), proximity_score(tile, target))
        if key < best_key:
            best_move, best_key = move, key
    return best_move


def choose_move(
    me: Entity,
    foes: Sequence[Entity],
    coins: Sequence[Entity],
    arena_length: int,
) -> str:
    """
    Pick this tick's move from already-built entities.

    Order of preference: step onto the target coin, get next to the richest
    reachable prey, close in on the target coin, stay idle.
    """
    predators, prey = classify_foes(me, foes)
    ranked = rank_coins(me, foes, coins)
    target: Optional[Position] = ranked[0].position if ranked else None

    options = move_options(me, arena_length)
    safe = safe_move_options(options, predators)
    if not safe:
        # Cornered: a predator lunging at us while we step onto its tile
        # passes straight through, so only its neighbourhood stays off limits.
        safe = safe_move_options(options, predators, allow_predator_tiles=True)
        if not safe:
            logger.debug("No survivable tile around %s, staying put", me.position)
            return "none"
        logger.debug("Deadlock escape at %s, %d option(s) left", me.position, len(safe))

    if target is not None:
        for move, tile in safe:
            if tile == target:
                logger.debug("Claiming coin at %s with %s", target, move)
                return move

    for foe in prey:
        for move, tile in safe:
            if is_adjacent(tile, foe.position):
                logger.debug("Hunting prey of strength %d at %s with %s", foe.strength, foe.position, move)
                return move

    if target is not None:
        move = _advance_toward(target, safe)
        logger.debug("Advancing toward coin at %s with %s", target, move)
        return move

    logger.debug("Nothing to chase, idling with %s", safe[0][0])
    return safe[0][0]


# ----------------- Input handling -----------------
def _require_int(value, field: str, minimum: Optional[int] = None) -> int:
    # bool is an int subclass but never a valid coordinate or strength
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSnapshotError(f"{field} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise InvalidSnapshotError(f"{field} must be >= {minimum}, got {value}")
    return value


def validate_snapshot(
    self_data: SelfData,
    others: Sequence[Sequence[int]],
    coins: Sequence[Sequence[int]],
) -> None:
    """Raise ``InvalidSnapshotError`` unless the tick input is well formed."""
    if self_data is None:
        raise InvalidSnapshotError("self data is missing")
    if not isinstance(self_data, SelfData):
        raise InvalidSnapshotError(f"self data must be a SelfData, got {type(self_data).__name__}")
    if not isinstance(others, (tuple, list)):
        raise InvalidSnapshotError(f"others must be a list of (strength, x, y), got {others!r}")
    if not isinstance(coins, (tuple, list)):
        raise InvalidSnapshotError(f"coins must be a list of (x, y), got {coins!r}")
    arena_length = _require_int(self_data.arena_length, "arena_length", minimum=1)
    _require_int(self_data.coins, "coins", minimum=0)
    x = _require_int(self_data.location_x, "location_x")
    y = _require_int(self_data.location_y, "location_y")
    if not in_bounds(Position(x, y), arena_length):
        raise InvalidSnapshotError(
            f"own location ({x}, {y}) is outside an arena of length {arena_length}"
        )

    for i, other in enumerate(others):
        if not isinstance(other, (tuple, list)) or len(other) != 3:
            raise InvalidSnapshotError(f"others[{i}] must be (strength, x, y), got {other!r}")
        strength, ox, oy = other
        _require_int(strength, f"others[{i}].strength", minimum=0)
        _require_int(ox, f"others[{i}].x")
        _require_int(oy, f"others[{i}].y")

    for i, coin in enumerate(coins):
        if not isinstance(coin, (tuple, list)) or len(coin) != 2:
            raise InvalidSnapshotError(f"coins[{i}] must be (x, y), got {coin!r}")
        _require_int(coin[0], f"coins[{i}].x")
        _require_int(coin[1], f"coins[{i}].y")


def build_entities(
    self_data: SelfData,
    others: Sequence[Sequence[int]],
    coins: Sequence[Sequence[int]],
) -> Tuple[Entity, List[Entity], List[Entity]]:
    me = Entity(Position(self_data.location_x, self_data.location_y), self_data.coins)
    foes = [Entity(Position(x, y), strength) for strength, x, y in others]
    coin_entities = [
        Entity(Position(x, y), GOLD_VALUE if i == 0 else NORMAL_COIN_VALUE)
        for i, (x, y) in enumerate(coins)
    ]
    return me, foes, coin_entities


def step(
    self_data: SelfData,
    others: Sequence[Sequence[int]],
    coins: Sequence[Sequence[int]],
) -> str:
    """
    Decide one tick.

    ``others`` holds ``(strength, x, y)`` per other bot and ``coins`` holds
    ``(x, y)`` per coin with the gold coin first. Returns one of ``MOVES``;
    raises ``InvalidSnapshotError`` on malformed input.
    """
    validate_snapshot(self_data, others, coins)
    me, foes, coin_entities = build_entities(self_data, others, coins)
    return choose_move(me, foes, coin_entities, self_data.arena_length)
