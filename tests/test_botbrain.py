"""Tests for the per-tick decision function in botbrain."""

from __future__ import annotations

import logging
from random import Random

import pytest

from botbrain import (
    MOVE_VECTORS,
    MOVES,
    Entity,
    InvalidSnapshotError,
    Position,
    SelfData,
    adjacent_tiles,
    choose_move,
    classify_foes,
    competitive_rank,
    in_bounds,
    is_adjacent,
    is_killable_by,
    move_options,
    proximity_score,
    rank_by_proximity,
    rank_coins,
    safe_move_options,
    step,
    taxicab_distance,
    validate_snapshot,
)


def bot(strength: int, x: int, y: int) -> Entity:
    return Entity(Position(x, y), strength)


def gold(x: int, y: int) -> Entity:
    return Entity(Position(x, y), 5)


def coin(x: int, y: int) -> Entity:
    return Entity(Position(x, y), 2)


def moves_of(options) -> list[str]:
    return [move for move, _ in options]


class TestGeometry:
    def test_taxicab_distance(self) -> None:
        assert taxicab_distance(Position(0, 0), Position(3, 4)) == 7
        assert taxicab_distance(Position(3, 4), Position(0, 0)) == 7

    def test_proximity_score_is_squared_euclidean(self) -> None:
        assert proximity_score(Position(0, 0), Position(3, 4)) == 25

    def test_adjacent_tiles_fixed_order(self) -> None:
        assert adjacent_tiles(Position(2, 2)) == [
            Position(2, 2),
            Position(2, 1),
            Position(2, 3),
            Position(3, 2),
            Position(1, 2),
        ]

    def test_move_vectors_follow_tile_order(self) -> None:
        assert MOVES == ("none", "north", "south", "east", "west")
        assert MOVE_VECTORS["north"] == (0, -1)

    @pytest.mark.parametrize(
        ("x", "y", "expected"),
        [(0, 0, True), (4, 4, True), (5, 0, False), (0, 5, False), (-1, 2, False)],
    )
    def test_in_bounds_excludes_arena_length(self, x: int, y: int, expected: bool) -> None:
        assert in_bounds(Position(x, y), 5) is expected

    def test_is_adjacent(self) -> None:
        assert is_adjacent(Position(2, 2), Position(2, 3))
        assert not is_adjacent(Position(2, 2), Position(3, 3))
        assert not is_adjacent(Position(2, 2), Position(2, 2))

    def test_rank_by_proximity_is_stable(self) -> None:
        a, b, c = bot(1, 1, 0), bot(2, 0, 1), bot(3, 0, 3)
        assert rank_by_proximity(Position(0, 0), [c, a, b]) == [a, b, c]
        assert rank_by_proximity(Position(0, 0), [b, a, c]) == [b, a, c]


class TestCoinRanking:
    def test_competitive_rank_counts_closer_foes(self) -> None:
        me = bot(0, 0, 0)
        foe = bot(0, 4, 0)
        assert competitive_rank(coin(3, 0), me, [foe]) == 1
        assert competitive_rank(coin(1, 0), me, [foe]) == 0

    def test_equally_close_foe_does_not_outrank_me(self) -> None:
        me = bot(0, 0, 0)
        assert competitive_rank(coin(1, 0), me, [bot(9, 2, 0)]) == 0

    def test_competitive_rank_with_foe_on_my_tile(self) -> None:
        me = bot(0, 1, 1)
        assert competitive_rank(coin(1, 3), me, [bot(0, 1, 1)]) == 0

    def test_uncontested_coin_beats_contested_gold(self) -> None:
        me = bot(0, 0, 0)
        foes = [bot(0, 5, 0)]
        contested_gold = gold(4, 0)
        free_coin = coin(0, 3)
        assert rank_coins(me, foes, [contested_gold, free_coin]) == [free_coin, contested_gold]

    def test_gold_wins_rank_ties(self) -> None:
        me = bot(0, 0, 0)
        far_gold = gold(0, 4)
        near_coin = coin(0, 1)
        assert rank_coins(me, [], [far_gold, near_coin])[0] == far_gold

    def test_closer_coin_wins_remaining_ties(self) -> None:
        me = bot(0, 0, 0)
        foes = [bot(0, 5, 5)]
        contested_gold = gold(5, 4)
        far, near = coin(0, 3), coin(0, 1)
        assert rank_coins(me, foes, [contested_gold, far, near]) == [near, far, contested_gold]

    def test_ranking_is_deterministic(self) -> None:
        me = bot(1, 3, 3)
        foes = [bot(0, 1, 1), bot(4, 6, 2), bot(2, 3, 7)]
        coins = [gold(0, 0), coin(5, 5), coin(2, 6), coin(7, 1), coin(3, 0)]
        assert rank_coins(me, foes, coins) == rank_coins(me, foes, coins)

    def test_no_coins(self) -> None:
        assert rank_coins(bot(0, 0, 0), [bot(1, 1, 1)], []) == []


class TestFoeClassification:
    def test_is_killable_by_is_strict(self) -> None:
        assert is_killable_by(3, 2)
        assert not is_killable_by(2, 2)
        assert not is_killable_by(2, 3)

    def test_split_and_order(self) -> None:
        me = bot(3, 2, 2)
        equal = bot(3, 2, 1)
        poor = bot(1, 3, 3)
        rich = bot(2, 0, 2)
        far = bot(0, 2, 5)
        predators, prey = classify_foes(me, [equal, poor, rich, far])
        assert predators == [equal]
        assert prey == [rich, poor]

    def test_prey_ties_keep_input_order(self) -> None:
        me = bot(4, 2, 2)
        first, second = bot(1, 2, 1), bot(1, 1, 2)
        _, prey = classify_foes(me, [first, second])
        assert prey == [first, second]

    def test_foes_at_threat_radius_are_ignored(self) -> None:
        me = bot(0, 0, 0)
        predators, prey = classify_foes(me, [bot(9, 3, 0), bot(9, 1, 2)])
        assert predators == []
        assert prey == []


class TestSafeMoves:
    def test_move_options_drop_out_of_bounds(self) -> None:
        assert moves_of(move_options(bot(0, 0, 0), 5)) == ["none", "south", "east"]
        assert moves_of(move_options(bot(0, 4, 4), 5)) == ["none", "north", "west"]

    def test_tiles_next_to_predator_are_unsafe(self) -> None:
        options = move_options(bot(0, 2, 2), 5)
        safe = safe_move_options(options, [bot(5, 2, 0)])
        assert moves_of(safe) == ["none", "south", "east", "west"]

    def test_predator_tile_only_allowed_when_relaxed(self) -> None:
        options = move_options(bot(0, 2, 2), 5)
        predators = [bot(5, 2, 1)]
        assert moves_of(safe_move_options(options, predators)) == ["south", "east", "west"]
        relaxed = safe_move_options(options, predators, allow_predator_tiles=True)
        assert moves_of(relaxed) == ["north", "south", "east", "west"]

    @pytest.mark.parametrize(
        "extra",
        [bot(5, 3, 3), bot(5, 0, 2), bot(5, 2, 4), bot(5, 1, 1)],
    )
    def test_adding_a_predator_never_grows_safe_set(self, extra: Entity) -> None:
        options = move_options(bot(0, 2, 2), 5)
        base = [bot(5, 4, 2)]
        before = set(moves_of(safe_move_options(options, base)))
        after = set(moves_of(safe_move_options(options, [*base, extra])))
        assert after <= before


class TestChooseMove:
    def test_adjacent_coin_is_claimed(self) -> None:
        assert step(SelfData(0, 2, 2, 5), [], [(2, 1)]) == "north"

    def test_stronger_neighbour_is_fled(self) -> None:
        # strength 1 beats strength 0, so the foe is a predator, not prey
        assert step(SelfData(0, 2, 2, 5), [(1, 2, 1)], []) == "south"

    def test_adjacent_prey_is_ambushed_in_place(self) -> None:
        assert step(SelfData(3, 2, 2, 5), [(1, 2, 1)], []) == "none"

    def test_prey_two_steps_away_is_pounced(self) -> None:
        assert step(SelfData(3, 2, 2, 5), [(1, 2, 0)], []) == "north"

    def test_richest_prey_first(self) -> None:
        assert step(SelfData(5, 2, 2, 5), [(1, 0, 2), (3, 4, 2)], []) == "east"

    def test_coin_beats_prey(self) -> None:
        assert step(SelfData(5, 2, 2, 5), [(1, 0, 2)], [(2, 3)]) == "south"

    def test_prey_beats_advancing(self) -> None:
        assert step(SelfData(5, 2, 2, 5), [(1, 4, 2)], [(0, 0)]) == "east"

    def test_adjacent_coin_loses_to_uncontested_gold(self) -> None:
        # gold wins the rank tie, so the bot heads for it past the normal coin
        assert step(SelfData(0, 2, 2, 5), [], [(4, 4), (2, 1)]) == "south"

    def test_guarded_coin_is_not_stepped_on(self) -> None:
        move = step(SelfData(0, 2, 2, 5), [(5, 2, 1)], [(2, 1)])
        assert move != "north"
        assert move == "east"

    def test_advance_breaks_distance_ties_by_proximity(self) -> None:
        assert step(SelfData(0, 2, 2, 5), [], [(4, 3)]) == "east"

    def test_advance_breaks_full_ties_by_move_order(self) -> None:
        assert step(SelfData(0, 2, 2, 5), [], [(4, 4)]) == "south"

    def test_deadlock_escape_steps_onto_predator(self) -> None:
        assert step(SelfData(0, 3, 3, 4), [(1, 3, 2), (1, 2, 3)], []) == "north"

    def test_deadlock_escape_still_avoids_predator_neighbourhood(self) -> None:
        me = bot(0, 3, 3)
        predators = [bot(1, 3, 2), bot(1, 2, 3)]
        options = move_options(me, 4)
        assert safe_move_options(options, predators) == []
        relaxed = safe_move_options(options, predators, allow_predator_tiles=True)
        assert moves_of(relaxed) == ["north", "west"]

    def test_cornered_without_escape_stays(self) -> None:
        assert step(SelfData(0, 3, 3, 4), [(1, 3, 2), (1, 2, 2)], []) == "none"

    def test_deadlock_not_used_while_strict_moves_exist(self) -> None:
        # north would land on the predator; three strictly safe tiles remain
        assert step(SelfData(0, 2, 2, 5), [(5, 2, 1)], []) == "south"

    def test_empty_board_idles(self) -> None:
        assert step(SelfData(0, 2, 2, 5), [], []) == "none"

    def test_idle_takes_first_safe_move(self) -> None:
        assert step(SelfData(0, 2, 2, 5), [(5, 2, 0)], []) == "none"
        assert step(SelfData(0, 2, 2, 5), [(5, 1, 2)], []) == "north"

    def test_choose_move_on_entities(self) -> None:
        assert choose_move(bot(0, 0, 0), [], [gold(1, 0)], 3) == "east"

    def test_repeated_calls_are_independent(self) -> None:
        snapshot = (SelfData(2, 1, 1, 6), [(4, 2, 2), (0, 0, 1)], [(5, 5), (1, 3)])
        first = step(*snapshot)
        step(SelfData(0, 0, 0, 3), [], [(0, 1)])
        assert step(*snapshot) == first

    def test_random_snapshots_yield_in_bounds_moves(self) -> None:
        rng = Random(7)
        for _ in range(200):
            length = rng.randint(1, 8)
            me = SelfData(rng.randint(0, 6), rng.randrange(length), rng.randrange(length), length)
            others = [
                (rng.randint(0, 6), rng.randrange(length), rng.randrange(length))
                for _ in range(rng.randint(0, 4))
            ]
            coins = [(rng.randrange(length), rng.randrange(length)) for _ in range(rng.randint(0, 3))]
            move = step(me, others, coins)
            assert move in MOVES
            dx, dy = MOVE_VECTORS[move]
            assert 0 <= me.location_x + dx < length
            assert 0 <= me.location_y + dy < length

    def test_decision_reason_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="botbrain"):
            step(SelfData(0, 2, 2, 5), [], [(2, 1)])
        assert "Claiming coin" in caplog.text


class TestValidation:
    def test_error_is_a_value_error(self) -> None:
        assert issubclass(InvalidSnapshotError, ValueError)

    @pytest.mark.parametrize(
        ("self_data", "others", "coins", "match"),
        [
            (SelfData(-1, 0, 0, 5), [], [], "coins"),
            (SelfData(True, 0, 0, 5), [], [], "coins"),
            (SelfData(None, 0, 0, 5), [], [], "coins"),
            (SelfData(0, 1.5, 0, 5), [], [], "location_x"),
            (SelfData(0, 0, "2", 5), [], [], "location_y"),
            (SelfData(0, 0, 0, 0), [], [], "arena_length"),
            (SelfData(0, 5, 0, 5), [], [], "outside"),
            (SelfData(0, 0, -1, 5), [], [], "outside"),
            (SelfData(0, 0, 0, 5), [(1, 2)], [], r"others\[0\]"),
            (SelfData(0, 0, 0, 5), [(1, 1, 1), (-2, 1, 1)], [], r"others\[1\].strength"),
            (SelfData(0, 0, 0, 5), [(1, 1.0, 1)], [], r"others\[0\].x"),
            (SelfData(0, 0, 0, 5), [], [(1, 2, 3)], r"coins\[0\]"),
            (SelfData(0, 0, 0, 5), [], [(1, 2), (1, None)], r"coins\[1\].y"),
            (
                {"coins": 0, "location_x": 0, "location_y": 0, "arena_length": 3},
                [],
                [],
                "SelfData",
            ),
            (SelfData(0, 0, 0, 3), None, [], "others must be"),
            (SelfData(0, 0, 0, 3), 7, [], "others must be"),
            (SelfData(0, 0, 0, 3), [], None, "coins must be"),
        ],
    )
    def test_malformed_input_is_rejected(self, self_data, others, coins, match) -> None:
        with pytest.raises(InvalidSnapshotError, match=match):
            step(self_data, others, coins)

    def test_missing_self_is_rejected(self) -> None:
        with pytest.raises(InvalidSnapshotError, match="missing"):
            validate_snapshot(None, [], [])

    def test_valid_snapshot_passes(self) -> None:
        validate_snapshot(SelfData(0, 4, 4, 5), [(0, 0, 0)], [(1, 1), [2, 2]])
