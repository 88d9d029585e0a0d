import random

import pytest

from tourneyhost.controllers.seeding import (
    first_round_pairs,
    generate_draw,
    next_power_of_two,
    seeds_from_rankings,
    standard_seed_order,
    team_seeds_from_rankings,
)
from tourneyhost.exceptions import ValidationError
from tourneyhost.models import LeaguePlayerRanking, Team

from conftest import make_players


@pytest.mark.parametrize(
    "n,expected", [(0, 1), (1, 1), (2, 2), (3, 4), (8, 8), (9, 16)]
)
def test_next_power_of_two(n, expected):
    assert next_power_of_two(n) == expected


def test_standard_seed_order():
    assert standard_seed_order(2) == [1, 2]
    assert standard_seed_order(4) == [1, 4, 2, 3]
    assert standard_seed_order(8) == [1, 8, 4, 5, 2, 7, 3, 6]
    order = standard_seed_order(32)
    assert sorted(order) == list(range(1, 33))
    for a, b in zip(order[::2], order[1::2]):
        assert a + b == 33


def test_standard_seed_order_rejects_non_power_of_two():
    with pytest.raises(ValidationError):
        standard_seed_order(6)


@pytest.mark.parametrize("count", range(3, 33))
def test_draw_shape(count):
    ids = [f"p{i}" for i in range(count)]
    draw = generate_draw(ids, rng=random.Random(count))
    assert len(draw) == next_power_of_two(count)
    assert sorted(p for p in draw if p is not None) == sorted(ids)
    for a, b in first_round_pairs(draw):
        assert a is not None or b is not None


def test_seeded_positions_and_byes_to_top_seeds():
    ids = ["s1", "s2", "s3", "x", "y"]
    draw = generate_draw(ids, {"s1": 1, "s2": 2, "s3": 3}, random.Random(4))
    order = standard_seed_order(8)
    assert draw[order.index(1)] == "s1"
    assert draw[order.index(2)] == "s2"
    assert draw[order.index(3)] == "s3"
    pairs = dict((a, b) for a, b in first_round_pairs(draw) if a is not None)
    assert pairs["s1"] is None
    assert pairs["s2"] is None
    assert pairs["s3"] is None


def test_draw_is_reproducible_with_same_rng_seed():
    ids = [f"p{i}" for i in range(11)]
    assert generate_draw(ids, rng=random.Random(7)) == generate_draw(
        ids, rng=random.Random(7)
    )


@pytest.mark.parametrize(
    "seeds",
    [
        {"a": 0},
        {"a": 5},
        {"a": 1, "b": 1},
        {"z": 1},
        {"a": "1"},
    ],
)
def test_invalid_seed_maps(seeds):
    with pytest.raises(ValidationError):
        generate_draw(["a", "b", "c", "d"], seeds)


def test_duplicate_participants_rejected():
    with pytest.raises(ValidationError):
        generate_draw(["a", "b", "a"])


def _ranking(player, rank):
    return LeaguePlayerRanking(player=player, rank=rank, points=100 - rank)


def test_seeds_from_rankings():
    alice, bob, carol, dave = make_players("Alice", "Bob", "Carol", "Dave")
    rankings = [_ranking(carol, 1), _ranking(alice, 2), _ranking(dave, 3)]
    seeds = seeds_from_rankings(["Alice", "Bob", "Carol", "Dave"], rankings, 2)
    assert seeds == {"Carol": 1, "Alice": 2}


def test_team_seeds_need_every_member_ranked():
    alice, bob, carol, dave, erin, frank = make_players(
        "Alice", "Bob", "Carol", "Dave", "Erin", "Frank"
    )
    rankings = [
        _ranking(alice, 1),
        _ranking(bob, 6),
        _ranking(carol, 2),
        _ranking(dave, 3),
        _ranking(erin, 4),
    ]
    teams = [
        Team(event_id="e", player1=alice, player2=bob, id="AB"),
        Team(event_id="e", player1=carol, player2=dave, id="CD"),
        Team(event_id="e", player1=erin, player2=frank, id="EF"),
    ]
    assert team_seeds_from_rankings(teams, rankings, 4) == {"CD": 1, "AB": 2}
