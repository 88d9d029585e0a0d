"""Seeding and draw generation for elimination brackets.

Positions follow the standard seed order: seed 1 and seed 2 can only meet in
the final, and every first-round pair of seeds sums to ``bracket_size + 1``.
Byes take the weakest seed numbers, so a bye always faces a top seed and two
byes never meet.
"""

# Tourney Host
# Copyright (C) 2025  Tourney Host developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import random
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from tourneyhost.exceptions import ValidationError
from tourneyhost.models.player import Team
from tourneyhost.models.tournament import LeaguePlayerRanking
from tourneyhost.type_hints import Draw, ParticipantId, SeedMap
from tourneyhost.utils import setup_logger
from tourneyhost.utils.validation import require, validate_seed_map

logger = setup_logger(__name__)


def next_power_of_two(n: int) -> int:
    """Smallest power of two that is >= n (1 for n < 1)."""
    power = 1
    while power < n:
        power *= 2
    return power


def standard_seed_order(bracket_size: int) -> List[int]:
    """Seed number sitting at each draw position.

    Built by repeated interleaving: each seed ``s`` in the previous order is
    followed by its complement ``size + 1 - s``.

    Example:
        >>> standard_seed_order(8)
        [1, 8, 4, 5, 2, 7, 3, 6]
    """
    if bracket_size < 1 or bracket_size & (bracket_size - 1):
        raise ValidationError(f"Bracket size must be a power of two: {bracket_size}")
    order = [1]
    while len(order) < bracket_size:
        size = len(order) * 2
        order = [seed for s in order for seed in (s, size + 1 - s)]
    return order


def generate_draw(
    participant_ids: Sequence[ParticipantId],
    seeds: Optional[Mapping[ParticipantId, int]] = None,
    rng: Optional[random.Random] = None,
) -> Draw:
    """Place participants into a power-of-two draw.

    Args:
        participant_ids: Entrants, in registration order
        seeds: Optional participant -> seed number map
        rng: Random source for ordering unseeded participants

    Returns:
        List of length ``next_power_of_two(len(participant_ids))``; each
        participant appears once, ``None`` marks a bye.

    Raises:
        ValidationError: For duplicate entrants or a malformed seed map
    """
    participants = list(participant_ids)
    if len(set(participants)) != len(participants):
        raise ValidationError("Draw contains duplicate participants")
    seed_map: SeedMap = require(validate_seed_map(seeds or {}, participants))
    rng = rng or random.Random()

    bracket_size = next_power_of_two(len(participants))
    position_of_seed = {
        seed: position
        for position, seed in enumerate(standard_seed_order(bracket_size))
    }
    draw: Draw = [None] * bracket_size

    for participant_id, seed in seed_map.items():
        draw[position_of_seed[seed]] = participant_id

    unseeded = [p for p in participants if p not in seed_map]
    rng.shuffle(unseeded)
    free_seeds = [
        seed for seed in range(1, bracket_size + 1) if seed not in seed_map.values()
    ]
    for participant_id, seed in zip(unseeded, free_seeds):
        draw[position_of_seed[seed]] = participant_id

    logger.debug(
        f"Draw of {len(participants)} into {bracket_size} positions "
        f"({len(seed_map)} seeded, {bracket_size - len(participants)} byes)"
    )
    return draw


def first_round_pairs(draw: Draw) -> List[tuple]:
    """Pairs (position 2i, position 2i+1) that meet in round one."""
    return [(draw[i], draw[i + 1]) for i in range(0, len(draw), 2)]


# ========== Seeds From League Rankings ==========


def _rank_lookup(rankings: Iterable[LeaguePlayerRanking]) -> Dict[str, int]:
    return {ranking.player_id: ranking.rank for ranking in rankings}


def seeds_from_rankings(
    player_ids: Sequence[str],
    rankings: Iterable[LeaguePlayerRanking],
    number_of_seeds: int,
) -> SeedMap:
    """Seed the best-ranked entrants 1..N by their league rank.

    Entrants without a league ranking are never seeded.
    """
    ranks = _rank_lookup(rankings)
    ranked = sorted((p for p in player_ids if p in ranks), key=lambda p: ranks[p])
    return {p: seed for seed, p in enumerate(ranked[:number_of_seeds], start=1)}


def team_seeds_from_rankings(
    teams: Sequence[Team],
    rankings: Iterable[LeaguePlayerRanking],
    number_of_seeds: int,
) -> SeedMap:
    """Seed teams by the average league rank of their members.

    A team is only seeded when every member holds a ranking; equal averages
    keep team order.
    """
    ranks = _rank_lookup(rankings)
    averages = {}
    for team in teams:
        member_ranks = [ranks.get(p.id) for p in team.players]
        if None in member_ranks:
            continue
        averages[team.id] = sum(member_ranks) / len(member_ranks)
    ranked = sorted(averages, key=lambda team_id: averages[team_id])
    return {t: seed for seed, t in enumerate(ranked[:number_of_seeds], start=1)}
