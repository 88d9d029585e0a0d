"""Bracket construction for single- and double-elimination events.

Builders only lay out the match graph: round-one matches receive the draw,
every later slot starts empty and is filled by advancement.
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

from typing import List, Optional

from tourneyhost.constants import MIN_PARTICIPANTS
from tourneyhost.controllers.seeding import next_power_of_two
from tourneyhost.exceptions import UnsupportedOperationError, ValidationError
from tourneyhost.models.enums import BracketType, EventVariant
from tourneyhost.models.event import (
    BracketRound,
    DoubleElimEvent,
    Event,
    Round,
    SingleElimEvent,
)
from tourneyhost.models.match import (
    LOSER,
    WINNER,
    FeederLink,
    Match,
    slot_for_position,
)
from tourneyhost.type_hints import A, B, Draw, Slot
from tourneyhost.utils import setup_logger

logger = setup_logger(__name__)


class BracketBuilder:
    """Creates the match graph of elimination events.

    This class is responsible for:
    - Laying out winners rounds from a power-of-two draw
    - Laying out the feed-in losers bracket of double elimination
    - Wiring winner, loser and bronze links between matches
    """

    def build(self, event: Event, draw: Draw) -> None:
        """Build the bracket of ``event`` from ``draw``.

        Raises:
            ValidationError: If the draw holds fewer than three entrants or
                is not a power-of-two long
            UnsupportedOperationError: If the event is not an elimination event
        """
        if event.variant is EventVariant.SINGLE_ELIM:
            self.build_single_elim(event, draw)
        elif event.variant is EventVariant.DOUBLE_ELIM:
            self.build_double_elim(event, draw)
        else:
            raise UnsupportedOperationError(
                f"Cannot build an elimination bracket for a {event.variant.value} event"
            )

    # ========== Single Elimination ==========

    def build_single_elim(self, event: SingleElimEvent, draw: Draw) -> None:
        self._check_draw(draw)
        event.reset_structure()
        winners = self._build_winners_rounds(event, draw)
        event.rounds = [
            Round(index=r, match_ids=[m.id for m in matches])
            for r, matches in enumerate(winners)
        ]
        if event.third_place_match:
            event.bronze_match_id = self._build_bronze_match(event, winners)
        logger.info(
            f"Built single elimination bracket for '{event.name}': "
            f"{len(draw)} positions, {len(winners)} rounds"
        )

    # ========== Double Elimination ==========

    def build_double_elim(self, event: DoubleElimEvent, draw: Draw) -> None:
        """Build winners and feed-in losers brackets.

        Losers bracket layout for ``W`` winners rounds and cutoff
        ``C = max(0, W - 2)``:

        - round 0 pairs the losers of winners round 0;
        - each winners round ``1 <= r < C`` gets a drop round where a
          losers-bracket survivor (slot A) meets the dropped loser (slot B),
          preceded by a halving round whenever the survivor count is larger
          than the number of dropped losers;
        - halving rounds follow until a single losers final remains.
        """
        self._check_draw(draw)
        event.reset_structure()
        winners = self._build_winners_rounds(event, draw)
        event.winners_bracket = [
            BracketRound(
                index=r,
                match_ids=[m.id for m in matches],
                bracket_type=BracketType.WINNERS,
            )
            for r, matches in enumerate(winners)
        ]
        event.feed_in_cutoff_round = event.calculate_feed_in_cutoff()

        losers: List[List[Match]] = []
        feeds: List[Optional[int]] = []
        if event.feed_in_cutoff_round >= 1:
            first = [
                self._new_match(event, BracketType.LOSERS, 0, i)
                for i in range(len(winners[0]) // 2)
            ]
            for match in winners[0]:
                self._link_loser(
                    match, first[match.position // 2], slot_for_position(match.position)
                )
            losers.append(first)
            feeds.append(0)

            for r in range(1, event.feed_in_cutoff_round):
                if len(losers[-1]) > len(winners[r]):
                    losers.append(self._halving_round(event, losers[-1], len(losers)))
                    feeds.append(None)
                drop = [
                    self._new_match(event, BracketType.LOSERS, len(losers), i)
                    for i in range(len(winners[r]))
                ]
                for match in losers[-1]:
                    self._link_winner(match, drop[match.position], A)
                for match in winners[r]:
                    self._link_loser(match, drop[match.position], B)
                losers.append(drop)
                feeds.append(r)

            while len(losers[-1]) > 1:
                losers.append(self._halving_round(event, losers[-1], len(losers)))
                feeds.append(None)

        event.losers_bracket = [
            BracketRound(
                index=j,
                match_ids=[m.id for m in matches],
                bracket_type=BracketType.LOSERS,
                feeds_from_winners_round=feeds[j],
            )
            for j, matches in enumerate(losers)
        ]
        if event.third_place_match:
            event.bronze_match_id = self._build_bronze_match(event, winners)
        logger.info(
            f"Built double elimination bracket for '{event.name}': "
            f"{event.bracket_structure_description()}"
        )

    # ========== Helpers ==========

    def _check_draw(self, draw: Draw) -> None:
        entrants = [p for p in draw if p is not None]
        if len(entrants) < MIN_PARTICIPANTS:
            raise ValidationError(
                f"A bracket needs at least {MIN_PARTICIPANTS} participants, "
                f"got {len(entrants)}"
            )
        if len(draw) != next_power_of_two(len(draw)):
            raise ValidationError(f"Draw size {len(draw)} is not a power of two")

    def _new_match(
        self, event: Event, bracket: BracketType, round_index: int, position: int
    ) -> Match:
        return event.add_match(
            Match(
                event_id=event.id,
                games_required_to_win=event.match_format.games_required_to_win,
                bracket=bracket,
                round_index=round_index,
                position=position,
            )
        )

    def _build_winners_rounds(self, event: Event, draw: Draw) -> List[List[Match]]:
        num_rounds = len(draw).bit_length() - 1
        rounds = [
            [
                self._new_match(event, BracketType.WINNERS, r, i)
                for i in range(len(draw) >> (r + 1))
            ]
            for r in range(num_rounds)
        ]
        for match in rounds[0]:
            match.participant_a = draw[2 * match.position]
            match.participant_b = draw[2 * match.position + 1]
        for r in range(num_rounds - 1):
            for match in rounds[r]:
                self._link_winner(match, rounds[r + 1][match.position // 2])
        return rounds

    def _halving_round(
        self, event: Event, previous: List[Match], round_index: int
    ) -> List[Match]:
        matches = [
            self._new_match(event, BracketType.LOSERS, round_index, i)
            for i in range(len(previous) // 2)
        ]
        for match in previous:
            self._link_winner(match, matches[match.position // 2])
        return matches

    def _build_bronze_match(
        self, event: Event, winners: List[List[Match]]
    ) -> Optional[str]:
        if len(winners) < 2:
            return None
        semifinals = winners[-2]
        bronze = self._new_match(
            event, BracketType.THIRD_PLACE, len(winners) - 1, 0
        )
        for match in semifinals:
            self._link_loser(match, bronze, slot_for_position(match.position))
        return bronze.id

    @staticmethod
    def _link_winner(source: Match, target: Match, slot: Optional[Slot] = None) -> None:
        slot = slot or slot_for_position(source.position)
        source.next_match_id = target.id
        source.next_slot = slot
        target.feeders[slot] = FeederLink(source.id, WINNER)

    @staticmethod
    def _link_loser(source: Match, target: Match, slot: Slot) -> None:
        source.loser_next_match_id = target.id
        source.loser_next_slot = slot
        target.feeders[slot] = FeederLink(source.id, LOSER)
